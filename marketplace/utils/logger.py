import logging
import sys

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class Logger:
    """
    Thin wrapper over ``logging`` with one stdout handler per named logger.

    Names are namespaced under ``marketplace.`` so the whole service can be
    silenced or re-routed through a single parent logger.
    """

    def __init__(self, name: str = "main", level: int = logging.DEBUG):
        self.name = name if name.startswith("marketplace") else f"marketplace.{name}"
        self._logger = logging.getLogger(self.name)
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
            self._logger.addHandler(handler)
            self._logger.setLevel(level)

    def info(self, msg: str, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        """Log at error level with the active traceback attached."""
        self._logger.exception(msg, *args, **kwargs)
