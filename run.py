import uvicorn

from marketplace.app import create_app
from marketplace.config import settings

app = create_app()


if __name__ == "__main__":
    uvicorn.run("run:app", host="0.0.0.0", port=8000, reload=settings.debug)
