"""Multi-vendor marketplace API: identity, roles and access control."""

__version__ = "1.0.0"
