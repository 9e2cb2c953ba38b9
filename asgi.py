"""
asgi.py -- ASGI entry point for the todo app.

Run with:  uvicorn asgi:app --reload

SECRET_KEY must be set in the environment (or .env). Without it the import
below fails: api/main.py reads the CORS origins from Settings at import time,
and Settings refuses to exist without a signing secret.
"""

from api.main import app

__all__ = ["app"]
