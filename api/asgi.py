"""
ASGI entry point for running Service D under an external server:

  uvicorn api.asgi:app
"""

from api.main import create_app

app = create_app()
