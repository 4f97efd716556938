"""ASGI entry point for the confirmation gate.

Run with ``uvicorn src.main:app``. Environment, logging and message
catalogues are set up at import time; the confirmation stores themselves are
built by the application lifespan.
"""

from src.core.application import create_application
from src.core.initialization import initialize_application

initialize_application()

app = create_application()
