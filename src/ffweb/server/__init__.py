"""Development backend implementing the ffweb REST and WebSocket contract.

Usage:
    from ffweb.server import BackendStore, create_app

    app = create_app(BackendStore(), simulate=True)
    web.run_app(app, port=8080)
"""

from .app import create_app
from .progress import ProgressHub
from .simulator import ProgressSimulator
from .store import BackendStore

__all__ = [
    "BackendStore",
    "ProgressHub",
    "ProgressSimulator",
    "create_app",
]
