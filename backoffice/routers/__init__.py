# Routers package
from . import auth_router
from . import tracks_router
from . import courses_router
from . import learners_router
from . import invoices_router
from . import dashboard_router

__all__ = [
    "auth_router",
    "tracks_router",
    "courses_router",
    "learners_router",
    "invoices_router",
    "dashboard_router",
]
