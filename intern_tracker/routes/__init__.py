from .auth import router as auth_router
from .students import router as students_router
from .daily_reports import router as daily_reports_router
from .progress import router as progress_router
from .workflows import router as workflows_router
from .reference import router as reference_router
from .reports import router as reports_router

__all__ = [
    'auth_router', 'students_router', 'daily_reports_router', 'progress_router',
    'workflows_router', 'reference_router', 'reports_router'
]
