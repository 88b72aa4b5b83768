"""Bot handlers."""

from aiogram import Router

from .report import router as report_router
from .cashbox import router as cashbox_router
from .checklist import router as checklist_router
from .start import router as start_router


def setup_routers() -> Router:
    """Setup and return main router with all handlers.

    Flow routers go first so their state-specific /cancel and /skip win over
    the fallbacks in the start router.
    """
    router = Router()
    router.include_router(report_router)
    router.include_router(cashbox_router)
    router.include_router(checklist_router)
    router.include_router(start_router)
    return router
