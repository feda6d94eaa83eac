from fastapi import APIRouter

router = APIRouter()

from . import routes_commands, routes_messages, routes_health  # noqa: F401,E402

router.include_router(routes_commands.router)
router.include_router(routes_messages.router)
router.include_router(routes_health.router)
