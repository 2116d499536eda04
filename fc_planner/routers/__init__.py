from fc_planner.routers.health import router as health_router
from fc_planner.routers.plans import router as plans_router

__all__ = ["health_router", "plans_router"]
