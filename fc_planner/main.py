from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from fc_planner.config import Settings, get_settings
from fc_planner.core.logging import setup_logging
from fc_planner.routers import health_router, plans_router

setup_logging()
settings: Settings = get_settings()

app = FastAPI(title=settings.APP_NAME)

app.include_router(health_router)
app.include_router(plans_router)


@app.get("/")
def root():
    return RedirectResponse(url="/plans/summary", status_code=302)


__all__ = ["app", "root"]
