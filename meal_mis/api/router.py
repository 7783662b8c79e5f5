"""Top-level API router."""

from fastapi import APIRouter

from meal_mis.api.routes.branding import router as branding_router
from meal_mis.api.routes.complaints import router as complaints_router
from meal_mis.api.routes.dashboards import router as dashboards_router
from meal_mis.api.routes.data_entry import router as data_entry_router
from meal_mis.api.routes.exports import router as exports_router
from meal_mis.api.routes.health import router as health_router
from meal_mis.api.routes.projects import router as projects_router
from meal_mis.api.routes.reports import router as reports_router
from meal_mis.api.routes.users import router as users_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(projects_router)
api_router.include_router(branding_router)
api_router.include_router(reports_router)
api_router.include_router(exports_router)
api_router.include_router(dashboards_router)
api_router.include_router(complaints_router)
api_router.include_router(data_entry_router)
api_router.include_router(users_router)
