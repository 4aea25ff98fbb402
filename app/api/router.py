from fastapi import APIRouter
from app.api.routes.sections import router as sections_router
from app.api.routes.check_runs import router as check_runs_router
from app.api.routes.admin_runs import router as admin_runs_router
from app.api.routes.admin_structure import router as admin_structure_router
from app.api.routes.users import router as users_router
from app.api.routes.dashboard import router as dashboard_router

api_router = APIRouter()

api_router.include_router(sections_router, prefix="/sections", tags=["sections"])
api_router.include_router(check_runs_router, prefix="/check-runs", tags=["check-runs"])
api_router.include_router(admin_runs_router, prefix="/admin/check-runs", tags=["admin"])
api_router.include_router(admin_structure_router, prefix="/admin", tags=["admin"])
api_router.include_router(dashboard_router, prefix="/admin/dashboard", tags=["📊 Dashboard"])
api_router.include_router(users_router, tags=["users"])
