from fastapi import APIRouter

from app.api.v1 import admin, auth, deadlines, holidays, team

api_router = APIRouter()

api_router.include_router(deadlines.router)
api_router.include_router(holidays.router)
api_router.include_router(auth.router)
api_router.include_router(team.router)
api_router.include_router(admin.router)
