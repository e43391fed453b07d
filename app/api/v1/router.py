from fastapi import APIRouter

from app.api.routers import claims, insurers, policies

api_router = APIRouter()

api_router.include_router(insurers.router)
api_router.include_router(policies.router)
api_router.include_router(claims.router)
