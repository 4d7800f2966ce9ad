from fastapi import APIRouter

from rubrik_stats.api.v1.endpoints import stats

api_router = APIRouter()
api_router.include_router(stats.router)
