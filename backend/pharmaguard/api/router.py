from fastapi import APIRouter
from pharmaguard.api.routes import analysis, reference, history

api_router = APIRouter()

api_router.include_router(analysis.router, tags=["Analysis"])
api_router.include_router(reference.router, tags=["Reference"])
api_router.include_router(history.router, tags=["History"])
