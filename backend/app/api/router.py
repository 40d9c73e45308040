from fastapi import APIRouter

from app.api.routes.directory import router as directory_router
from app.api.routes.evaluations import router as evaluations_router

api_router = APIRouter()
api_router.include_router(directory_router)
api_router.include_router(evaluations_router)


@api_router.get("/healthz")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
