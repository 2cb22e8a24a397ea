from fastapi import APIRouter
from app.api.admin import candidaturas

router = APIRouter()
router.include_router(candidaturas.router, prefix="/candidaturas", tags=["AdminCandidaturas"])
