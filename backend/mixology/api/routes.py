from fastapi import APIRouter

from mixology.api.analyze import router as analyze_router
from mixology.api.cocktails import router as cocktails_router
from mixology.api.health import router as health_router
from mixology.api.suggestions import router as suggestions_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(cocktails_router)
router.include_router(suggestions_router)
router.include_router(analyze_router)
