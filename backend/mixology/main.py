from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mixology.api.routes import router as api_router
from mixology.config import settings
from mixology.logging import configure_logging, get_logger
from mixology.services.catalog.loader import load_catalog

app = FastAPI(title="Mixology API")
logger = get_logger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
def on_startup() -> None:
    configure_logging()
    logger.info("startup: loading catalog")
    app.state.catalog = load_catalog(settings.catalog_path)


app.include_router(api_router)
