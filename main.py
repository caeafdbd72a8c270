from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from src.api.error_handlers import register_exception_handlers
from src.api.routes_videos import router as videos_router
from src.core.config import settings
from src.core.dependencies import get_object_store

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Video library starting (env=%s, bucket=%s)", settings.APP_ENV, settings.AWS_S3_BUCKET)
    if not settings.has_credentials and not settings.is_production:
        logger.warning("AWS credentials are not configured; storage calls will fail outside production")
    yield
    if get_object_store.cache_info().currsize:
        get_object_store().close()


app = FastAPI(title="Video Library", lifespan=lifespan)

app.include_router(videos_router, prefix="/videos", tags=["videos"])
register_exception_handlers(app)

# Allow CORS (for frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port)
