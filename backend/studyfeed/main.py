import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studyfeed.api.achievements import router as achievements_router
from studyfeed.api.chat import router as chat_router
from studyfeed.api.feed import router as feed_router
from studyfeed.api.follows import router as follows_router
from studyfeed.api.goals import router as goals_router
from studyfeed.api.materials import router as materials_router
from studyfeed.api.profiles import router as profiles_router
from studyfeed.api.records import router as records_router
from studyfeed.api.stats import router as stats_router
from studyfeed.core.config import settings
from studyfeed.db import Base, engine
# import ensures tables are registered
from studyfeed.models import (  # noqa: F401
    achievement,
    comment,
    follow,
    goal,
    material,
    profile,
    study_record,
    target_school,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# HTTP client debug logs are noisy
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


app = FastAPI(title="studyfeed")

origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_ERROR", "message": str(exc)}},
    )


# Create DB tables on startup
Base.metadata.create_all(bind=engine)

app.include_router(feed_router)
app.include_router(records_router)
app.include_router(goals_router)
app.include_router(stats_router)
app.include_router(materials_router)
app.include_router(profiles_router)
app.include_router(follows_router)
app.include_router(achievements_router)
app.include_router(chat_router)


@app.get("/")
def root():
    return {"message": "studyfeed backend is running"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
