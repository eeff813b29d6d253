import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from database.db import Base, engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# quiet HTTP client debug logs
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# ✅ middleware
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ models must be imported before create_all
from models import users, od_requests as od_request_models, meetings as meeting_models, staybacks as stayback_models  # noqa: F401

# ✅ routers
from routers import (
    auth, od_requests, od_form, meetings, staybacks, students, reports,
)


# ✅ tables are created on startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.APP_TITLE} started ({settings.ENV})")
    yield


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# ✅ CORS (frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ request latency (X-Latency-Ms response header)
app.add_middleware(TimingMiddleware)

# ✅ global error handlers (one JSON error envelope)
add_error_handlers(app)

# ✅ routers (each carries its own /api/... prefix)
app.include_router(auth.router)
app.include_router(od_requests.router)
app.include_router(od_form.router)
app.include_router(meetings.router)
app.include_router(staybacks.router)
app.include_router(students.router)
app.include_router(reports.router)


# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


# ✅ root
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - {settings.APP_DESCRIPTION}"}
