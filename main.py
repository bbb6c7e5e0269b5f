import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from database.db import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ✅ quiet third-party loggers
for noisy in ("httpcore", "httpx", "weasyprint", "fontTools"):
    logging.getLogger(noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# ✅ middlewares
from middlewares.timing import TimingMiddleware  # noqa: E402
from middlewares.error_handler import add_error_handlers  # noqa: E402

# ✅ routers
from routers import (  # noqa: E402
    auth, users, schools, classes, students,
    notes, comments, notifications, reports, dashboard,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s %s started (env=%s)", settings.APP_TITLE, settings.APP_VERSION, settings.ENV)
    yield


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# ✅ CORS (frontend portal)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ request latency (X-Latency-Ms header + access log)
app.add_middleware(TimingMiddleware)

# ✅ global error handlers (consistent JSON error format)
add_error_handlers(app)

# ✅ /v1 routers
app.include_router(auth.router,          prefix="/v1")
app.include_router(users.router,         prefix="/v1")
app.include_router(schools.router,       prefix="/v1")
app.include_router(classes.router,       prefix="/v1")
app.include_router(students.router,      prefix="/v1")
app.include_router(notes.router,         prefix="/v1")
app.include_router(comments.router,      prefix="/v1")
app.include_router(notifications.router, prefix="/v1")
app.include_router(reports.router,       prefix="/v1")
app.include_router(dashboard.router,     prefix="/v1")


# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


# ✅ root
@app.get("/")
def root():
    return {"message": "Parent-Teacher Communication API"}
