# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.logging_config import configure_logging
from config.settings import get_settings
from database import init_db
from middleware.rate_limit import limiter
from middleware.request_logging import RequestLoggingMiddleware
from routers.analysis_routes import router as analysis_router
from routers.notes_routes import router as notes_router
from services.ai.gemini_client import GeminiClient

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    try:
        app.state.analysis_client = GeminiClient()
    except ValueError as exc:
        # notes keep working; /api/analysis answers 503 until configured
        logger.error("startup.gemini_unavailable reason=%s", exc)
        app.state.analysis_client = None
    yield
    app.state.analysis_client = None


app = FastAPI(title="Research Assistant API", lifespan=lifespan)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # the browser client reads `message` from error bodies
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(analysis_router, prefix="/api/analysis")
app.include_router(notes_router, prefix="/api/notes")


@app.get("/health")
def health():
    return {"status": "ok"}
