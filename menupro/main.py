# Load environment variables FIRST, before any module imports that need them
from dotenv import load_dotenv
load_dotenv()

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from . import db
from .config import CORS_ORIGINS
from .logging_config import setup_logging
from .rate_limit import limiter
from .routes import cart_router, half_half_cart_router, half_half_router

# Configure logging at module load time
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Production schemas are managed by Alembic (`alembic upgrade head`);
    # create_all only fills in missing tables for local SQLite databases.
    db.init_db()
    logger.info("MenuPro API started")
    yield


app = FastAPI(
    title="MenuPro API",
    description="Half-and-half pizza pricing and cart API for the MenuPro digital menu",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Half-and-Half", "description": "Half-and-half pizza sizes, options and quotes"},
        {"name": "Cart", "description": "Customer cart endpoints"},
    ],
)


# ---------- Request ID Middleware ----------
# Adds a unique request ID to each request for debugging and log correlation


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each request.
    The ID is available in request.state.request_id and returned in X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestIDMiddleware)

# Add rate limit exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy"}


# ---------- Router Registration ----------

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(half_half_router)
api_v1_router.include_router(half_half_cart_router)
api_v1_router.include_router(cart_router)
app.include_router(api_v1_router)

# Also mount at root for backward compatibility
app.include_router(half_half_router)
app.include_router(half_half_cart_router)
app.include_router(cart_router)
