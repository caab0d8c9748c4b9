import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import ALLOWED_ORIGINS, LOG_LEVEL, LOWER_INTERACTIVE_COMPONENTS
from .domain.mjml.errors import MjmlParseError, SchemaViolation
from .domain.mjml.router import router as mjml_router
from .domain.templates.router import router as templates_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Mail Studio API starting up...")
    if not LOWER_INTERACTIVE_COMPONENTS:
        logger.warning("Lowering disabled - accordion and carousel will be passed to the engine as-is")
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Mail Studio API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(MjmlParseError)
async def parse_error_handler(request: Request, exc: MjmlParseError):
    """Unparseable markup: report the parser message and position"""
    logger.info(f"Parse error for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "line": exc.line, "column": exc.column},
    )


@app.exception_handler(SchemaViolation)
async def schema_violation_handler(request: Request, exc: SchemaViolation):
    logger.info(f"Schema violation for {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    duration_ms = (time.time() - start_time) * 1000
    logger.debug(f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.1f}ms)")
    return response


# CORS Configuration
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(mjml_router)
app.include_router(templates_router)


@app.get("/")
def root():
    return {"message": "Mail Studio API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
