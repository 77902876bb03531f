import os
import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError

import config
import database
from logging_config import setup_logging
from routes import analytics, auth, categories, clients, contact, error_message, experience, home, projects, settings, skills
from security import ensure_admin

setup_logging(config.LOG_LEVEL)
logger = structlog.get_logger(__name__)

STARTED_AT = time.time()
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Portfolio API starting", version=VERSION)
    os.makedirs(config.UPLOADS_DIR, exist_ok=True)
    if database.db is not None:
        try:
            database.ensure_indexes()
            ensure_admin()
        except PyMongoError as e:
            logger.error("Startup database setup failed", error=str(e))
    yield
    logger.info("Portfolio API shutting down")


# ==================
# FastAPI app config
# ==================
app = FastAPI(title="Portfolio API", version=VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials="*" not in config.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/uploads", StaticFiles(directory=config.UPLOADS_DIR, check_dir=False), name="uploads")

for module in (auth, settings, categories, skills, experience, projects, clients, contact, analytics, home):
    app.include_router(module.router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response


# ==============
# Error handling
# ==============
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": error_message(exc), "errors": jsonable_encoder(exc.errors())})


@app.exception_handler(database.DatabaseUnavailable)
async def database_unavailable_handler(request: Request, exc: database.DatabaseUnavailable):
    logger.error("Database not available", path=request.url.path)
    return JSONResponse(status_code=503, content={"detail": "Database not available"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


# ======
# Routes
# ======
@app.get("/")
def root():
    return {
        "message": "Welcome to the Portfolio API",
        "status": "online",
        "version": VERSION,
        "endpoints": [
            "/api/auth",
            "/api/contact",
            "/api/skills",
            "/api/categories",
            "/api/experience",
            "/api/projects",
            "/api/clients",
            "/api/settings",
            "/api/analytics",
            "/api/home",
        ],
    }


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()), "uptime": time.time() - STARTED_AT}


@app.get("/test")
def test_database():
    ok = database.db is not None
    collections = []
    if ok:
        try:
            collections = database.db.list_collection_names()
        except Exception as e:
            logger.warning("Listing collections failed", error=str(e))
    return {"backend": "running", "database": "connected" if ok else "not-available", "collections": collections[:10]}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
