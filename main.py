import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

import database
from config import settings
from exceptions import PortalError
from logging_config import logger
from middleware import RequestLoggingMiddleware
from routers import api_router


def ensure_indexes():
    if database.db is None:
        return
    db = database.db
    try:
        db["user"].create_index("phone", unique=True)
        db["user"].create_index("email", unique=True, partialFilterExpression={"email": {"$type": "string"}})
        db["event"].create_index("slug", unique=True)
        db["event"].create_index([("status", 1), ("start_date", 1)])
        db["donation"].create_index([("user_id", 1), ("donation_date", -1)])
        db["fee"].create_index([("user_id", 1), ("year", -1), ("month", -1)])
        db["sitecontent"].create_index("section", unique=True)
        db["notification"].create_index([("user_id", 1), ("created_at", -1)])
    except PyMongoError as e:
        # Keep serving; database-backed requests will answer 503 until Mongo is back
        logger.error(f"Could not create indexes: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.uses_default_secret:
        logger.warning("JWT_SECRET is not set. Using the default development secret; set JWT_SECRET in .env")
    ensure_indexes()
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield
    if database.client is not None:
        database.client.close()


app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan, redirect_slashes=False)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# ===== Exception handlers =====
@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    return JSONResponse(status_code=400, content={"message": "Duplicate value for a unique field"})


@app.exception_handler(ConnectionFailure)
async def connection_failure_handler(request: Request, exc: ConnectionFailure):
    logger.error(f"MongoDB unavailable: {exc}")
    return JSONResponse(status_code=503, content={"message": "Database connection is not available"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"message": str(exc) if settings.DEBUG else "Internal server error"},
    )


app.include_router(api_router)

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/")
def read_root():
    return {"name": settings.APP_NAME, "status": "ok"}


@app.get("/api/health")
def health_check():
    response = {
        "status": "ok",
        "backend": "running",
        "database": "not available",
        "database_name": None,
        "collections": [],
    }
    if database.db is not None:
        response["database_name"] = database.db.name
        try:
            response["collections"] = database.db.list_collection_names()[:10]
            response["database"] = "connected"
        except PyMongoError as e:
            response["database"] = f"error: {str(e)[:80]}"
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
