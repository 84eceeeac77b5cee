"""Entry point for the GeoVault service."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from geovault.config import GEOVAULT_HOST, GEOVAULT_PORT, get_encryption_key_text
from geovault.crypto import CryptoEngine, load_key
from geovault.database import init_database
from geovault.routes.audit_routes import router as audit_router
from geovault.routes.auth_routes import router as auth_router
from geovault.routes.diagnostics_routes import router as diagnostics_router
from geovault.routes.file_routes import router as file_router
from geovault.routes.zone_routes import router as zone_router
from geovault.service_locator import set_crypto_engine
from geovault.exceptions import (
    GeoVaultError,
    InvalidCoordinate,
    RecordNotFound,
    ZoneNotFoundError,
    InvalidZoneError,
    DecryptionFailure,
    AuditPersistenceFailure,
    UserAlreadyExistsError,
    InvalidCredentialsError,
    InvalidAPIKeyError,
    PermissionDeniedError,
    EmptyUploadError,
    UploadTooLargeError
)

logger = setup_logging('geovault')

app = FastAPI(
    title="GeoVault",
    description="Geofenced access to encrypted files",
    version="1.0.0"
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize the database and the crypto engine. A missing or malformed
    key aborts startup.
    """
    logger.info("GeoVault service starting up...")

    init_database()
    logger.info("Database initialized")

    engine = CryptoEngine(load_key(get_encryption_key_text()))
    set_crypto_engine(engine)
    logger.info(f"Crypto engine ready ({engine.format})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("GeoVault service shutting down...")
    set_crypto_engine(None)


def _error_response(request: Request, exc: Exception, status_code: int, code: str) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "code": code})


@app.exception_handler(InvalidCoordinate)
async def invalid_coordinate_handler(request: Request, exc: InvalidCoordinate):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_COORDINATE")


@app.exception_handler(InvalidZoneError)
async def invalid_zone_handler(request: Request, exc: InvalidZoneError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_ZONE")


@app.exception_handler(EmptyUploadError)
async def empty_upload_handler(request: Request, exc: EmptyUploadError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "EMPTY_UPLOAD")


@app.exception_handler(UploadTooLargeError)
async def upload_too_large_handler(request: Request, exc: UploadTooLargeError):
    return _error_response(request, exc, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "UPLOAD_TOO_LARGE")


@app.exception_handler(UserAlreadyExistsError)
async def user_already_exists_handler(request: Request, exc: UserAlreadyExistsError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "USER_ALREADY_EXISTS")


@app.exception_handler(InvalidCredentialsError)
async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
    return _error_response(request, exc, status.HTTP_401_UNAUTHORIZED, "INVALID_CREDENTIALS")


@app.exception_handler(InvalidAPIKeyError)
async def invalid_api_key_handler(request: Request, exc: InvalidAPIKeyError):
    return _error_response(request, exc, status.HTTP_401_UNAUTHORIZED, "INVALID_API_KEY")


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError):
    return _error_response(request, exc, status.HTTP_403_FORBIDDEN, "PERMISSION_DENIED")


@app.exception_handler(RecordNotFound)
async def record_not_found_handler(request: Request, exc: RecordNotFound):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND")


@app.exception_handler(ZoneNotFoundError)
async def zone_not_found_handler(request: Request, exc: ZoneNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "ZONE_NOT_FOUND")


@app.exception_handler(DecryptionFailure)
async def decryption_failure_handler(request: Request, exc: DecryptionFailure):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Stored file failed integrity verification: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Stored file failed integrity verification", "code": "DECRYPTION_FAILURE"}
    )


@app.exception_handler(AuditPersistenceFailure)
async def audit_persistence_failure_handler(request: Request, exc: AuditPersistenceFailure):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Audit persistence failure, access decision voided: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": "Access attempt could not be recorded; retry the request",
            "code": "AUDIT_PERSISTENCE_FAILURE",
        }
    )


@app.exception_handler(GeoVaultError)
async def geovault_exception_handler(request: Request, exc: GeoVaultError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"GeoVault exception: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "code": "INTERNAL_ERROR"}
    )


app.include_router(auth_router)
app.include_router(zone_router)
app.include_router(file_router)
app.include_router(audit_router)
app.include_router(diagnostics_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "GeoVault API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Liveness endpoint. Returns 200 if the process is serving requests.
    """
    return {"status": "healthy", "service": "geovault"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint.
    Verifies database connectivity.
    """
    from geovault.database import get_db_connection

    try:
        with get_db_connection() as conn:
            conn.execute("SELECT 1")
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {str(e)}"

    ready = db_status == "ok"
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={
            "ready": ready,
            "database": db_status,
        }
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "geovault.main:app",
        host=GEOVAULT_HOST,
        port=GEOVAULT_PORT,
    )


if __name__ == "__main__":
    main()
