import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .config import get_settings
from .errors import ShiftboardError
from .migration_runner import run_migrations_once
from .routers import (
    auth,
    availability,
    locations,
    messages,
    notifications,
    reports,
    shifts,
    swaps,
    time_off,
    users,
)

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.https_only,
)


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    field = next((str(part) for part in reversed(error.get("loc", ())) if not isinstance(part, int)), "")
    message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
    if field and field != "body":
        return f"{field}: {message}"
    return message


@app.exception_handler(ShiftboardError)
async def handle_shiftboard_error(request: Request, exc: ShiftboardError):
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    return JSONResponse({"message": _first_validation_message(exc)}, status_code=400)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"message": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"message": str(exc) or "Unexpected error"}, status_code=500)


@app.on_event("startup")
async def ensure_schema() -> None:
    if not settings.run_migrations_on_startup:
        return
    try:
        run_migrations_once()
    except Exception:  # pragma: no cover - startup failures should surface
        logger.exception("Database migration failed")
        raise


@app.get("/api/health")
async def health():
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(locations.router)
app.include_router(shifts.router)
app.include_router(time_off.router)
app.include_router(notifications.router)
app.include_router(messages.router)
app.include_router(swaps.router)
app.include_router(availability.router)
app.include_router(reports.router)
