import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from reelroom.api import admin, auth, pages, users
from reelroom.api.auth import clear_session_cookie
from reelroom.api.deps import SESSION_COOKIE
from reelroom.core.config import get_settings
from reelroom.core.database import engine, ping_database
from reelroom.core.errors import AuthenticationError, PageRedirect
from reelroom.core.security import TokenService
from reelroom.models.users import Base

root = logging.getLogger()
if not root.handlers:  # don't double-add in reloads
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(h)

root.setLevel(logging.INFO)

logger = logging.getLogger(__name__)

settings = get_settings()

Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.token_service = TokenService.from_settings(get_settings())
    yield


app = FastAPI(title="reelroom API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(users.codes_router)
app.include_router(users.router)
app.include_router(admin.router)
app.include_router(pages.router)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = ".".join(loc) or "body"
    if first.get("type") == "missing":
        return f"{field} is required"
    return f"Invalid value for {field}: {first.get('msg', 'invalid')}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _describe_validation_error(exc)},
    )


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    resp = JSONResponse(
        status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers
    )
    if SESSION_COOKIE in request.cookies:
        clear_session_cookie(resp)
    return resp


@app.exception_handler(PageRedirect)
async def page_redirect_handler(request: Request, exc: PageRedirect):
    resp = RedirectResponse(url=exc.location, status_code=status.HTTP_303_SEE_OTHER)
    if exc.clear_session:
        clear_session_cookie(resp)
    return resp


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An error occurred"},
    )


@app.get("/health", tags=["health"])
def health_check():
    """Report service status and confirm database connectivity."""
    database_status = "ok" if ping_database() else "error"
    return {
        "status": "ok",
        "database": database_status,
    }
