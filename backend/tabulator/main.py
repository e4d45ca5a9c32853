import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tabulator import __version__
from tabulator.api import router
from tabulator.config import get_settings
from tabulator.errors import VoteError, ErrorKind
from tabulator.models import init_db, ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DUPLICATE_VOTE: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NO_VOTES: 404,
}


def _error_body(detail: str, error: str, context: Optional[dict] = None) -> dict:
    return ErrorResponse(detail=detail, error=error, context=context or {}).model_dump(by_alias=True)


async def vote_error_handler(request: Request, exc: VoteError) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND[exc.kind],
        content=_error_body(exc.message, exc.kind.value, exc.context()),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.warning(f"Malformed request to {request.url.path}: {errors}")
    field = None
    message = "Invalid request"
    if errors:
        loc = [str(part) for part in errors[0].get("loc", ()) if part != "body"]
        field = ".".join(loc) or None
        message = errors[0].get("msg", message)
    return JSONResponse(
        status_code=400,
        content=_error_body(message, ErrorKind.VALIDATION.value, {"field": field}),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=_error_body("Internal server error", "internal"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("Database tables ready")
    yield


def create_app(init_database: bool = True) -> FastAPI:
    app = FastAPI(
        title="Tabulator",
        version=__version__,
        lifespan=lifespan if init_database else None,
    )
    app.include_router(router)
    app.add_exception_handler(VoteError, vote_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting Tabulator {__version__} on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
