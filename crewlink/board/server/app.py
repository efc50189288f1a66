"""FastAPI application exposing the board aggregations to the mobile client.

Architecture:
    create_app() builds the application around one BoardAPI, created in the
    lifespan from environment settings unless one is injected. Route handlers
    are thin: parse the request, call the facade, shape the response.

Error mapping:
    ValidationError, ConfigurationError -> 400
    RateLimitError                      -> 429 (with Retry-After)
    UpstreamTimeoutError                -> 504
    UpstreamError                       -> 502
    any other BoardError                -> 500
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from ..api import BoardAPI
from ..core.config import BoardSettings, load_settings
from ..core.exceptions import (
    BoardError,
    ConfigurationError,
    RateLimitError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)
from .schemas import (
    CacheEntryView,
    CacheResponse,
    DetailsResponse,
    HealthResponse,
    JobsResponse,
    LoginRequest,
    MaterialsResponse,
    TimesheetCreated,
    TimesheetRequest,
    TimesheetsResponse,
    TimesheetView,
    UploadRequest,
    UploadResponse,
)

logger = logging.getLogger(__name__)


def get_board_api(request: Request) -> BoardAPI:
    """Return the application's BoardAPI."""
    return request.app.state.board_api


async def validation_error_handler(request: Request, exc: BoardError) -> JSONResponse:
    logger.info("request_rejected", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


async def rate_limit_handler(request: Request, exc: RateLimitError) -> JSONResponse:
    logger.warning(
        "upstream_rate_limited",
        extra={"path": request.url.path, "retry_after": exc.retry_after},
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": str(exc)},
        headers={"Retry-After": str(exc.retry_after)},
    )


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error(
        "upstream_error",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
        exc_info=exc,
    )
    code = (
        status.HTTP_504_GATEWAY_TIMEOUT
        if isinstance(exc, UpstreamTimeoutError)
        else status.HTTP_502_BAD_GATEWAY
    )
    return JSONResponse(status_code=code, content={"error": str(exc)})


async def board_error_handler(request: Request, exc: BoardError) -> JSONResponse:
    logger.error("request_failed", extra={"path": request.url.path}, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Server error."}
    )


def create_app(
    api: BoardAPI | None = None,
    *,
    settings: BoardSettings | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        api: BoardAPI to serve (created from settings in the lifespan if None)
        settings: Settings for the created BoardAPI (loaded from the environment if None)

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        board_api = api or BoardAPI(settings or load_settings())
        app.state.board_api = board_api
        logger.info("board_api_ready", extra={"injected": api is not None})
        try:
            yield
        finally:
            if api is None:
                await board_api.close()

    app = FastAPI(title="crewlink-board", lifespan=lifespan, docs_url=None, redoc_url=None)
    if api is not None:
        app.state.board_api = api

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ConfigurationError, validation_error_handler)
    app.add_exception_handler(RateLimitError, rate_limit_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(BoardError, board_error_handler)

    @app.get("/health")
    async def health() -> HealthResponse:
        return HealthResponse()

    @app.post("/auth/login", response_model=None)
    async def login(body: LoginRequest, board: BoardAPI = Depends(get_board_api)) -> JSONResponse:  # noqa: B008
        """Check a contractor's email and PIN."""
        try:
            result = await board.login(body.email, body.pin)
        except ValidationError as exc:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST, content={"ok": False, "error": str(exc)}
            )
        if not result.ok:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"ok": False, "error": "Invalid email or PIN."},
            )
        return JSONResponse(content={"ok": True, "name": result.name})

    @app.get("/jobs/my")
    async def my_jobs(
        email: str = "",
        on: str = "",
        include_weekends: str = Query("1", alias="includeWeekends"),
        page: int = 1,
        limit: int | None = None,
        count_all: str = Query("0", alias="countAll"),
        board: BoardAPI = Depends(get_board_api),  # noqa: B008
    ) -> JobsResponse:
        """Job sub-items assigned to a contractor, optionally for one day."""
        if not email.strip():
            raise ValidationError("email query required")
        result = await board.my_jobs(
            email,
            on_date=on or None,
            include_weekends=include_weekends != "0",
            page=page,
            limit=limit,
            count_all=count_all != "0",
        )
        return JobsResponse.from_page(result)

    @app.get("/jobs/{subitem_id}/details")
    async def job_details(
        subitem_id: str, board: BoardAPI = Depends(get_board_api)  # noqa: B008
    ) -> DetailsResponse:
        """Files attached to a job sub-item."""
        return DetailsResponse.from_details(await board.job_details(subitem_id))

    @app.get("/jobs/{subitem_id}/materials")
    async def job_materials(
        subitem_id: str,
        job_number: str = Query("", alias="jobNumber"),
        scope_status: str = Query("", alias="scopeStatus"),
        board: BoardAPI = Depends(get_board_api),  # noqa: B008
    ) -> MaterialsResponse:
        """Materials for a job sub-item, grouped by status."""
        result = await board.materials(job_number, scope_status)
        logger.debug(
            "materials_requested",
            extra={"subitem_id": subitem_id, "found": result is not None},
        )
        return MaterialsResponse.from_result(result)

    @app.get("/files/{asset_id}", response_model=None)
    async def file_redirect(
        asset_id: str, board: BoardAPI = Depends(get_board_api)  # noqa: B008
    ) -> RedirectResponse | PlainTextResponse:
        """Redirect to an asset's download URL."""
        url = await board.file_url(asset_id)
        if not url:
            return PlainTextResponse(
                "No URL available for this file.", status_code=status.HTTP_404_NOT_FOUND
            )
        return RedirectResponse(url, status_code=status.HTTP_302_FOUND)

    @app.post("/upload")
    async def upload(body: UploadRequest, board: BoardAPI = Depends(get_board_api)) -> UploadResponse:  # noqa: B008
        """Attach a base64-encoded image to a record's file column."""
        if not body.content_base64:
            raise ValidationError("base64 required")
        try:
            content = base64.b64decode(body.content_base64)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("base64 is not valid") from exc
        result = await board.upload(
            str(body.job_id), content, column_id=body.column_id, file_name=body.file_name
        )
        return UploadResponse(result=result)

    @app.post("/timesheets")
    async def create_timesheet(
        body: TimesheetRequest, board: BoardAPI = Depends(get_board_api)  # noqa: B008
    ) -> TimesheetCreated:
        """Create a timesheet awaiting approval."""
        item_id = await board.create_timesheet(body.to_draft())
        return TimesheetCreated(id=item_id)

    @app.get("/timesheets")
    async def list_timesheets(
        name: str = "",
        job_number: str = Query("", alias="jobNumber"),
        limit: int = 50,
        board: BoardAPI = Depends(get_board_api),  # noqa: B008
    ) -> TimesheetsResponse:
        """Timesheets, newest first."""
        entries = await board.list_timesheets(name=name, job_number=job_number, limit=limit)
        return TimesheetsResponse(items=[TimesheetView.from_entry(e) for e in entries])

    @app.get("/_debug/cache")
    async def debug_cache(board: BoardAPI = Depends(get_board_api)) -> CacheResponse:  # noqa: B008
        """Live cache entries."""
        entries = board.cache_entries()
        return CacheResponse(
            count=len(entries), entries=[CacheEntryView.from_info(e) for e in entries]
        )

    return app
