"""API routes implementation."""

from fastapi import APIRouter, Request, HTTPException, Query, status
from datetime import datetime, timezone
from typing import List, Optional

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    LinkResponse,
    LinkStatsResponse,
    VisitResponse,
    ClickResponse,
    ValidationErrorResponse,
    ErrorResponse,
    StatisticsResponse,
    HealthResponse,
)
from ...errors import (
    LinkExpiredError,
    LinkNotFoundError,
    ShortcodeGenerationError,
    StorageError,
    ValidationError,
)
from ...models import LinkStatus

router = APIRouter()


def _registry(request: Request):
    return request.app.state.registry


def _not_persisted(error: StorageError) -> HTTPException:
    # The change is kept in memory and written by the next successful flush
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Change recorded but not yet persisted: {error}",
    )


def _find_or_404(registry, shortcode: str):
    record = registry.find_by_shortcode(shortcode)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{shortcode}' not found",
        )
    return record


@router.post(
    "/links",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Invalid submission"},
        500: {"model": ErrorResponse, "description": "Short code generation failed"},
        503: {"model": ErrorResponse, "description": "Link created but not yet persisted"},
    },
    summary="Create short URL",
    description="Create a short link. Optionally provide a validity period and a custom short code.",
)
async def create_link(request: Request, body: ShortenRequest):
    """Create a short link."""
    registry = _registry(request)

    try:
        record = registry.create(
            original_url=body.url,
            validity_minutes=body.validity,
            custom_shortcode=body.shortcode,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": str(e), "errors": e.to_dict()},
        )
    except ShortcodeGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    except StorageError as e:
        raise _not_persisted(e)

    return ShortenResponse(
        message=f"URL shortened successfully! Short URL: {record.short_url}",
        link=LinkResponse.from_record(record, registry.status(record)),
    )


@router.get(
    "/links/recent",
    response_model=List[LinkResponse],
    summary="Recent active links",
    description="Active links, most recently created first.",
)
async def recent_links(request: Request, limit: Optional[int] = Query(None, ge=1)):
    """List recent active links."""
    registry = _registry(request)
    config = request.app.state.config

    records = registry.list_active(limit or config.recent_links_limit)
    return [LinkResponse.from_record(r, LinkStatus.ACTIVE) for r in records]


@router.get(
    "/links",
    response_model=List[LinkStatsResponse],
    summary="Link statistics",
    description="Every link, expired ones included, with its click history.",
)
async def all_links(request: Request):
    """List every link with statistics."""
    registry = _registry(request)
    return [LinkStatsResponse.from_record(r, registry.status(r)) for r in registry.list_all()]


@router.get(
    "/links/{shortcode}",
    response_model=LinkStatsResponse,
    responses={404: {"model": ErrorResponse, "description": "Short code not found"}},
    summary="Get link statistics",
)
async def get_link(request: Request, shortcode: str):
    """Get one link with its click history."""
    registry = _registry(request)
    record = _find_or_404(registry, shortcode)
    return LinkStatsResponse.from_record(record, registry.status(record))


@router.post(
    "/links/{shortcode}/visit",
    response_model=VisitResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
        410: {"model": ErrorResponse, "description": "Link expired"},
        503: {"model": ErrorResponse, "description": "Click recorded but not yet persisted"},
    },
    summary="Visit a short link",
    description="Record a click and return the original URL for the client to open. No redirect is issued.",
)
async def visit_link(request: Request, shortcode: str):
    """Record a click on a link."""
    registry = _registry(request)
    record = _find_or_404(registry, shortcode)

    try:
        event = registry.record_visit(record.id)
    except LinkExpiredError as e:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=str(e))
    except LinkNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageError as e:
        raise _not_persisted(e)

    return VisitResponse(
        original_url=record.original_url,
        clicks=record.clicks,
        click=ClickResponse.from_event(event),
    )


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Collection-wide totals.",
)
async def get_statistics(request: Request):
    """Get collection statistics."""
    return StatisticsResponse(**_registry(request).statistics())


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(request: Request):
    """Check that the link collection can be read."""
    registry = _registry(request)

    try:
        registry.store.read(registry.storage_key)
        storage_ok = True
    except StorageError:
        storage_ok = False

    return HealthResponse(
        status="healthy" if storage_ok else "unhealthy",
        storage="healthy" if storage_ok else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
