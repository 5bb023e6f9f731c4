"""
Venue management endpoints
"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status

from venue_admin.api.deps import get_venue_service
from venue_admin.core.security import get_current_session, require_admin
from venue_admin.schemas.auth import SessionUser
from venue_admin.schemas.venue import (
    OnboardingLinkResponse,
    VenueCreate,
    VenueListResponse,
    VenueListStatus,
    VenueResponse,
    VenueSearchResult,
    VenueStats,
    VenueUpdate,
)
from venue_admin.services.venue_service import DEFAULT_SORT, VenueService

router = APIRouter()


@router.get("", response_model=VenueListResponse)
async def list_venues(
    status_filter: VenueListStatus = Query(VenueListStatus.ALL, alias="status"),
    q: Optional[str] = None,
    country: Optional[str] = None,
    sort: str = DEFAULT_SORT,
    page: int = Query(1, ge=1),
    service: VenueService = Depends(get_venue_service),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    """
    List venues with filtering, sorting and fixed-size pages
    """
    venues, total_count, total_pages, current_page = await service.list(
        status=status_filter,
        q=q,
        country=country,
        sort=sort,
        page=page
    )
    return {
        "venues": venues,
        "total_count": total_count,
        "total_pages": total_pages,
        "current_page": current_page,
    }


@router.post("", response_model=VenueResponse, status_code=status.HTTP_201_CREATED)
async def create_venue(
    venue_data: VenueCreate,
    service: VenueService = Depends(get_venue_service),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    """
    Create a pending venue. Image relocation and payment account failures
    are reported in provisioning_steps, not as errors.
    """
    return await service.create(venue_data)


@router.get("/stats", response_model=VenueStats)
async def venue_stats(
    service: VenueService = Depends(get_venue_service),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    return await service.stats()


@router.get("/search", response_model=List[VenueSearchResult])
async def search_venues(
    q: str = "",
    service: VenueService = Depends(get_venue_service)
) -> Any:
    """
    Look up venues by name, at most 10 results
    """
    return await service.search(q)


@router.get("/{venue_id}", response_model=VenueResponse)
async def get_venue(
    venue_id: UUID,
    service: VenueService = Depends(get_venue_service),
    session: SessionUser = Depends(get_current_session)
) -> Any:
    return await service.get(venue_id)


@router.patch("/{venue_id}", response_model=VenueResponse)
async def update_venue(
    venue_id: UUID,
    patch: VenueUpdate,
    service: VenueService = Depends(get_venue_service),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    """
    Change status (approve / reject / back to pending) or edit fields
    """
    return await service.update(venue_id, patch)


@router.delete("/{venue_id}", response_model=VenueResponse)
async def delete_venue(
    venue_id: UUID,
    service: VenueService = Depends(get_venue_service),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    """
    Soft delete; the venue keeps its status
    """
    return await service.soft_delete(venue_id)


@router.post("/{venue_id}/restore", response_model=VenueResponse)
async def restore_venue(
    venue_id: UUID,
    service: VenueService = Depends(get_venue_service),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    return await service.restore(venue_id)


@router.post("/{venue_id}/provisioning/retry", response_model=VenueResponse)
async def retry_provisioning(
    venue_id: UUID,
    service: VenueService = Depends(get_venue_service),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    """
    Re-run failed provisioning steps
    """
    return await service.retry_provisioning(venue_id)


@router.post("/{venue_id}/stripe/onboarding-link", response_model=OnboardingLinkResponse)
async def create_onboarding_link(
    venue_id: UUID,
    service: VenueService = Depends(get_venue_service),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    link = await service.create_onboarding_link(venue_id)
    return {"url": link.url, "expires_at": link.expires_at}


@router.post("/{venue_id}/stripe/refresh", response_model=VenueResponse)
async def refresh_onboarding_status(
    venue_id: UUID,
    service: VenueService = Depends(get_venue_service),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    return await service.refresh_onboarding_status(venue_id)
