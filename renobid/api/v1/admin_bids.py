"""Admin review of submitted bids."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query

from renobid.api.deps import get_bid_service, require_role
from renobid.common.enums import BidStatus, UserRole
from renobid.common.pagination import PaginatedResponse, PaginationParams
from renobid.core.bidding.schemas import ApproveBidRequest, BidDetail, RejectBidRequest
from renobid.core.bidding.service import BidService, bid_detail
from renobid.db.models.user import User

router = APIRouter(prefix="/admin/bids", tags=["Admin Bids"])

require_admin = require_role(UserRole.ADMIN)


class AdminBidListResponse(PaginatedResponse[BidDetail]):
    pass


@router.get("", response_model=AdminBidListResponse)
async def list_bids(
    status: BidStatus | None = Query(None),
    project_id: uuid.UUID | None = Query(None),
    contractor_id: uuid.UUID | None = Query(None),
    search: str | None = Query(None, max_length=100, description="Match on code or proposal"),
    params: PaginationParams = Depends(),
    _: User = Depends(require_admin),
    service: BidService = Depends(get_bid_service),
):
    items, total = await service.list_for_admin(
        params,
        status=status.value if status else None,
        project_id=project_id,
        contractor_id=contractor_id,
        search=search,
    )
    return AdminBidListResponse(
        items=[bid_detail(b) for b in items],
        total=total, page=params.page, page_size=params.page_size,
        total_pages=params.total_pages(total),
    )


@router.get("/{bid_id}", response_model=BidDetail)
async def get_bid(
    bid_id: uuid.UUID,
    _: User = Depends(require_admin),
    service: BidService = Depends(get_bid_service),
):
    return bid_detail(await service.get_for_admin(bid_id))


@router.put("/{bid_id}/approve", response_model=BidDetail)
async def approve_bid(
    bid_id: uuid.UUID,
    body: ApproveBidRequest | None = None,
    current_user: User = Depends(require_admin),
    service: BidService = Depends(get_bid_service),
):
    return bid_detail(await service.approve(bid_id, current_user.id, body.note if body else None))


@router.put("/{bid_id}/reject", response_model=BidDetail)
async def reject_bid(
    bid_id: uuid.UUID,
    body: RejectBidRequest,
    current_user: User = Depends(require_admin),
    service: BidService = Depends(get_bid_service),
):
    return bid_detail(await service.reject(bid_id, current_user.id, body.note))
