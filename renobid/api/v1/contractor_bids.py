"""Contractor-facing bid endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from renobid.api.deps import get_bid_service, require_role
from renobid.common.enums import BidStatus, UserRole
from renobid.common.pagination import PaginatedResponse, PaginationParams
from renobid.core.bidding.schemas import BidCreate, BidDetail, BidUpdate
from renobid.core.bidding.service import BidService, bid_detail
from renobid.db.models.user import User

router = APIRouter(prefix="/contractor/bids", tags=["Contractor Bids"])

require_contractor = require_role(UserRole.CONTRACTOR)


# ---------- Schemas ----------


class BidListResponse(PaginatedResponse[BidDetail]):
    pass


class WithdrawResponse(BaseModel):
    message: str
    bid: BidDetail


# ---------- Endpoints ----------


@router.post("", response_model=BidDetail, status_code=201)
async def create_bid(
    body: BidCreate,
    current_user: User = Depends(require_contractor),
    service: BidService = Depends(get_bid_service),
):
    bid = await service.create(current_user.id, body)
    return bid_detail(bid)


@router.get("", response_model=BidListResponse)
async def list_my_bids(
    status: BidStatus | None = Query(None),
    project_id: uuid.UUID | None = Query(None),
    params: PaginationParams = Depends(),
    current_user: User = Depends(require_contractor),
    service: BidService = Depends(get_bid_service),
):
    items, total = await service.list_for_contractor(
        current_user.id, params, status=status.value if status else None, project_id=project_id
    )
    return BidListResponse(
        items=[bid_detail(b) for b in items],
        total=total, page=params.page, page_size=params.page_size,
        total_pages=params.total_pages(total),
    )


@router.get("/{bid_id}", response_model=BidDetail)
async def get_my_bid(
    bid_id: uuid.UUID,
    current_user: User = Depends(require_contractor),
    service: BidService = Depends(get_bid_service),
):
    return bid_detail(await service.get_for_contractor(bid_id, current_user.id))


@router.put("/{bid_id}", response_model=BidDetail)
async def update_bid(
    bid_id: uuid.UUID,
    body: BidUpdate,
    current_user: User = Depends(require_contractor),
    service: BidService = Depends(get_bid_service),
):
    return bid_detail(await service.update(bid_id, current_user.id, body))


@router.delete("/{bid_id}", response_model=WithdrawResponse)
async def withdraw_bid(
    bid_id: uuid.UUID,
    current_user: User = Depends(require_contractor),
    service: BidService = Depends(get_bid_service),
):
    bid = await service.withdraw(bid_id, current_user.id)
    return WithdrawResponse(message="Bid withdrawn", bid=bid_detail(bid))
