import uuid

from fastapi import APIRouter, Depends

from renobid.api.deps import get_bid_service, require_role
from renobid.common.enums import UserRole
from renobid.common.pagination import PaginatedResponse, PaginationParams
from renobid.core.bidding.schemas import AnonymousBid
from renobid.core.bidding.service import BidService
from renobid.db.models.user import User

router = APIRouter(prefix="/homeowner/projects/{project_id}", tags=["Homeowner Bids"])


class AnonymousBidListResponse(PaginatedResponse[AnonymousBid]):
    pass


@router.get("/bids", response_model=AnonymousBidListResponse)
async def list_project_bids(
    project_id: uuid.UUID,
    params: PaginationParams = Depends(),
    current_user: User = Depends(require_role(UserRole.HOMEOWNER)),
    service: BidService = Depends(get_bid_service),
):
    items, total = await service.list_for_homeowner(project_id, current_user.id, params)
    return AnonymousBidListResponse(
        items=items,
        total=total, page=params.page, page_size=params.page_size,
        total_pages=params.total_pages(total),
    )
