"""Bid lifecycle: creation, contractor edits and withdrawal, admin review."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from renobid.common.enums import BidErrorCode, BidStatus, ProjectStatus, VerificationStatus
from renobid.common.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from renobid.common.logging import get_logger
from renobid.common.pagination import PaginationParams, paginate
from renobid.common.timeutil import ensure_utc, utcnow
from renobid.core.bidding import anonymizer
from renobid.core.bidding.codes import generate_bid_code
from renobid.core.bidding.schemas import (
    AnonymousBid,
    BidContractorSummary,
    BidCreate,
    BidDetail,
    BidProjectSummary,
    BidUpdate,
)
from renobid.core.bidding.state_machine import EDITABLE_STATUSES, sources_for
from renobid.core.bidding.store import BidCodeTaken, BidStore
from renobid.core.notifications import templates
from renobid.core.notifications.dispatcher import NotificationDispatcher
from renobid.db.models.bid import Bid
from renobid.db.models.project import Project

logger = get_logger("bidding.service")

SORTABLE_COLUMNS = {"created_at", "updated_at", "price", "code", "status", "response_time_hours"}

# concurrent creates can race for the same sequence number
CODE_ATTEMPTS = 3


def _deadline_open(project: Project, now: datetime) -> bool:
    deadline = ensure_utc(project.bid_deadline)
    return deadline is not None and deadline > now


def response_time_hours(published_at: datetime | None, now: datetime) -> float | None:
    """Hours from project publication to ``now``, one decimal place."""
    published_at = ensure_utc(published_at)
    if published_at is None:
        return None
    return round((now - published_at).total_seconds() / 3600, 1)


def bid_detail(bid: Bid) -> BidDetail:
    contractor = bid.contractor
    return BidDetail(
        id=bid.id,
        code=bid.code,
        project_id=bid.project_id,
        contractor_id=bid.contractor_id,
        price=bid.price,
        timeline=bid.timeline,
        proposal=bid.proposal,
        attachments=bid.attachments or [],
        response_time_hours=bid.response_time_hours,
        status=bid.status,
        reviewed_by=bid.reviewed_by,
        reviewed_at=ensure_utc(bid.reviewed_at),
        review_note=bid.review_note,
        created_at=ensure_utc(bid.created_at),
        updated_at=ensure_utc(bid.updated_at),
        project=BidProjectSummary.model_validate(bid.project),
        contractor=BidContractorSummary(
            id=contractor.id,
            name=contractor.full_name,
            email=contractor.email,
            phone=contractor.phone,
            rating=contractor.rating,
            total_projects=contractor.total_projects,
            verification_status=contractor.verification_status,
        ),
    )


class BidService:
    """Enforces the bid state machine on top of :class:`BidStore`.

    The session and the notification dispatcher are passed in per request;
    nothing here holds global state.
    """

    def __init__(self, db: AsyncSession, dispatcher: NotificationDispatcher | None = None):
        self.db = db
        self.store = BidStore(db)
        self.dispatcher = dispatcher or NotificationDispatcher()

    # ---------- Contractor operations ----------

    async def create(self, contractor_id: uuid.UUID, data: BidCreate) -> Bid:
        contractor = await self.store.get_user(contractor_id)
        project = await self.store.get_project(data.project_id, lock=True)
        bid_count = await self.store.count_for_project(data.project_id) if project else 0
        existing = await self.store.find_active(data.project_id, contractor_id) if project else None
        now = utcnow()

        if not contractor:
            raise NotFoundError("Contractor", str(contractor_id))
        if contractor.verification_status != VerificationStatus.VERIFIED.value:
            raise PermissionDeniedError(
                "Only verified contractors can submit bids",
                code=BidErrorCode.CONTRACTOR_NOT_VERIFIED,
            )
        if not project:
            raise NotFoundError("Project", str(data.project_id))
        if project.status != ProjectStatus.OPEN.value:
            raise BadRequestError(
                "Can only bid on projects with OPEN status",
                code=BidErrorCode.BID_PROJECT_NOT_OPEN,
            )
        if not _deadline_open(project, now):
            raise BadRequestError(
                "Project bid deadline has passed", code=BidErrorCode.BID_DEADLINE_PASSED
            )
        if bid_count >= project.max_bids:
            raise BadRequestError(
                "Project has reached maximum number of bids", code=BidErrorCode.BID_MAX_REACHED
            )
        if existing:
            raise ConflictError(
                "You have already submitted a bid for this project",
                code=BidErrorCode.BID_ALREADY_EXISTS,
            )

        bid = Bid(
            project_id=project.id,
            contractor_id=contractor.id,
            price=data.price,
            timeline=data.timeline,
            proposal=data.proposal,
            attachments=[a.model_dump() for a in data.attachments],
            response_time_hours=response_time_hours(project.published_at, now),
            status=BidStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        bid = await self._insert_with_code(bid, now)
        logger.info(
            "Bid %s created on project %s by contractor %s", bid.code, project.code, contractor.id
        )

        message = templates.bid_received(project.code, bid.code)
        self.dispatcher.emit_after_commit(
            self.db,
            user_id=project.owner_id,
            notification_type=message["type"],
            title=message["title"],
            content=message["content"],
            channels=message["channels"],
            data=self._event_data(bid, project),
            context={"operation": "bid.create", **self._event_data(bid, project)},
        )
        return bid

    async def update(self, bid_id: uuid.UUID, contractor_id: uuid.UUID, data: BidUpdate) -> Bid:
        bid = await self._get_owned(bid_id, contractor_id)

        if bid.status not in EDITABLE_STATUSES:
            raise BadRequestError(
                "Can only update bids in PENDING status", code=BidErrorCode.BID_INVALID_STATUS
            )
        if not _deadline_open(bid.project, utcnow()):
            raise BadRequestError(
                "Project bid deadline has passed", code=BidErrorCode.BID_DEADLINE_PASSED
            )

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return bid

        if not await self.store.compare_and_set(bid, EDITABLE_STATUSES, **changes):
            raise BadRequestError(
                "Bid changed status while being updated", code=BidErrorCode.BID_INVALID_STATUS
            )
        logger.info("Bid %s updated fields=%s", bid.code, sorted(changes))
        return bid

    async def withdraw(self, bid_id: uuid.UUID, contractor_id: uuid.UUID) -> Bid:
        bid = await self._get_owned(bid_id, contractor_id)
        allowed = sources_for(BidStatus.WITHDRAWN.value)

        if bid.status not in allowed or not await self.store.compare_and_set(
            bid, allowed, status=BidStatus.WITHDRAWN.value
        ):
            raise BadRequestError(
                "Can only withdraw bids in PENDING or APPROVED status",
                code=BidErrorCode.BID_INVALID_STATUS,
            )
        logger.info("Bid %s withdrawn by contractor %s", bid.code, contractor_id)
        return bid

    async def get_for_contractor(self, bid_id: uuid.UUID, contractor_id: uuid.UUID) -> Bid:
        return await self._get_owned(bid_id, contractor_id)

    async def list_for_contractor(
        self,
        contractor_id: uuid.UUID,
        params: PaginationParams,
        status: str | None = None,
        project_id: uuid.UUID | None = None,
    ) -> tuple[list[Bid], int]:
        query = self.store.filtered_query(
            statuses=[status] if status else None,
            project_id=project_id,
            contractor_id=contractor_id,
        )
        return await paginate(self.db, query, params, Bid, SORTABLE_COLUMNS)

    # ---------- Homeowner operations ----------

    async def list_for_homeowner(
        self, project_id: uuid.UUID, owner_id: uuid.UUID, params: PaginationParams
    ) -> tuple[list[AnonymousBid], int]:
        project = await self.store.get_project(project_id)
        if not project:
            raise NotFoundError("Project", str(project_id))
        if project.owner_id != owner_id:
            raise PermissionDeniedError(
                "You do not have access to this project", code=BidErrorCode.PROJECT_ACCESS_DENIED
            )
        return await anonymizer.list_anonymous_bids(self.store, project_id, params)

    # ---------- Admin operations ----------

    async def list_for_admin(
        self,
        params: PaginationParams,
        status: str | None = None,
        project_id: uuid.UUID | None = None,
        contractor_id: uuid.UUID | None = None,
        search: str | None = None,
    ) -> tuple[list[Bid], int]:
        query = self.store.filtered_query(
            statuses=[status] if status else None,
            project_id=project_id,
            contractor_id=contractor_id,
            search=search,
        )
        return await paginate(self.db, query, params, Bid, SORTABLE_COLUMNS)

    async def get_for_admin(self, bid_id: uuid.UUID) -> Bid:
        return await self._get(bid_id)

    async def approve(self, bid_id: uuid.UUID, admin_id: uuid.UUID, note: str | None = None) -> Bid:
        bid = await self._get(bid_id)

        if bid.status != BidStatus.PENDING.value:
            raise BadRequestError(
                "Can only approve bids in PENDING status", code=BidErrorCode.BID_INVALID_STATUS
            )
        # the project may have closed since the bid was placed
        if bid.project.status != ProjectStatus.OPEN.value:
            raise BadRequestError(
                "Cannot approve bid for a project that is not OPEN",
                code=BidErrorCode.BID_PROJECT_NOT_OPEN,
            )

        await self._review(bid, admin_id, BidStatus.APPROVED, note)

        message = templates.bid_approved(bid.project.code, bid.code)
        self.dispatcher.emit_after_commit(
            self.db,
            user_id=bid.contractor_id,
            notification_type=message["type"],
            title=message["title"],
            content=message["content"],
            channels=message["channels"],
            data=self._event_data(bid, bid.project),
            context={"operation": "bid.approve", **self._event_data(bid, bid.project)},
        )
        return bid

    async def reject(self, bid_id: uuid.UUID, admin_id: uuid.UUID, note: str) -> Bid:
        bid = await self._get(bid_id)
        if not note or not note.strip():
            raise BadRequestError("A rejection note is required")
        if bid.status != BidStatus.PENDING.value:
            raise BadRequestError(
                "Can only reject bids in PENDING status", code=BidErrorCode.BID_INVALID_STATUS
            )

        await self._review(bid, admin_id, BidStatus.REJECTED, note)
        return bid

    # ---------- Helpers ----------

    async def _get(self, bid_id: uuid.UUID) -> Bid:
        bid = await self.store.get(bid_id)
        if not bid:
            raise NotFoundError("Bid", str(bid_id))
        return bid

    async def _insert_with_code(self, bid: Bid, now: datetime) -> Bid:
        for attempt in range(1, CODE_ATTEMPTS + 1):
            bid.code = await generate_bid_code(self.db, now)
            try:
                return await self.store.insert(bid)
            except BidCodeTaken:
                logger.warning("Bid code %s already taken (attempt %d)", bid.code, attempt)
        raise ConflictError(
            "Could not allocate a bid code, please try again",
            code=BidErrorCode.BID_CODE_UNAVAILABLE,
        )

    async def _get_owned(self, bid_id: uuid.UUID, contractor_id: uuid.UUID) -> Bid:
        bid = await self._get(bid_id)
        if bid.contractor_id != contractor_id:
            raise PermissionDeniedError("Access denied", code=BidErrorCode.BID_ACCESS_DENIED)
        return bid

    async def _review(
        self, bid: Bid, admin_id: uuid.UUID, outcome: BidStatus, note: str | None
    ) -> None:
        applied = await self.store.compare_and_set(
            bid,
            {BidStatus.PENDING.value},
            status=outcome.value,
            reviewed_by=admin_id,
            reviewed_at=utcnow(),
            review_note=note,
        )
        if not applied:
            raise BadRequestError(
                "Bid was reviewed by someone else", code=BidErrorCode.BID_INVALID_STATUS
            )
        logger.info("Bid %s %s by admin %s", bid.code, outcome.value, admin_id)

    @staticmethod
    def _event_data(bid: Bid, project: Project) -> dict[str, str]:
        return {
            "project_id": str(project.id),
            "project_code": project.code,
            "bid_id": str(bid.id),
            "bid_code": bid.code,
        }
