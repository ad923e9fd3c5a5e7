"""Database access for bids and the rows the bidding core reads."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from renobid.common.enums import BidErrorCode
from renobid.common.exceptions import ConflictError
from renobid.common.logging import get_logger
from renobid.db.models.bid import CODE_CONSTRAINT, RELEASED_STATUSES, Bid
from renobid.db.models.project import Project
from renobid.db.models.user import User

logger = get_logger("bidding.store")


class BidCodeTaken(Exception):
    """Another bid already holds this code."""


def _violates(error: IntegrityError, *markers: str) -> bool:
    # Postgres names the constraint, SQLite names the column
    message = str(error.orig)
    return any(marker in message for marker in markers)


class BidStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- Reads ----------

    async def get(self, bid_id: uuid.UUID) -> Bid | None:
        result = await self.db.execute(
            select(Bid).where(Bid.id == bid_id, Bid.is_deleted.is_(False))
        )
        return result.scalar_one_or_none()

    async def get_user(self, user_id: uuid.UUID) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.is_deleted.is_(False))
        )
        return result.scalar_one_or_none()

    async def get_project(self, project_id: uuid.UUID, lock: bool = False) -> Project | None:
        query = select(Project).where(Project.id == project_id, Project.is_deleted.is_(False))
        if lock:
            # serialises bid creation against project status changes
            query = query.with_for_update(of=Project)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def count_for_project(self, project_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Bid).where(
                Bid.project_id == project_id, Bid.is_deleted.is_(False)
            )
        )
        return result.scalar() or 0

    async def find_active(self, project_id: uuid.UUID, contractor_id: uuid.UUID) -> Bid | None:
        result = await self.db.execute(
            select(Bid).where(
                Bid.project_id == project_id,
                Bid.contractor_id == contractor_id,
                Bid.status.not_in(RELEASED_STATUSES),
                Bid.is_deleted.is_(False),
            ).limit(1)
        )
        return result.scalar_one_or_none()

    async def label_positions(self, project_id: uuid.UUID) -> dict[uuid.UUID, int]:
        """Position of every bid on the project in submission order."""
        result = await self.db.execute(
            select(Bid.id)
            .where(Bid.project_id == project_id, Bid.is_deleted.is_(False))
            .order_by(Bid.created_at.asc(), Bid.code.asc())
        )
        return {bid_id: index for index, bid_id in enumerate(result.scalars())}

    def filtered_query(
        self,
        *,
        statuses: list[str] | None = None,
        project_id: uuid.UUID | None = None,
        contractor_id: uuid.UUID | None = None,
        search: str | None = None,
    ) -> Select:
        query = select(Bid).where(Bid.is_deleted.is_(False))
        if statuses:
            query = query.where(Bid.status.in_(statuses))
        if project_id:
            query = query.where(Bid.project_id == project_id)
        if contractor_id:
            query = query.where(Bid.contractor_id == contractor_id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(Bid.code.ilike(pattern), Bid.proposal.ilike(pattern)))
        return query

    # ---------- Writes ----------

    async def insert(self, bid: Bid) -> Bid:
        """Insert ``bid`` inside a savepoint so a constraint hit leaves the transaction usable.

        Raises :class:`BidCodeTaken` when another writer already holds the code,
        and ``BID_ALREADY_EXISTS`` when the contractor already has an active bid
        on the project.
        """
        try:
            async with self.db.begin_nested():
                self.db.add(bid)
                await self.db.flush()
        except IntegrityError as e:
            if _violates(e, CODE_CONSTRAINT, "bids.code"):
                raise BidCodeTaken(bid.code) from e
            logger.warning(
                "Bid insert conflict project=%s contractor=%s: %s",
                bid.project_id, bid.contractor_id, e.orig,
            )
            raise ConflictError(
                "You have already submitted a bid for this project",
                code=BidErrorCode.BID_ALREADY_EXISTS,
            ) from e
        await self.db.refresh(bid)
        return bid

    async def compare_and_set(
        self, bid: Bid, expected_statuses: frozenset[str] | set[str], **values: Any
    ) -> bool:
        """Apply ``values`` only if the row still has the status and version we read.

        Returns False when another writer got there first; the in-memory
        ``bid`` is refreshed on success.
        """
        stmt = (
            update(Bid)
            .where(
                Bid.id == bid.id,
                Bid.status.in_(list(expected_statuses)),
                Bid.version == bid.version,
            )
            .values(version=Bid.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            logger.info("Lost compare-and-set on bid %s (version %s)", bid.id, bid.version)
            return False

        await self.db.refresh(bid, attribute_names=[*values.keys(), "version", "updated_at"])
        return True
