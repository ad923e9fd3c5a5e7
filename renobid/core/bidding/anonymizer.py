"""Homeowner view of a project's bids.

Contractors are shown as "Contractor A", "Contractor B", ... The letter comes
from the bid's place in the project's submission order, not from its place
on the current page, so the same bid keeps its label across pages, sort
orders and sibling withdrawals.
"""

from __future__ import annotations

import string
import uuid

from renobid.common.enums import BidStatus
from renobid.common.pagination import PaginationParams, paginate
from renobid.common.timeutil import ensure_utc
from renobid.core.bidding.schemas import AnonymousBid
from renobid.core.bidding.store import BidStore
from renobid.db.models.bid import Bid

LABEL_PREFIX = "Contractor"
LETTER_LABELS = 20

# bids still awaiting review; approved ones are not listed to homeowners
HOMEOWNER_VISIBLE_STATUSES = [BidStatus.PENDING.value]

HOMEOWNER_SORTABLE = {"created_at", "price", "response_time_hours"}


def anonymous_label(index: int) -> str:
    if 0 <= index < LETTER_LABELS:
        return f"{LABEL_PREFIX} {string.ascii_uppercase[index]}"
    return f"{LABEL_PREFIX} {index + 1}"


def anonymize(bid: Bid, label_index: int) -> AnonymousBid:
    contractor = bid.contractor
    ranking = contractor.ranking if contractor else None
    return AnonymousBid(
        id=bid.id,
        code=bid.code,
        anonymous_name=anonymous_label(label_index),
        contractor_rating=contractor.rating if contractor else 0.0,
        contractor_total_projects=contractor.total_projects if contractor else 0,
        contractor_completed_projects=ranking.completed_projects if ranking else 0,
        price=bid.price,
        timeline=bid.timeline,
        proposal=bid.proposal,
        attachments=bid.attachments or [],
        status=bid.status,
        created_at=ensure_utc(bid.created_at),
    )


async def list_anonymous_bids(
    store: BidStore, project_id: uuid.UUID, params: PaginationParams
) -> tuple[list[AnonymousBid], int]:
    query = store.filtered_query(statuses=HOMEOWNER_VISIBLE_STATUSES, project_id=project_id)
    bids, total = await paginate(store.db, query, params, Bid, HOMEOWNER_SORTABLE)

    positions = await store.label_positions(project_id)
    return [anonymize(bid, positions.get(bid.id, 0)) for bid in bids], total
