from datetime import datetime, timezone
from decimal import Decimal

import pytest

from renobid.common.enums import BidStatus
from renobid.core.bidding.codes import format_bid_code, generate_bid_code, parse_sequence
from renobid.db.models.bid import Bid


@pytest.mark.parametrize(
    "year, seq, code",
    [(2025, 1, "BID-2025-001"), (2025, 42, "BID-2025-042"), (2026, 1000, "BID-2026-1000")],
)
def test_format_bid_code(year, seq, code):
    assert format_bid_code(year, seq) == code


@pytest.mark.parametrize("code, seq", [("BID-2025-007", 7), ("BID-2025-1234", 1234), ("garbage", 0), ("BID-2025-x", 0)])
def test_parse_sequence(code, seq):
    assert parse_sequence(code) == seq


@pytest.mark.asyncio
async def test_generate_bid_code_per_year(db_session, contractor_user, make_project):
    for code in ("BID-2025-009", "BID-2025-010", "BID-2024-050"):
        db_session.add(
            Bid(
                code=code,
                project_id=(await make_project()).id,
                contractor_id=contractor_user.id,
                price=Decimal("10"),
                timeline="1 week",
                proposal="p",
                status=BidStatus.WITHDRAWN.value,
            )
        )
    await db_session.flush()

    assert await generate_bid_code(db_session, datetime(2025, 6, 1, tzinfo=timezone.utc)) == "BID-2025-011"
    assert await generate_bid_code(db_session, datetime(2024, 1, 1, tzinfo=timezone.utc)) == "BID-2024-051"
    assert await generate_bid_code(db_session, datetime(2027, 1, 1, tzinfo=timezone.utc)) == "BID-2027-001"


@pytest.mark.asyncio
async def test_generate_bid_code_past_three_digits(db_session, contractor_user, make_project):
    for code in ("BID-2025-999", "BID-2025-1000", "BID-2025-100"):
        db_session.add(
            Bid(
                code=code,
                project_id=(await make_project()).id,
                contractor_id=contractor_user.id,
                price=Decimal("10"),
                timeline="1 week",
                proposal="p",
                status=BidStatus.REJECTED.value,
            )
        )
    await db_session.flush()

    assert await generate_bid_code(db_session, datetime(2025, 3, 1, tzinfo=timezone.utc)) == "BID-2025-1001"
