from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from renobid.db.models.bid import Bid

CODE_PREFIX = "BID"


def format_bid_code(year: int, sequence: int) -> str:
    return f"{CODE_PREFIX}-{year}-{sequence:03d}"


def parse_sequence(code: str) -> int:
    try:
        return int(code.rsplit("-", 1)[1])
    except (IndexError, ValueError):
        return 0


async def generate_bid_code(db: AsyncSession, now: datetime | None = None) -> str:
    """Next ``BID-YYYY-NNN`` code for the current calendar year.

    Sequences restart every January and widen past three digits on their own,
    so the highest code is the longest one, then the lexically largest. A
    concurrent writer grabbing the same number trips ``uq_bids_code`` and the
    caller allocates again.
    """
    year = (now or datetime.now(timezone.utc)).year
    prefix = f"{CODE_PREFIX}-{year}-"

    result = await db.execute(
        select(Bid.code)
        .where(Bid.code.like(f"{prefix}%"))
        .order_by(func.length(Bid.code).desc(), Bid.code.desc())
        .limit(1)
    )
    highest = result.scalar_one_or_none()
    return format_bid_code(year, parse_sequence(highest) + 1 if highest else 1)
