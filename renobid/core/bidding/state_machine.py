"""Bid status transitions.

pending -> approved | rejected | withdrawn | selected | not_selected
approved -> withdrawn | selected | not_selected
Everything else is terminal.
"""

from renobid.common.enums import BidStatus

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    BidStatus.PENDING.value: frozenset({
        BidStatus.APPROVED.value,
        BidStatus.REJECTED.value,
        BidStatus.WITHDRAWN.value,
        BidStatus.SELECTED.value,
        BidStatus.NOT_SELECTED.value,
    }),
    BidStatus.APPROVED.value: frozenset({
        BidStatus.WITHDRAWN.value,
        BidStatus.SELECTED.value,
        BidStatus.NOT_SELECTED.value,
    }),
    BidStatus.REJECTED.value: frozenset(),
    BidStatus.WITHDRAWN.value: frozenset(),
    BidStatus.SELECTED.value: frozenset(),
    BidStatus.NOT_SELECTED.value: frozenset(),
}

EDITABLE_STATUSES = frozenset({BidStatus.PENDING.value})


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def is_terminal(status: str) -> bool:
    return not ALLOWED_TRANSITIONS.get(status)


def sources_for(target: str) -> frozenset[str]:
    """Statuses from which ``target`` can be reached."""
    return frozenset(s for s, targets in ALLOWED_TRANSITIONS.items() if target in targets)
