from ..core.constants import STAFF_ID_PREFIX


def format_staff_code(seq: int) -> str:
    """Human-readable staff identifier, e.g. 7 -> 'STF-0007'."""
    return f"{STAFF_ID_PREFIX}-{int(seq):04d}"
