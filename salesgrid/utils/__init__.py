from .money import (
    to_number,
    round1,
    round2,
    to_cents,
    from_cents,
    parse_timestamp,
    format_local,
)

__all__ = [
    "to_number", "round1", "round2", "to_cents", "from_cents",
    "parse_timestamp", "format_local",
]
