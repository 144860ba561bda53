"""Seat-map and seat-range helpers."""

from .layout import (
    DEFAULT_RANGE,
    MAX_SEATS_PER_BATCH,
    Seat,
    SeatRow,
    build_seat_map,
    count_seats,
    expand_seat_range,
    parse_seat,
    selection_to_range,
    sort_seats,
    toggle_seat,
)

__all__ = [
    "DEFAULT_RANGE",
    "MAX_SEATS_PER_BATCH",
    "Seat",
    "SeatRow",
    "build_seat_map",
    "count_seats",
    "expand_seat_range",
    "parse_seat",
    "selection_to_range",
    "sort_seats",
    "toggle_seat",
]
