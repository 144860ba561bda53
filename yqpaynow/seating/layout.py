"""
Seat label arithmetic for screen QR generation.

A seat label is one or more upper-case row letters followed by a seat
number (``A1``, ``K12``, ``AA3``). Ranges run row-major: the first row
starts at the start seat's number, every later row starts at 1, and every
row ends at the end seat's number.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set, Tuple

SEAT_PATTERN = re.compile(r"^([A-Z]+)(\d+)$")
MAX_SEATS_PER_BATCH = 100
DEFAULT_RANGE: Tuple[str, str] = ("A1", "A20")


@dataclass(frozen=True, order=True)
class Seat:
    row: str
    number: int

    @property
    def label(self) -> str:
        return f"{self.row}{self.number}"


@dataclass
class SeatRow:
    """One row of a seat map."""

    row: str
    seats: List[int] = field(default_factory=list)

    @property
    def labels(self) -> List[str]:
        return [f"{self.row}{number}" for number in self.seats]


def parse_seat(label: str) -> Seat:
    """
    Split a seat label into row and number.

    Raises:
        ValueError: The label is not letters followed by digits
    """
    match = SEAT_PATTERN.match(label.strip().upper()) if label else None
    if not match:
        raise ValueError(f"Invalid seat label: {label!r}")
    return Seat(match.group(1), int(match.group(2)))


def _row_index(row: str) -> int:
    """Spreadsheet-style index: A=1 .. Z=26, AA=27."""
    index = 0
    for char in row:
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index


def _row_name(index: int) -> str:
    name = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        name = chr(ord("A") + remainder) + name
    return name


def expand_seat_range(start: str, end: str) -> List[str]:
    """
    Expand ``start``..``end`` into seat labels.

    Same row: every seat from the start number to the end number.
    Across rows: the first row runs from the start number to the end number,
    each following row from 1 to the end number.
    Invalid labels or a reversed range give an empty list.
    """
    try:
        first = parse_seat(start)
        last = parse_seat(end)
    except ValueError:
        return []

    first_row, last_row = _row_index(first.row), _row_index(last.row)
    if first_row > last_row:
        return []

    if first_row == last_row:
        return [f"{first.row}{n}" for n in range(first.number, last.number + 1)]

    labels: List[str] = []
    for index in range(first_row, last_row + 1):
        row = _row_name(index)
        begin = first.number if index == first_row else 1
        labels.extend(f"{row}{n}" for n in range(begin, last.number + 1))
    return labels


def count_seats(start: str, end: str) -> int:
    return len(expand_seat_range(start, end))


def sort_seats(labels: Iterable[str]) -> List[str]:
    """Sort labels by row then seat number; duplicates are dropped."""
    seats = {parse_seat(label) for label in labels}
    return [seat.label for seat in sorted(seats, key=lambda s: (_row_index(s.row), s.number))]


def build_seat_map(ranges: Sequence[Tuple[str, str]]) -> List[SeatRow]:
    """Union of several ranges grouped by row, rows and seat numbers ascending."""
    grouped: Dict[str, Set[int]] = {}
    for start, end in ranges:
        for label in expand_seat_range(start, end):
            seat = parse_seat(label)
            grouped.setdefault(seat.row, set()).add(seat.number)
    return [SeatRow(row, sorted(grouped[row])) for row in sorted(grouped, key=_row_index)]


def selection_to_range(labels: Iterable[str]) -> Tuple[str, str]:
    """
    First and last seat of a selection after sorting.

    An empty selection yields the default ``A1``..``A20`` range.
    """
    ordered = sort_seats(labels)
    if not ordered:
        return DEFAULT_RANGE
    return ordered[0], ordered[-1]


def toggle_seat(selection: Sequence[str], label: str) -> List[str]:
    """Add ``label`` to the selection, or remove it when already selected."""
    normalized = parse_seat(label).label
    current = [parse_seat(item).label for item in selection]
    if normalized in current:
        return [item for item in current if item != normalized]
    return sort_seats(current + [normalized])
