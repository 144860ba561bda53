"""
Stock ledger arithmetic.

Entries are replayed in date order from an opening balance. ADDED, RETURNED
and positive ADJUSTMENT entries raise the balance; SOLD, EXPIRED, DAMAGED
and negative ADJUSTMENT entries lower it. The balance never drops below
zero, and a month opens with the previous month's closing balance.

Sales draw on the oldest batch that has not expired on the sale day (FIFO).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Optional, Protocol, Sequence

from yqpaynow.core.models.domain.enums import StockEntryType
from yqpaynow.core.models.io.common import to_utc


class LedgerEntry(Protocol):
    id: Optional[int]
    entry_date: datetime
    entry_type: str
    quantity: int
    expire_date: Optional[datetime]
    batch_number: Optional[str]


@dataclass(frozen=True)
class Movement:
    """How one entry splits into the ledger columns."""

    stock_added: int = 0
    used_stock: int = 0
    expired_stock: int = 0
    damage_stock: int = 0

    @property
    def outgoing(self) -> int:
        return self.used_stock + self.expired_stock + self.damage_stock


@dataclass(frozen=True)
class LedgerLine:
    entry: Any
    carry_forward: int
    balance: int
    movement: Movement


@dataclass(frozen=True)
class LedgerTotals:
    opening_balance: int
    total_added: int
    total_sold: int
    total_expired: int
    total_damaged: int
    closing_balance: int


@dataclass(frozen=True)
class MonthPeriod:
    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")

    @classmethod
    def containing(cls, moment: datetime) -> "MonthPeriod":
        moment = to_utc(moment)
        return cls(moment.year, moment.month)

    @property
    def name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def start(self) -> datetime:
        return datetime(self.year, self.month, 1, tzinfo=timezone.utc)

    @property
    def end(self) -> datetime:
        return self.next().start

    def previous(self) -> "MonthPeriod":
        return MonthPeriod(self.year - 1, 12) if self.month == 1 else MonthPeriod(self.year, self.month - 1)

    def next(self) -> "MonthPeriod":
        return MonthPeriod(self.year + 1, 1) if self.month == 12 else MonthPeriod(self.year, self.month + 1)


@dataclass
class Lot:
    """Units still on hand from one addition."""

    entry_id: Optional[int]
    entry_date: datetime
    batch_number: Optional[str]
    expire_date: Optional[datetime]
    remaining: int

    def usable_on(self, day: date) -> bool:
        """Stock stays sellable through its expiry day."""
        return self.expire_date is None or to_utc(self.expire_date).date() >= day


@dataclass(frozen=True)
class Allocation:
    entry_id: Optional[int]
    entry_date: datetime
    batch_number: Optional[str]
    quantity: int


@dataclass
class FifoResult:
    allocations: List[Allocation] = field(default_factory=list)
    shortfall: int = 0


def movement(entry_type: str, quantity: int) -> Movement:
    """Split ``quantity`` into the column its entry type books it under."""
    kind = StockEntryType(entry_type)
    qty = abs(int(quantity))
    if kind in (StockEntryType.ADDED, StockEntryType.RETURNED):
        return Movement(stock_added=qty)
    if kind == StockEntryType.SOLD:
        return Movement(used_stock=qty)
    if kind == StockEntryType.EXPIRED:
        return Movement(expired_stock=qty)
    if kind == StockEntryType.DAMAGED:
        return Movement(damage_stock=qty)
    return Movement(stock_added=qty) if quantity > 0 else Movement(used_stock=qty)


def apply_entry(balance: int, entry_type: str, quantity: int) -> int:
    moved = movement(entry_type, quantity)
    return max(0, balance + moved.stock_added - moved.outgoing)


def replay(entries: Iterable[LedgerEntry], opening_balance: int = 0) -> List[LedgerLine]:
    """Running balances of ``entries``, which must already be in ledger order."""
    lines: List[LedgerLine] = []
    balance = opening_balance
    for entry in entries:
        moved = movement(entry.entry_type, entry.quantity)
        after = max(0, balance + moved.stock_added - moved.outgoing)
        lines.append(LedgerLine(entry=entry, carry_forward=balance, balance=after, movement=moved))
        balance = after
    return lines


def closing_balance(entries: Iterable[LedgerEntry], opening_balance: int = 0) -> int:
    balance = opening_balance
    for entry in entries:
        balance = apply_entry(balance, entry.entry_type, entry.quantity)
    return balance


def summarize(lines: Sequence[LedgerLine], opening_balance: int) -> LedgerTotals:
    return LedgerTotals(
        opening_balance=opening_balance,
        total_added=sum(line.movement.stock_added for line in lines),
        total_sold=sum(line.movement.used_stock for line in lines),
        total_expired=sum(line.movement.expired_stock for line in lines),
        total_damaged=sum(line.movement.damage_stock for line in lines),
        closing_balance=lines[-1].balance if lines else opening_balance,
    )


def allocate_fifo(lots: Sequence[Lot], quantity: int, day: Optional[date] = None) -> FifoResult:
    """
    Take ``quantity`` units from ``lots`` oldest first, mutating their ``remaining``.

    With ``day`` set, lots expired by then are skipped. Units no lot could
    cover are reported as ``shortfall``.
    """
    result = FifoResult()
    wanted = quantity
    for lot in lots:
        if wanted <= 0:
            break
        if lot.remaining <= 0 or (day is not None and not lot.usable_on(day)):
            continue
        taken = min(wanted, lot.remaining)
        lot.remaining -= taken
        wanted -= taken
        result.allocations.append(Allocation(lot.entry_id, lot.entry_date, lot.batch_number, taken))
    result.shortfall = wanted
    return result


def open_lots(entries: Iterable[LedgerEntry]) -> List[Lot]:
    """
    Batches with units left after replaying ``entries`` in ledger order.

    Sales skip expired batches; expiry, damage and negative adjustments
    write off the oldest units regardless of expiry.
    """
    lots: List[Lot] = []
    for entry in entries:
        moved = movement(entry.entry_type, entry.quantity)
        if moved.stock_added:
            lots.append(
                Lot(
                    entry_id=entry.id,
                    entry_date=entry.entry_date,
                    batch_number=entry.batch_number,
                    expire_date=entry.expire_date,
                    remaining=moved.stock_added,
                )
            )
        elif moved.used_stock and entry.entry_type == StockEntryType.SOLD.value:
            allocate_fifo(lots, moved.used_stock, to_utc(entry.entry_date).date())
        elif moved.outgoing:
            allocate_fifo(lots, moved.outgoing)
    return [lot for lot in lots if lot.remaining > 0]


def describe_allocations(allocations: Sequence[Allocation]) -> str:
    """``FIFO: 2 from 2026-10-01 (B-17), 1 from 2026-10-05``."""
    if not allocations:
        return ""
    parts = []
    for allocation in allocations:
        part = f"{allocation.quantity} from {to_utc(allocation.entry_date):%Y-%m-%d}"
        if allocation.batch_number:
            part += f" ({allocation.batch_number})"
        parts.append(part)
    return "FIFO: " + ", ".join(parts)
