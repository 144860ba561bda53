"""Per-product stock ledger."""

from .ledger import (
    Allocation,
    LedgerLine,
    LedgerTotals,
    Lot,
    MonthPeriod,
    Movement,
    allocate_fifo,
    apply_entry,
    closing_balance,
    describe_allocations,
    movement,
    open_lots,
    replay,
    summarize,
)

__all__ = [
    "Allocation",
    "LedgerLine",
    "LedgerTotals",
    "Lot",
    "MonthPeriod",
    "Movement",
    "allocate_fifo",
    "apply_entry",
    "closing_balance",
    "describe_allocations",
    "movement",
    "open_lots",
    "replay",
    "summarize",
]
