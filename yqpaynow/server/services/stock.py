"""
Per-product stock ledger.

Every change to a product's ledger re-replays it and writes the closing
balance back to ``Product.current_stock``. Entries written by orders (sales
and the returns of cancelled orders) belong to the order and cannot be
edited or deleted here.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database import utc_now
from yqpaynow.core.database.entities import Order, Product, StockEntry
from yqpaynow.core.database.repositories import ProductRepository, StockEntryRepository
from yqpaynow.core.errors import ConflictError, NotFoundError, ValidationFailedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.enums import StockEntryType
from yqpaynow.core.models.io.stock import (
    StockEntryCreate,
    StockEntryRead,
    StockEntryUpdate,
    StockMonthResponse,
    StockPeriod,
    StockProductInfo,
    StockStatistics,
)
from yqpaynow.inventory import (
    MonthPeriod,
    allocate_fifo,
    closing_balance,
    describe_allocations,
    open_lots,
    replay,
    summarize,
)

logger = get_logger(__name__)


def _entry_read(line) -> StockEntryRead:
    moved = line.movement
    return StockEntryRead.model_validate(line.entry).model_copy(
        update={
            "carry_forward": line.carry_forward,
            "stock_added": moved.stock_added,
            "used_stock": moved.used_stock,
            "expired_stock": moved.expired_stock,
            "damage_stock": moved.damage_stock,
            "balance": line.balance,
        }
    )


class StockService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.entries = StockEntryRepository(session)
        self.products = ProductRepository(session)

    async def _product(self, theater_id: int, product_id: int) -> Product:
        product = await self.products.get_for_theater(theater_id, product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found", code="PRODUCT_NOT_FOUND")
        return product

    async def _entry(self, product: Product, entry_id: int) -> StockEntry:
        entry = await self.entries.get_for_theater(product.theater_id, entry_id)
        if entry is None or entry.product_id != product.id:
            raise NotFoundError(f"Stock entry {entry_id} not found", code="STOCK_ENTRY_NOT_FOUND")
        return entry

    @staticmethod
    def _ensure_manual(entry: StockEntry) -> None:
        if entry.order_id is not None:
            raise ConflictError(
                "Stock entries written by an order cannot be changed",
                code="ORDER_STOCK_ENTRY",
                details={"entry_id": entry.id, "order_id": entry.order_id},
            )

    async def _sync(self, product: Product) -> Product:
        """Write the ledger's closing balance back to the product."""
        entries = await self.entries.list_for_product(product.theater_id, product.id)
        balance = closing_balance(entries)
        if balance != product.current_stock:
            product.current_stock = balance
            product = await self.products.update(product)
        return product

    async def month(self, theater_id: int, product_id: int, period: MonthPeriod) -> StockMonthResponse:
        """
        The ledger of one month, opening with the closing balance of everything before it.
        """
        product = await self._product(theater_id, product_id)
        earlier = await self.entries.list_for_product(theater_id, product_id, date_to=period.start)
        opening = closing_balance(earlier)
        current = await self.entries.list_for_product(
            theater_id, product_id, date_from=period.start, date_to=period.end
        )
        lines = replay(current, opening)
        totals = summarize(lines, opening)
        return StockMonthResponse(
            entries=[_entry_read(line) for line in lines],
            current_stock=product.current_stock,
            statistics=StockStatistics(**asdict(totals)),
            period=StockPeriod(
                year=period.year, month=period.month, month_name=period.name, start=period.start, end=period.end
            ),
            product=StockProductInfo.model_validate(product),
        )

    async def add(
        self, theater_id: int, product_id: int, data: StockEntryCreate, created_by: Optional[str] = None
    ) -> StockEntry:
        product = await self._product(theater_id, product_id)
        fields = data.model_dump()
        fields["entry_type"] = data.entry_type.value
        entry = await self.entries.create(
            StockEntry(theater_id=theater_id, product_id=product.id, created_by=created_by, **fields)
        )
        await self._sync(product)
        logger.info(
            f"Stock {entry.entry_type} x{entry.quantity} for product {product.id} (theater {theater_id})"
        )
        return entry

    async def update(self, theater_id: int, product_id: int, entry_id: int, data: StockEntryUpdate) -> StockEntry:
        """
        Raises:
            ConflictError: ``ORDER_STOCK_ENTRY`` for entries written by an order
            ValidationFailedError: The resulting quantity does not suit the entry type
        """
        product = await self._product(theater_id, product_id)
        entry = await self._entry(product, entry_id)
        self._ensure_manual(entry)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in ("expire_date", "batch_number")
        }
        entry_type = StockEntryType(changes.get("entry_type") or entry.entry_type)
        quantity = changes.get("quantity", entry.quantity)
        if quantity is None or (quantity == 0 if entry_type == StockEntryType.ADJUSTMENT else quantity <= 0):
            raise ValidationFailedError(
                "Quantity must be greater than 0", code="INVALID_QUANTITY", details={"quantity": quantity}
            )
        for key, value in changes.items():
            setattr(entry, key, value.value if isinstance(value, StockEntryType) else value)
        entry = await self.entries.update(entry)
        await self._sync(product)
        return entry

    async def delete(self, theater_id: int, product_id: int, entry_id: int) -> Product:
        product = await self._product(theater_id, product_id)
        entry = await self._entry(product, entry_id)
        self._ensure_manual(entry)
        await self.entries.delete(entry.id)
        logger.info(f"Deleted stock entry {entry_id} of product {product_id}")
        return await self._sync(product)

    async def clear_month(self, theater_id: int, product_id: int, period: MonthPeriod) -> Tuple[int, Product]:
        """Drop the month's manual entries; order entries stay. Returns ``(deleted, product)``."""
        product = await self._product(theater_id, product_id)
        deleted = await self.entries.delete_manual_between(theater_id, product_id, period.start, period.end)
        logger.info(f"Cleared {deleted} stock entries of product {product_id} for {period.name} {period.year}")
        return deleted, await self._sync(product)

    async def recalculate(self, theater_id: int, product_id: int) -> StockProductInfo:
        product = await self._sync(await self._product(theater_id, product_id))
        return StockProductInfo.model_validate(product)

    async def record_sales(self, order: Order, quantities: Dict[int, int], products: Dict[int, Product]) -> None:
        """
        Book a SOLD entry per tracked product of a placed order.

        Notes name the batches the sale drew on, oldest unexpired first.
        """
        when = order.created_at or utc_now()
        rows: List[StockEntry] = []
        for product_id, quantity in quantities.items():
            product = products[product_id]
            lots = open_lots(await self.entries.list_for_product(order.theater_id, product_id))
            fifo = allocate_fifo(lots, quantity, when.date())
            if fifo.shortfall:
                logger.warning(
                    f"Order {order.order_number}: {fifo.shortfall} unit(s) of product {product_id} "
                    f"not covered by an unexpired batch"
                )
            rows.append(
                StockEntry(
                    theater_id=order.theater_id,
                    product_id=product.id,
                    entry_date=when,
                    entry_type=StockEntryType.SOLD.value,
                    quantity=quantity,
                    notes=describe_allocations(fifo.allocations),
                    order_id=order.id,
                    created_by=order.created_by,
                )
            )
        if not rows:
            return
        await self.entries.add_all(rows)
        for product_id in quantities:
            await self._sync(products[product_id])

    async def record_returns(self, order: Order) -> int:
        """Put the stock sold by a cancelled order back as RETURNED entries."""
        sold = [
            entry
            for entry in await self.entries.list_for_order(order.id)
            if entry.entry_type == StockEntryType.SOLD.value
        ]
        if not sold:
            return 0
        now = utc_now()
        await self.entries.add_all(
            [
                StockEntry(
                    theater_id=entry.theater_id,
                    product_id=entry.product_id,
                    entry_date=now,
                    entry_type=StockEntryType.RETURNED.value,
                    quantity=entry.quantity,
                    notes=f"Order {order.order_number} cancelled",
                    order_id=order.id,
                )
                for entry in sold
            ]
        )
        for product_id in {entry.product_id for entry in sold}:
            product = await self.products.get_by_id(product_id)
            if product is not None:
                await self._sync(product)
        return len(sold)


def sold_quantities(items: Sequence[Dict], tracked: Dict[int, Product]) -> Dict[int, int]:
    """Units per tracked product across an order's line items."""
    totals: Dict[int, int] = {}
    for item in items:
        product_id = item["product_id"]
        if product_id in tracked:
            totals[product_id] = totals.get(product_id, 0) + int(item["quantity"])
    return totals
