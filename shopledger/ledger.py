import logging
from datetime import date, datetime
from typing import Annotated, Any, Callable, Optional

import pydantic

from . import reports, settings
from .errors import InsufficientStockError, NotFoundError, ValidationError
from .schemas import Expense, Product, Sale, SalePreview
from .store import KeyValueStore
from .utils import is_blank, local_time_str, new_id, round_money

logger = logging.getLogger(__name__)

_INT = pydantic.TypeAdapter(int)
_FLOAT = pydantic.TypeAdapter(Annotated[float, pydantic.AllowInfNan(False)])


def _describe(error: pydantic.ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'value'}: {err['msg']}"
        for err in error.errors()
    )


def _coerce(adapter: pydantic.TypeAdapter, value: Any, field: str):
    if is_blank(value):
        raise ValidationError(f"{field} is required")
    try:
        return adapter.validate_python(value)
    except pydantic.ValidationError as e:
        raise ValidationError(f"{field} must be a finite number, got {value!r}") from e


def price_sale(
    product: Product, quantity: int, custom_price: Optional[float] = None
) -> SalePreview:
    """Effective price, total and profit of selling `quantity` units of `product`."""
    price = product.selling_price if custom_price is None else custom_price
    return SalePreview(
        price=price,
        quantity=quantity,
        total=round_money(price * quantity),
        profit=round_money((price - product.cost_price) * quantity),
    )


def sale_preview(product: Product, quantity: Any, custom_price: Any = None) -> SalePreview:
    """What recording this sale would produce. Nothing is mutated."""
    qty = _coerce(_INT, quantity, "quantity")
    if qty <= 0:
        raise ValidationError("quantity must be greater than zero")
    price = None if is_blank(custom_price) else _coerce(_FLOAT, custom_price, "custom price")
    if price is not None and price < 0:
        raise ValidationError("custom price cannot be negative")
    return price_sale(product, qty, price)


class Ledger:
    """
    Holds the product, sale and expense collections for one shop session.

    The collections are read from the injected store once, at construction.
    Each mutation validates first, then writes every collection it touched back
    to the store; a rejected action raises a LedgerError and changes nothing.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.clock = clock
        self._products: list[Product] = self._load(settings.PRODUCTS_KEY, Product)
        self._sales: list[Sale] = self._load(settings.SALES_KEY, Sale)
        self._expenses: list[Expense] = self._load(settings.EXPENSES_KEY, Expense)
        logger.info(
            f"Ledger loaded: {len(self._products)} products, "
            f"{len(self._sales)} sales, {len(self._expenses)} expenses."
        )

    # --- Persistence ---

    def _load(self, key: str, model: type[pydantic.BaseModel]) -> list:
        raw = self.store.get(key, [])
        try:
            return [model.model_validate(item) for item in raw]
        except pydantic.ValidationError as e:
            logger.error(f"❌ Stored '{key}' failed validation!")
            logger.error(e)
            raise ValidationError(f"stored {key} are malformed: {_describe(e)}") from e

    @staticmethod
    def _dump(items: list[pydantic.BaseModel]) -> list[dict]:
        return [
            item.model_dump(mode="json", by_alias=True, exclude_none=True)
            for item in items
        ]

    def _commit(self, **collections: list) -> None:
        """Writes each named collection to the store, then adopts it in memory."""
        keys = {
            "products": settings.PRODUCTS_KEY,
            "sales": settings.SALES_KEY,
            "expenses": settings.EXPENSES_KEY,
        }
        payloads = {name: self._dump(items) for name, items in collections.items()}
        for name, payload in payloads.items():
            self.store.set(keys[name], payload)
        for name, items in collections.items():
            setattr(self, f"_{name}", items)

    # --- Collections ---

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def sales(self) -> list[Sale]:
        return list(self._sales)

    @property
    def expenses(self) -> list[Expense]:
        return list(self._expenses)

    def today(self) -> date:
        return self.clock().date()

    def get_product(self, product_id: str) -> Product:
        for product in self._products:
            if product.id == product_id:
                return product
        raise NotFoundError("Product", product_id)

    # --- Products & stock ---

    def add_product(
        self,
        name: str,
        cost_price: Any,
        selling_price: Any,
        quantity: Any,
        min_stock: Any = None,
        category: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Product:
        required = {
            "name": name,
            "cost price": cost_price,
            "selling price": selling_price,
            "quantity": quantity,
        }
        missing = [field for field, value in required.items() if is_blank(value)]
        if missing:
            logger.warning(f"⚠️  Product rejected, missing: {', '.join(missing)}")
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        try:
            product = Product(
                id=new_id(self.clock(), (p.id for p in self._products)),
                name=name.strip() if isinstance(name, str) else name,
                category=settings.DEFAULT_CATEGORY if is_blank(category) else category,
                cost_price=cost_price,
                selling_price=selling_price,
                quantity=quantity,
                min_stock=settings.DEFAULT_MIN_STOCK if is_blank(min_stock) else min_stock,
                image_url=None if is_blank(image_url) else image_url,
            )
        except pydantic.ValidationError as e:
            logger.warning(f"⚠️  Product rejected: {_describe(e)}")
            raise ValidationError(_describe(e)) from e

        self._commit(products=[*self._products, product])
        logger.info(f"✅ Product added: {product.name} ({product.quantity} in stock)")
        return product

    def adjust_stock(self, product_id: str, delta: Any) -> Product:
        """
        Moves stock by `delta` units. The result is floored at zero rather than
        rejected, so a large negative delta empties the shelf.
        """
        change = _coerce(_INT, delta, "stock change")
        product = self.get_product(product_id)

        updated = product.model_copy(
            update={"quantity": max(0, product.quantity + change)}
        )
        self._commit(
            products=[updated if p.id == product.id else p for p in self._products]
        )
        logger.info(
            f"Stock updated: {product.name} {product.quantity} -> {updated.quantity}"
        )
        return updated

    def low_stock_products(self) -> list[Product]:
        return reports.low_stock_products(self._products)

    def in_stock_products(self) -> list[Product]:
        return reports.in_stock_products(self._products)

    def unit_margin(self, product_id: str):
        return reports.unit_margin(self.get_product(product_id))

    # --- Sales ---

    def record_sale(
        self, product_id: str, quantity: Any, custom_price: Any = None
    ) -> Sale:
        if is_blank(product_id) or is_blank(quantity):
            logger.warning("⚠️  Sale rejected: product and quantity are required.")
            raise ValidationError("Please select a product and enter quantity")

        qty = _coerce(_INT, quantity, "quantity")
        if qty <= 0:
            raise ValidationError("quantity must be greater than zero")
        price = None if is_blank(custom_price) else _coerce(_FLOAT, custom_price, "custom price")
        if price is not None and price < 0:
            raise ValidationError("custom price cannot be negative")

        product = self.get_product(product_id)
        if qty > product.quantity:
            logger.warning(
                f"⚠️  Sale rejected: {qty} x {product.name} requested, "
                f"{product.quantity} available."
            )
            raise InsufficientStockError(product.name, qty, product.quantity)

        priced = price_sale(product, qty, price)
        moment = self.clock()
        sale = Sale(
            id=new_id(moment, (s.id for s in self._sales)),
            product_id=product.id,
            product_name=product.name,
            price=priced.price,
            quantity=qty,
            date=moment.date(),
            time=local_time_str(moment),
            profit=priced.profit,
        )
        updated = product.model_copy(update={"quantity": product.quantity - qty})

        # Stock and sale history move together or not at all.
        self._commit(
            products=[updated if p.id == product.id else p for p in self._products],
            sales=[sale, *self._sales],
        )
        logger.info(
            f"✅ Sale recorded: {qty} x {product.name} @ {priced.price:.2f} "
            f"(profit {priced.profit:.2f})"
        )
        return sale

    # --- Expenses ---

    def add_expense(
        self,
        category: str,
        description: str,
        amount: Any,
        date: Any = None,
        recurring: bool = False,
        frequency: Optional[str] = None,
    ) -> Expense:
        required = {"category": category, "description": description, "amount": amount}
        missing = [field for field, value in required.items() if is_blank(value)]
        if missing:
            logger.warning(f"⚠️  Expense rejected, missing: {', '.join(missing)}")
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        recurring = bool(recurring)
        if recurring and is_blank(frequency):
            frequency = settings.DEFAULT_EXPENSE_FREQUENCY

        try:
            expense = Expense(
                id=new_id(self.clock(), (e.id for e in self._expenses)),
                category=category,
                description=description.strip() if isinstance(description, str) else description,
                amount=amount,
                date=self.today() if is_blank(date) else date,
                recurring=recurring,
                frequency=frequency if recurring else None,
            )
        except pydantic.ValidationError as e:
            logger.warning(f"⚠️  Expense rejected: {_describe(e)}")
            raise ValidationError(_describe(e)) from e

        self._commit(expenses=[expense, *self._expenses])
        logger.info(f"✅ Expense added: {expense.category} {expense.amount:.2f}")
        return expense

    def delete_expense(self, expense_id: str) -> None:
        remaining = [e for e in self._expenses if e.id != expense_id]
        if len(remaining) == len(self._expenses):
            logger.info(f"INFO: No expense with id {expense_id}, nothing to delete.")
            return
        self._commit(expenses=remaining)
        logger.info(f"Expense {expense_id} deleted.")

    # --- Views for the current day ---

    def daily_totals(self, day: Optional[date] = None):
        return reports.daily_totals(self._sales, day or self.today())

    def period_series(self, granularity: str):
        return reports.period_series(self._sales, granularity, self.clock())

    def top_products(self, limit: int = settings.TOP_PRODUCTS_LIMIT):
        return reports.top_products(self._sales, limit)

    def top_selling_today(self, limit: int = settings.TOP_SELLING_TODAY_LIMIT):
        return reports.top_selling_today(self._sales, self._products, self.today(), limit)

    def best_selling_today(self):
        return reports.best_selling_today(self._sales, self.today())

    def most_profitable_today(self):
        return reports.most_profitable_today(self._sales, self.today())

    def todays_sales(self, limit: Optional[int] = settings.RECENT_SALES_LIMIT):
        return reports.sales_for_day(self._sales, self.today(), limit)

    def dashboard(self):
        return reports.dashboard_summary(self._sales, self._products, self.today())

    def expense_summary(self):
        return reports.expense_summary(self._expenses, self.today())
