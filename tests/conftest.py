from datetime import date, datetime, timedelta

import pytest

from shopledger.ledger import Ledger
from shopledger.schemas import Product, Sale
from shopledger.store import MemoryStore

TODAY = date(2026, 10, 19)


class FixedClock:
    """A controllable stand-in for datetime.now."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def advance(self, **kwargs) -> None:
        self.moment += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 10, 19, 14, 30, 0))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def ledger(store, clock):
    return Ledger(store, clock=clock)


@pytest.fixture
def soda(ledger):
    """cost 2.00, price 5.00, 10 in stock, alert at 3."""
    return ledger.add_product("Soda", 2.00, 5.00, 10, min_stock=3, category="Drinks")


@pytest.fixture
def make_sale():
    """Build a Sale record directly, bypassing the ledger."""

    def _make(
        product_id="p1",
        name="Soda",
        quantity=1,
        price=5.0,
        profit=None,
        day=TODAY,
        sale_id=None,
        time="2:30:00 PM",
    ):
        _make.counter += 1
        return Sale(
            id=sale_id or str(_make.counter),
            product_id=product_id,
            product_name=name,
            price=price,
            quantity=quantity,
            date=day,
            time=time,
            profit=(price - 2.0) * quantity if profit is None else profit,
        )

    _make.counter = 0
    return _make


@pytest.fixture
def make_product():
    def _make(product_id="p1", name="Soda", quantity=10, min_stock=5, cost=2.0, price=5.0):
        return Product(
            id=product_id,
            name=name,
            cost_price=cost,
            selling_price=price,
            quantity=quantity,
            min_stock=min_stock,
        )

    return _make
