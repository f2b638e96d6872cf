# subslayer/core/products.py
# Stripe catalogue for the upgrade flow. Price ids come from the Stripe
# dashboard; test-mode ids are used while STRIPE_TEST_MODE is on.
from dataclasses import dataclass
from typing import List, Optional

from .config import settings

@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    mode: str
    monthly_price_id: Optional[str]
    annual_price_id: Optional[str]
    test_monthly_price_id: Optional[str] = None
    test_annual_price_id: Optional[str] = None

    def price_ids(self, test_mode: bool) -> List[str]:
        if test_mode:
            ids = [self.test_monthly_price_id, self.test_annual_price_id]
        else:
            ids = [self.monthly_price_id, self.annual_price_id]
        return [price_id for price_id in ids if price_id]

PRODUCTS: List[Product] = [
    Product(
        id="prod_SWDsXvUHMQVVfC",
        name="SubSlayer Pro",
        description=(
            "Track, manage and cancel subscriptions before they renew. Renewal "
            "reminders, a clean dashboard of every active plan and a running "
            "view of what you spend each month."
        ),
        mode="subscription",
        monthly_price_id="price_1RglYeCIxTxdP6ph0ajymCf0",
        annual_price_id="price_1RglaECIxTxdP6phSEknl1IE",
        test_monthly_price_id="price_1RglYeCIxTxdP6ph0ajymCf0",
        test_annual_price_id="price_1RglaECIxTxdP6phSEknl1IE",
    ),
]

def get_product_by_id(product_id: str) -> Optional[Product]:
    return next((p for p in PRODUCTS if p.id == product_id), None)

def get_product_by_price_id(price_id: str, test_mode: Optional[bool] = None) -> Optional[Product]:
    if test_mode is None:
        test_mode = settings.STRIPE_TEST_MODE
    return next((p for p in PRODUCTS if price_id in p.price_ids(test_mode)), None)

def get_price_id(product_id: str, annual: bool, test_mode: Optional[bool] = None) -> Optional[str]:
    product = get_product_by_id(product_id)
    if not product:
        return None
    if test_mode is None:
        test_mode = settings.STRIPE_TEST_MODE
    if test_mode:
        return product.test_annual_price_id if annual else product.test_monthly_price_id
    return product.annual_price_id if annual else product.monthly_price_id
