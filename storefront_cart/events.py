"""
Event wiring between page interactions and the cart store.
"""
import logging
from typing import Optional

from pydantic import BaseModel, Field

from storefront_cart.cart_store import CartStore
from storefront_cart.config import Config
from storefront_cart.exceptions import ValidationError
from storefront_cart.logging_config import configure_logging
from storefront_cart.models import Cart
from storefront_cart.notifications import Notifier
from storefront_cart.pricing import parse_price
from storefront_cart.redis_client import get_redis_storage
from storefront_cart.storage import InMemoryStorage, KeyValueStorage
from storefront_cart.views import CartPageTargets, ViewSynchronizer

logger = logging.getLogger(__name__)


class AddToCartIntent(BaseModel):
    """Product data read from the clicked product container"""
    name: str = Field(..., description="Raw product title")
    price_text: str = Field(..., description="Displayed price, e.g. '₹39,999'")

    @classmethod
    def from_product_card(cls, title: str, price_label: str) -> "AddToCartIntent":
        return cls(name=title.strip(), price_text=price_label.strip())

    @classmethod
    def from_product_detail(cls, title: str, price_label: str) -> "AddToCartIntent":
        # The detail price label carries extra text after the amount
        tokens = price_label.split()
        return cls(name=title.strip(), price_text=tokens[0] if tokens else "")


class CartPageController:
    """Handlers for page load, add-to-cart and remove clicks"""

    def __init__(self, store: CartStore, synchronizer: ViewSynchronizer):
        self.store = store
        self.synchronizer = synchronizer

    def on_page_load(self) -> None:
        self.synchronizer.update_counter()
        if self.synchronizer.has_list_view:
            logger.info("Rendering cart items on cart page")
            self.synchronizer.render_list()

    def on_add_to_cart(self, intent: Optional[AddToCartIntent]) -> Optional[int]:
        """
        Handle an add-to-cart click.

        Returns:
            New total quantity, or None if the click carried no usable
            product data
        """
        if intent is None:
            logger.error("Add to Cart failed: could not find product data container")
            return None

        try:
            price = parse_price(intent.price_text)
            return self.store.add_item(intent.name, price)
        except ValidationError as e:
            logger.error(f"Add to Cart failed for \"{intent.name}\": {e.message}")
            return None

    def on_remove_click(self, product_name: Optional[str]) -> Optional[Cart]:
        """Handle a click inside the cart list; only remove controls carry a name"""
        if product_name is None:
            return None

        logger.debug(f"Remove click received for product: {product_name}")
        return self.store.remove_item(product_name)


def default_storage() -> KeyValueStorage:
    """Storage medium selected by Config.CART_STORAGE_BACKEND"""
    if Config.CART_STORAGE_BACKEND == "redis":
        return get_redis_storage()
    return InMemoryStorage()


def create_cart_page(
    storage: Optional[KeyValueStorage] = None,
    targets: Optional[CartPageTargets] = None,
    notifier: Optional[Notifier] = None
) -> CartPageController:
    """Wire store, views and handlers for one page"""
    configure_logging()

    store = CartStore(storage if storage is not None else default_storage(), notifier=notifier)
    synchronizer = ViewSynchronizer(store, targets)
    synchronizer.attach()
    return CartPageController(store, synchronizer)
