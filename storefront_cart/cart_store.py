"""
Cart store: canonical cart state persisted through a key-value storage.
"""
import logging
from typing import Callable, List, Optional, Tuple
from decimal import Decimal, InvalidOperation

from pydantic import ValidationError as ModelValidationError

from storefront_cart.config import Config
from storefront_cart.models import Cart, LineItem, normalize_name
from storefront_cart.notifications import Notifier
from storefront_cart.pricing import Number, round_price, to_decimal
from storefront_cart.storage import KeyValueStorage
from storefront_cart.exceptions import ValidationError

logger = logging.getLogger(__name__)

SaveListener = Callable[[Cart], None]


def add_line_item(cart: Cart, name: str, price: Decimal) -> Cart:
    """
    Return a new cart with one more unit of ``name``, merged by identity.

    Stored names are trimmed before comparing too, so a row saved with
    surrounding whitespace by older page code absorbs the add instead of
    getting a duplicate row next to it. Comparison is case-sensitive.
    """
    clean_name = normalize_name(name)
    existing = cart.find(clean_name)

    if existing is None:
        return Cart(items=cart.items + [LineItem(name=clean_name, price=price, quantity=1)])

    items: List[LineItem] = [
        item.model_copy(update={"quantity": item.quantity + 1}) if item is existing else item
        for item in cart.items
    ]
    return Cart(items=items)


def remove_line_item(cart: Cart, name: str) -> Tuple[Cart, bool]:
    """Return a new cart without ``name`` and whether any row was dropped"""
    kept = [item for item in cart.items if not item.matches(name)]
    return Cart(items=kept), len(kept) < len(cart.items)


class CartStore:
    """Owns the persisted cart under a single storage key"""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: Optional[str] = None,
        notifier: Optional[Notifier] = None
    ):
        self.storage = storage
        self.key = key or Config.CART_STORAGE_KEY
        self.notifier = notifier or Notifier()
        self._listeners: List[SaveListener] = []

    def subscribe(self, listener: SaveListener) -> None:
        """Call ``listener`` with the saved cart after every save"""
        self._listeners.append(listener)

    def load(self) -> Cart:
        """
        Read the cart from storage.

        Returns an empty cart when nothing is stored or the stored value
        cannot be parsed. Storage failures propagate.
        """
        raw = self.storage.get(self.key)
        if raw is None:
            return Cart()

        try:
            return Cart.from_storage(raw)
        except ModelValidationError as e:
            logger.warning(
                f"Discarding malformed cart under {self.key}: {e.error_count()} error(s)"
            )
            return Cart()

    def save(self, cart: Cart) -> None:
        """Persist the full cart and refresh subscribed views"""
        self.storage.set(self.key, cart.to_storage())
        for listener in self._listeners:
            listener(cart)

    def add_item(self, name: str, price: Number) -> int:
        """
        Add one unit of a product.

        Args:
            name: Product name, surrounding whitespace is dropped
            price: Unit price, already numeric

        Returns:
            Total quantity in the cart after the add

        Raises:
            ValidationError: If the name is blank, or the price is negative
                or has more digits than a stored price keeps
        """
        clean_name = normalize_name(name)
        if not clean_name:
            raise ValidationError("Product name is required")

        try:
            unit_price = to_decimal(price)
        except InvalidOperation:
            raise ValidationError(f"Price must be a number, got {price!r}")
        if not unit_price.is_finite() or unit_price < 0:
            raise ValidationError(f"Price must be a non-negative number, got {price}")
        unit_price = round_price(unit_price)

        cart = add_line_item(self.load(), clean_name, unit_price)
        self.save(cart)

        total = self.total_quantity()
        self.notifier.notify(f"1 x {clean_name} added to cart. Cart Total Items: {total}")
        return total

    def remove_item(self, name: str) -> Cart:
        """
        Remove every row whose trimmed name equals the trimmed ``name``.

        Removing a product that is not in the cart is a no-op, but the cart
        is still written back.
        """
        clean_name = normalize_name(name)
        cart, removed = remove_line_item(self.load(), clean_name)

        if removed:
            logger.info(f"Removed \"{clean_name}\". Cart now has {len(cart.items)} item(s)")
        else:
            logger.error(f"Item \"{clean_name}\" was not found in cart")

        self.save(cart)
        self.notifier.notify(f"\"{clean_name}\" has been removed.")
        return cart

    def total_quantity(self) -> int:
        """Sum of quantities in the stored cart"""
        return self.load().total_quantity

    def subtotal(self) -> Decimal:
        """Sum of price times quantity in the stored cart"""
        return self.load().subtotal
