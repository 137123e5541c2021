"""
View synchronizer: projects cart store state onto the page's display targets.

Every target is optional. Pages without the header counter or the cart list
simply leave that target unset, and the matching render step is skipped.
"""
import html
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

from storefront_cart.config import Config
from storefront_cart.cart_store import CartStore
from storefront_cart.models import Cart, CartRow, LineItem
from storefront_cart.pricing import format_price

logger = logging.getLogger(__name__)


class TextSink(Protocol):
    def set_text(self, text: str) -> None:
        ...


class ListSink(Protocol):
    def clear(self) -> None:
        ...

    def show_empty(self, message: str) -> None:
        ...

    def append_row(self, row: CartRow) -> None:
        ...


class TextTarget:
    """In-memory text widget"""

    def __init__(self, text: str = ""):
        self.text = text

    def set_text(self, text: str) -> None:
        self.text = text


class ListTarget:
    """In-memory cart list container"""

    def __init__(self):
        self.rows: List[CartRow] = []
        self.empty_message: Optional[str] = None

    def clear(self) -> None:
        self.rows = []
        self.empty_message = None

    def show_empty(self, message: str) -> None:
        self.empty_message = message

    def append_row(self, row: CartRow) -> None:
        self.rows.append(row)

    def to_html(self) -> str:
        """Render the current content as cart page markup"""
        if self.empty_message is not None:
            return f'<p class="cart-empty">{html.escape(self.empty_message)}</p>'

        parts = []
        for row in self.rows:
            name = html.escape(row.name)
            parts.append(
                '<div class="cart-item">'
                f'<img src="{html.escape(row.image_url)}" alt="{name}">'
                '<div class="item-details">'
                f'<h4>{name}</h4>'
                f'<p>Price: {html.escape(row.unit_price)} | Qty: {row.quantity}</p>'
                f'<button class="remove-btn" data-product-name="{html.escape(row.remove_payload)}">REMOVE</button>'
                '</div>'
                f'<div class="item-price-display">{html.escape(row.line_total)}</div>'
                '</div>'
            )
        return "".join(parts)


@dataclass
class CartPageTargets:
    """Display targets present on the current page"""
    header_counter: Optional[TextSink] = None
    item_list: Optional[ListSink] = None
    summary_item_count: Optional[TextSink] = None
    summary_subtotal: Optional[TextSink] = None
    summary_total: Optional[TextSink] = None


def build_row(item: LineItem) -> CartRow:
    return CartRow(
        name=item.name,
        unit_price=format_price(item.price),
        quantity=item.quantity,
        line_total=format_price(item.line_total),
        remove_payload=item.name,
        image_url=Config.PLACEHOLDER_IMAGE_URL
    )


class ViewSynchronizer:
    """Pushes derived cart values into the page targets"""

    def __init__(self, store: CartStore, targets: Optional[CartPageTargets] = None):
        self.store = store
        self.targets = targets or CartPageTargets()

    @property
    def has_list_view(self) -> bool:
        return self.targets.item_list is not None

    def attach(self) -> None:
        """Re-render after every save of the store"""
        self.store.subscribe(self.sync)

    def sync(self, cart: Optional[Cart] = None) -> None:
        """Counter always, cart list only on the cart page"""
        self.update_counter()
        if self.has_list_view:
            self.render_list()

    def update_counter(self) -> None:
        total_items = self.store.total_quantity()
        counter = self.targets.header_counter

        if counter is None:
            logger.warning("Header cart counter target not found")
            return

        counter.set_text(f"Cart ({total_items})")
        logger.info(f"Header cart count set to: {total_items}")

    def render_list(self) -> None:
        """
        Rebuild the cart list and the price summary.

        Empty carts show Config.EMPTY_CART_MESSAGE instead of rows. Each
        summary field is written only if its target exists.
        """
        item_list = self.targets.item_list
        if item_list is None:
            return

        cart = self.store.load()
        item_list.clear()

        if cart.is_empty:
            item_list.show_empty(Config.EMPTY_CART_MESSAGE)
        else:
            for item in cart.items:
                item_list.append_row(build_row(item))

        subtotal = format_price(cart.subtotal)
        if self.targets.summary_item_count is not None:
            self.targets.summary_item_count.set_text(str(cart.total_quantity))
        if self.targets.summary_subtotal is not None:
            self.targets.summary_subtotal.set_text(subtotal)
        if self.targets.summary_total is not None:
            # No taxes or shipping: grand total equals subtotal
            self.targets.summary_total.set_text(subtotal)
