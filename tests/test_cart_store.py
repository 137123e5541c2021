"""
Tests for the cart store: transitions, persistence and totals
"""
import json
import pytest
from decimal import Decimal

from storefront_cart.cart_store import CartStore, add_line_item, remove_line_item
from storefront_cart.config import Config
from storefront_cart.exceptions import StorageError, ValidationError
from storefront_cart.models import Cart, LineItem
from storefront_cart.pricing import parse_price
from storefront_cart.storage import InMemoryStorage


class FailingWriteStorage(InMemoryStorage):
    """Storage whose writes always fail"""

    def set(self, key, value):
        raise StorageError("quota exceeded")


class TestPureTransitions:
    """Transitions compute a new cart without touching storage."""

    def test_add_appends_new_item(self):
        cart = add_line_item(Cart(), "Wireless Mouse", Decimal("799"))

        assert cart.items == [LineItem(name="Wireless Mouse", price=799, quantity=1)]

    def test_add_does_not_mutate_input(self):
        original = Cart(items=[LineItem(name="Wireless Mouse", price=799, quantity=1)])

        add_line_item(original, "Wireless Mouse", Decimal("799"))

        assert original.items[0].quantity == 1

    def test_add_merges_untrimmed_stored_name(self):
        cart = Cart(items=[LineItem(name="  Keyboard  ", price=1299, quantity=1)])

        result = add_line_item(cart, "Keyboard", Decimal("1299"))

        assert len(result.items) == 1
        assert result.items[0].quantity == 2
        assert result.items[0].name == "  Keyboard  "

    def test_add_is_case_sensitive(self):
        cart = add_line_item(Cart(), "keyboard", Decimal("10"))
        cart = add_line_item(cart, "Keyboard", Decimal("10"))

        assert [item.name for item in cart.items] == ["keyboard", "Keyboard"]

    def test_remove_reports_outcome(self):
        cart = Cart(items=[LineItem(name="USB Cable", price=199, quantity=1)])

        kept, removed = remove_line_item(cart, "USB Cable")
        assert kept.is_empty
        assert removed is True

        kept, removed = remove_line_item(cart, "HDMI Cable")
        assert kept == cart
        assert removed is False

    def test_remove_is_not_prefix_match(self):
        cart = Cart(items=[LineItem(name="USB Cable 2m", price=249, quantity=1)])

        kept, removed = remove_line_item(cart, "USB Cable")

        assert removed is False
        assert len(kept.items) == 1


class TestLoad:
    """Tests for reading the persisted cart."""

    def test_absent_key_is_empty_cart(self, store):
        assert store.load() == Cart()

    @pytest.mark.parametrize("raw", [
        "not json",
        "",
        "null",
        '{"name": "Wireless Mouse"}',
        '[{"name": "Wireless Mouse"}]',
        '[{"name": "Wireless Mouse", "price": 799, "quantity": 0}]',
        '[{"name": "Wireless Mouse", "price": -1, "quantity": 1}]',
        '[{"name": 42, "price": 799, "quantity": 1}]',
    ])
    def test_malformed_state_is_empty_cart(self, storage, store, raw):
        storage.set(Config.CART_STORAGE_KEY, raw)

        assert store.load() == Cart()

    def test_malformed_state_is_logged(self, storage, store, caplog):
        storage.set(Config.CART_STORAGE_KEY, "{broken")

        store.load()

        assert "malformed cart" in caplog.text

    def test_preserves_insertion_order(self, store, seed_cart):
        seed_cart([
            {"name": "USB Cable", "price": 199, "quantity": 1},
            {"name": "Wireless Mouse", "price": 799, "quantity": 2},
        ])

        assert [item.name for item in store.load().items] == ["USB Cable", "Wireless Mouse"]


class TestSave:
    """Tests for the persisted representation."""

    @pytest.mark.parametrize("items", [
        [],
        [LineItem(name="Wireless Mouse", price=799, quantity=3)],
        [
            LineItem(name="  Keyboard  ", price=1299, quantity=1),
            LineItem(name="USB Cable", price=Decimal("49.5"), quantity=2),
            LineItem(name="Monitor", price=0, quantity=1),
        ],
        [LineItem(name="Charger", price=Decimal("0.12345678901234567890"), quantity=2)],
    ])
    def test_round_trip(self, store, items):
        cart = Cart(items=items)

        store.save(cart)

        assert store.load() == cart

    def test_layout_is_json_array(self, storage, store):
        store.save(Cart(items=[LineItem(name="Wireless Mouse", price=799, quantity=1)]))

        stored = json.loads(storage.get(Config.CART_STORAGE_KEY))
        assert stored == [{"name": "Wireless Mouse", "price": 799, "quantity": 1}]

    def test_custom_key(self, storage):
        store = CartStore(storage, key="otherCart")

        store.add_item("Wireless Mouse", 799)

        assert "otherCart" in storage
        assert Config.CART_STORAGE_KEY not in storage

    def test_listeners_receive_saved_cart(self, store):
        seen = []
        store.subscribe(seen.append)

        store.add_item("Wireless Mouse", 799)

        assert len(seen) == 1
        assert seen[0].total_quantity == 1

    def test_storage_failure_propagates(self):
        storage = FailingWriteStorage({
            Config.CART_STORAGE_KEY: '[{"name": "USB Cable", "price": 199, "quantity": 1}]'
        })
        store = CartStore(storage)

        with pytest.raises(StorageError):
            store.add_item("Wireless Mouse", 799)

        assert [item.name for item in store.load().items] == ["USB Cable"]


class TestAddItem:
    """Tests for adding products."""

    def test_first_add(self, store):
        total = store.add_item("Wireless Mouse", 799)

        assert total == 1
        assert store.load().items == [LineItem(name="Wireless Mouse", price=799, quantity=1)]

    def test_second_add_merges(self, store):
        store.add_item("Wireless Mouse", 799)
        total = store.add_item("Wireless Mouse", 799)

        assert total == 2
        assert store.load().items == [LineItem(name="Wireless Mouse", price=799, quantity=2)]

    def test_repeated_adds_never_duplicate(self, store):
        for _ in range(7):
            store.add_item("Wireless Mouse", 799)

        cart = store.load()
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 7

    def test_name_is_trimmed_before_storing(self, store):
        store.add_item("  Keyboard  ", 1299)
        store.add_item("Keyboard", 1299)

        assert store.load().items == [LineItem(name="Keyboard", price=1299, quantity=2)]

    def test_price_rounded_to_stored_precision(self, store):
        store.add_item("Charger", parse_price("₹0.12345678901234567890"))
        store.add_item("Charger", Decimal("0.12345678901234567890"))

        cart = store.load()
        assert cart.items == [LineItem(name="Charger", price=Decimal("0.123"), quantity=2)]
        assert store.subtotal() == Decimal("0.246")

    def test_confirmation_message(self, store, notifier):
        store.add_item("Wireless Mouse", 799)
        store.add_item("USB Cable", 199)

        assert notifier.last == "1 x USB Cable added to cart. Cart Total Items: 2"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_rejected(self, storage, store, name):
        with pytest.raises(ValidationError):
            store.add_item(name, 799)

        assert Config.CART_STORAGE_KEY not in storage

    @pytest.mark.parametrize("price", [-1, "abc", float("nan"), Decimal("12345678901234567.5")])
    def test_invalid_price_rejected(self, store, price):
        with pytest.raises(ValidationError):
            store.add_item("Wireless Mouse", price)


class TestRemoveItem:
    """Tests for removing products."""

    def test_remove_existing(self, store, seed_cart):
        seed_cart([
            {"name": "Wireless Mouse", "price": 799, "quantity": 2},
            {"name": "USB Cable", "price": 199, "quantity": 1},
        ])

        cart = store.remove_item("Wireless Mouse")

        assert cart.items == [LineItem(name="USB Cable", price=199, quantity=1)]
        assert store.load() == cart
        assert store.subtotal() == Decimal("199")

    def test_remove_trims_both_sides(self, store, seed_cart):
        seed_cart([{"name": "  Keyboard  ", "price": 1299, "quantity": 1}])

        cart = store.remove_item("Keyboard ")

        assert cart.is_empty

    def test_remove_missing_is_noop(self, storage, store, seed_cart):
        seed_cart([
            {"name": "Wireless Mouse", "price": 799, "quantity": 2},
            {"name": "USB Cable", "price": 199, "quantity": 1},
        ])
        before = store.load()

        cart = store.remove_item("HDMI Cable")

        assert cart == before
        assert store.load() == before

    def test_remove_missing_still_persists(self, storage, store):
        store.remove_item("HDMI Cable")

        assert json.loads(storage.get(Config.CART_STORAGE_KEY)) == []

    def test_remove_missing_is_logged(self, store, caplog):
        store.remove_item("HDMI Cable")

        assert 'Item "HDMI Cable" was not found in cart' in caplog.text

    def test_confirmation_message(self, store, notifier):
        store.add_item("Wireless Mouse", 799)

        store.remove_item(" Wireless Mouse ")

        assert notifier.last == '"Wireless Mouse" has been removed.'


class TestTotals:
    """Derived totals always reflect the persisted cart."""

    def test_empty_totals(self, store):
        assert store.total_quantity() == 0
        assert store.subtotal() == Decimal("0")

    def test_totals_after_mutations(self, store):
        store.add_item("Wireless Mouse", 799)
        store.add_item("Wireless Mouse", 799)
        store.add_item("USB Cable", 199)
        store.add_item("Keyboard", 1299)
        store.remove_item("Keyboard")

        cart = store.load()
        assert store.total_quantity() == sum(item.quantity for item in cart.items) == 3
        assert store.subtotal() == Decimal("1797")
