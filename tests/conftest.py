"""Pytest configuration and fixtures"""
import json
import pytest
from unittest.mock import Mock

from storefront_cart.cart_store import CartStore
from storefront_cart.config import Config
from storefront_cart.notifications import Notifier
from storefront_cart.storage import InMemoryStorage
from storefront_cart.views import CartPageTargets, ListTarget, TextTarget, ViewSynchronizer


@pytest.fixture
def storage():
    """Empty in-memory storage medium"""
    return InMemoryStorage()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def store(storage, notifier):
    """Cart store over the in-memory medium"""
    return CartStore(storage, notifier=notifier)


@pytest.fixture
def seed_cart(storage):
    """Write raw cart rows straight into storage"""
    def _seed(rows):
        storage.set(Config.CART_STORAGE_KEY, json.dumps(rows))
    return _seed


@pytest.fixture
def cart_page_targets():
    """Every target the dedicated cart page carries"""
    return CartPageTargets(
        header_counter=TextTarget(),
        item_list=ListTarget(),
        summary_item_count=TextTarget(),
        summary_subtotal=TextTarget(),
        summary_total=TextTarget()
    )


@pytest.fixture
def synchronizer(store, cart_page_targets):
    sync = ViewSynchronizer(store, cart_page_targets)
    sync.attach()
    return sync


@pytest.fixture
def mock_redis_client():
    """Mock redis-py client"""
    client = Mock()
    client.get.return_value = None
    client.set.return_value = True
    client.ping.return_value = True
    return client
