import pytest

from restaurant_pos.auth import PasswordAuth
from restaurant_pos.controller import PosController
from restaurant_pos.persistence import SqliteStore


@pytest.fixture(scope='function')
def store(tmp_path):
    """Create a seeded store on a throwaway database."""
    store = SqliteStore(tmp_path / 'pos.db')
    store.bootstrap_schema()
    store.seed_defaults()
    return store


@pytest.fixture(scope='function')
def auth(store):
    return PasswordAuth(store)


@pytest.fixture(scope='function')
def admin_account(auth):
    """Initial admin created the same way first start does."""
    auth.ensure_admin('boss', 'boss-pass')
    return auth.sign_in('boss', 'boss-pass')


@pytest.fixture(scope='function')
def waiter_account(auth):
    return auth.sign_up('wendy', 'wendy-pass')


@pytest.fixture(scope='function')
def notices():
    return []


@pytest.fixture(scope='function')
def controller(store, auth, notices):
    """Controller that records notices instead of showing them."""
    return PosController(store, auth, on_notice=lambda message, severity: notices.append((severity, message)))
