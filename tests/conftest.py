import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the config overlay, switches the factory to the in-process fake
    and initializes the pizzeria domain.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("PIZZERIA_ENVIRONMENT", "test")
    os.environ.setdefault("PIZZERIA_FACTORY_ADAPTER", "fake")
    os.environ.setdefault("PIZZERIA_JWT_SECRET", "test-secret")
    os.environ.setdefault("PIZZERIA_ORDERS_PAGE_SIZE", "3")

    from pizzeria.domain import pizzeria

    pizzeria.init()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _pizzeria_domain():
    from pizzeria.domain import pizzeria

    return pizzeria


@pytest.fixture(scope="session", autouse=True)
def setup_db(_pizzeria_domain):
    from pizzeria.utils.db import drop_db, setup_db

    setup_db(_pizzeria_domain)

    yield

    drop_db(_pizzeria_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_pizzeria_domain):
    """Push domain context before each test, cleanup after."""
    from pizzeria.factory import reset_factory
    from pizzeria.telemetry import reset_telemetry

    ctx = _pizzeria_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()

    reset_factory()
    reset_telemetry()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def register():
    """Register a user through the command and return the User aggregate."""
    from protean import current_domain

    from pizzeria.user.registration import RegisterUser
    from pizzeria.user.user import User

    def _register(name="Pat Diner", email="pat@example.com", password="diner-pass", admin=False):
        user_id = current_domain.process(
            RegisterUser(name=name, email=email, password=password, admin=admin),
            asynchronous=False,
        )
        return current_domain.repository_for(User).get(user_id)

    return _register


@pytest.fixture()
def caller_for():
    """Build a Caller for a User aggregate, as the guard would."""
    from pizzeria.auth.guard import Caller, role_from_assignment

    def _caller_for(user, token=""):
        return Caller(
            id=str(user.id),
            name=user.name,
            email=user.email,
            roles=tuple(role_from_assignment(a) for a in user.roles),
            token=token,
        )

    return _caller_for


@pytest.fixture()
def fake_factory():
    from pizzeria.factory import set_factory
    from pizzeria.factory.fake_adapter import FakeFactory

    factory = FakeFactory()
    set_factory(factory)
    return factory
