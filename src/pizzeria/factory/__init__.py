"""Pizza factory selection.

Provides get_factory() / set_factory() to swap implementations:
- HttpFactory talking to the configured factory URL
- FakeFactory for development and testing (``PIZZERIA_FACTORY_ADAPTER=fake``)
"""

from pizzeria.config import get_settings
from pizzeria.factory.fake_adapter import FakeFactory
from pizzeria.factory.http_adapter import HttpFactory
from pizzeria.factory.port import FactoryPort

_current_factory: FactoryPort | None = None


def get_factory() -> FactoryPort:
    """Return the active factory, building it from settings on first use."""
    global _current_factory
    if _current_factory is None:
        settings = get_settings()
        if settings.factory_adapter == "fake":
            _current_factory = FakeFactory()
        else:
            _current_factory = HttpFactory(
                base_url=settings.factory_url,
                api_key=settings.factory_api_key,
                timeout=settings.factory_timeout_seconds,
            )
    return _current_factory


def set_factory(factory: FactoryPort) -> None:
    """Override the active factory (useful for tests)."""
    global _current_factory
    _current_factory = factory


def reset_factory() -> None:
    global _current_factory
    _current_factory = None
