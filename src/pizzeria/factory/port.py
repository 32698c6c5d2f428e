"""Pizza factory port (abstract interface).

The order workflow talks to the factory only through this contract, so the
HTTP adapter and the in-process fake are interchangeable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class FulfillmentResult:
    """Outcome of one fulfillment request."""

    success: bool
    ticket: str | None = None
    report_url: str | None = None
    status_code: int | None = None
    failure_reason: str | None = None


class FactoryPort(ABC):
    """Abstract pizza factory interface."""

    endpoint: str = ""

    @abstractmethod
    async def order_pizzas(self, diner: dict, order: dict) -> FulfillmentResult:
        """Ask the factory to make the pizzas on ``order`` for ``diner``.

        Exactly one attempt is made. Implementations never raise for
        factory-side problems; they report them as a failed result.
        """
        ...
