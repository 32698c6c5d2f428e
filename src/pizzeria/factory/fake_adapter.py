"""Configurable fake pizza factory for development and testing.

No network calls are made. Tests switch it between success and failure and
inspect ``calls`` to see what the workflow sent.
"""

from uuid import uuid4

from pizzeria.factory.port import FactoryPort, FulfillmentResult


class FakeFactory(FactoryPort):
    """Configurable fake pizza factory."""

    endpoint = "fake://pizza-factory/api/order"

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.report_url: str | None = None
        self.failure_reason: str = "Factory unavailable"
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        report_url: str | None = None,
        failure_reason: str = "Factory unavailable",
    ) -> None:
        """Configure factory behavior at runtime."""
        self.should_succeed = should_succeed
        self.report_url = report_url
        self.failure_reason = failure_reason

    async def order_pizzas(self, diner: dict, order: dict) -> FulfillmentResult:
        self.calls.append({"diner": diner, "order": order})

        if self.should_succeed:
            return FulfillmentResult(
                success=True,
                ticket=f"fake-ticket-{uuid4().hex[:12]}",
                report_url=self.report_url,
                status_code=200,
            )
        return FulfillmentResult(
            success=False,
            report_url=self.report_url,
            status_code=500,
            failure_reason=self.failure_reason,
        )
