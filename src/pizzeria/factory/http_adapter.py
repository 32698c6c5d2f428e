"""HTTP adapter for the pizza factory API."""

import httpx

from pizzeria.factory.port import FactoryPort, FulfillmentResult
from pizzeria.utils.logging import get_logger

logger = get_logger(__name__)


class HttpFactory(FactoryPort):
    """Posts orders to ``{base_url}/api/order`` with the vendor API key."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/order"

    async def order_pizzas(self, diner: dict, order: dict) -> FulfillmentResult:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, json={"diner": diner, "order": order}, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("factory_unreachable", url=self.endpoint, error=str(exc))
            return FulfillmentResult(success=False, failure_reason=f"{type(exc).__name__}: {exc}")

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        report_url = body.get("reportUrl")
        if not response.is_success:
            return FulfillmentResult(
                success=False,
                report_url=report_url,
                status_code=response.status_code,
                failure_reason=body.get("message") or f"factory returned {response.status_code}",
            )
        if not body.get("jwt"):
            return FulfillmentResult(
                success=False,
                report_url=report_url,
                status_code=response.status_code,
                failure_reason="factory response carried no ticket",
            )

        return FulfillmentResult(
            success=True,
            ticket=body["jwt"],
            report_url=report_url,
            status_code=response.status_code,
        )
