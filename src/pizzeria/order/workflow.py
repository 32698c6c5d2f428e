"""Order workflow: placing orders with the factory and listing a diner's orders.

Placement is ordered strictly: the order is written to the ledger first,
then the factory is called, then the caller gets an answer. A factory
failure is reported but never undoes the ledger write.
"""

import json

from protean.utils.globals import current_domain

from pizzeria.auth.guard import Caller
from pizzeria.config import get_settings
from pizzeria.errors import InvalidInput, UpstreamFailure
from pizzeria.factory import get_factory
from pizzeria.factory.port import FactoryPort
from pizzeria.order.order import Order
from pizzeria.order.placement import PlaceOrder
from pizzeria.telemetry import get_metrics
from pizzeria.telemetry.logs import log_factory_request
from pizzeria.telemetry.metrics import MetricsAggregator
from pizzeria.utils.commands import process
from pizzeria.utils.logging import get_logger

logger = get_logger(__name__)

FACTORY_FAILURE_MESSAGE = "Failed to fulfill order at factory"


class OrderWorkflow:
    def __init__(
        self,
        factory: FactoryPort | None = None,
        metrics: MetricsAggregator | None = None,
        page_size: int | None = None,
    ) -> None:
        self.factory = factory or get_factory()
        self.metrics = metrics or get_metrics()
        self.page_size = page_size or get_settings().orders_page_size

    def _record_order(self, caller: Caller, franchise_id, store_id, items: list) -> dict:
        command = PlaceOrder(
            user_id=caller.id,
            franchise_id=str(franchise_id),
            store_id=str(store_id),
            items=json.dumps(items),
        )
        return process(command, failure_message="unable to place order")

    async def place_order(self, caller: Caller, franchise_id, store_id, items: list) -> dict:
        """Record the order, then ask the factory to make it.

        Returns ``{order, jwt}`` plus ``followLinkToEndChaos`` when the factory
        supplies a report link. Raises :class:`UpstreamFailure` when the
        factory does not accept the order; the order stays in the ledger.
        """
        if not items:
            raise InvalidInput("order must contain at least one item")

        order = self._record_order(caller, franchise_id, store_id, items)
        diner = {"id": caller.id, "name": caller.name, "email": caller.email}

        result = await self.factory.order_pizzas(diner, order)
        log_factory_request(
            self.factory.endpoint,
            {"diner": diner, "order": order},
            {
                "status": result.status_code,
                "reportUrl": result.report_url,
                "failureReason": result.failure_reason,
            },
            result.success,
        )

        if not result.success:
            self.metrics.track_pizza_order(False)
            logger.error(
                "factory_rejected_order",
                order_id=order["id"],
                status=result.status_code,
                reason=result.failure_reason,
            )
            raise UpstreamFailure(FACTORY_FAILURE_MESSAGE, report_url=result.report_url)

        revenue = sum(item["price"] for item in order["items"])
        self.metrics.track_pizza_order(True, count=len(order["items"]), revenue=revenue)
        logger.info("order_fulfilled", order_id=order["id"], items=len(order["items"]))

        response = {"order": order, "jwt": result.ticket}
        if result.report_url:
            response["followLinkToEndChaos"] = result.report_url
        return response

    def list_orders(self, caller: Caller, page: int = 1) -> dict:
        """One page of the caller's own orders, oldest first."""
        if page < 1:
            raise InvalidInput("page must be 1 or greater")

        orders, more = current_domain.repository_for(Order).page_for_diner(caller.id, page, self.page_size)
        return {
            "dinerId": caller.id,
            "orders": [order.to_record() for order in orders],
            "page": page,
            "more": more,
            "nextPage": page + 1 if more else None,
        }
