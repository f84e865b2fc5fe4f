# sales/services/order_service.py

import logging

from django.db import transaction

from sales.models import SaleOrder
from sales.services.quotation_service import SalesServiceError

logger = logging.getLogger("sales")


@transaction.atomic
def mark_sale_order_shipped(*, order_id) -> SaleOrder:
    try:
        order = SaleOrder.objects.select_for_update().get(id=order_id)
    except SaleOrder.DoesNotExist as exc:
        raise SalesServiceError("Sale order not found") from exc

    if order.status != SaleOrder.STATUS_PROCESSING:
        raise SalesServiceError(
            f"Only processing sale orders can be shipped (status={order.status})"
        )

    order.status = SaleOrder.STATUS_SHIPPED
    order.save(update_fields=["status"])

    logger.info("Sale order shipped", extra={"order_number": order.order_number})
    return order
