from .order_service import (
    PurchaseOrderError,
    ReceiveResult,
    create_purchase_order,
    delete_purchase_order,
    mark_purchase_order_sent,
    next_purchase_order_number,
    receive_purchase_order,
    replace_purchase_order_lines,
)

__all__ = [
    "PurchaseOrderError",
    "ReceiveResult",
    "create_purchase_order",
    "delete_purchase_order",
    "mark_purchase_order_sent",
    "next_purchase_order_number",
    "receive_purchase_order",
    "replace_purchase_order_lines",
]
