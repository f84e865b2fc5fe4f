from .order_service import mark_sale_order_shipped
from .quotation_service import (
    ConversionResult,
    InsufficientStockError,
    SalesServiceError,
    change_quotation_status,
    convert_quotation,
    create_quotation,
    delete_quotation,
    update_quotation,
)

__all__ = [
    "ConversionResult",
    "InsufficientStockError",
    "SalesServiceError",
    "change_quotation_status",
    "convert_quotation",
    "create_quotation",
    "delete_quotation",
    "mark_sale_order_shipped",
    "update_quotation",
]
