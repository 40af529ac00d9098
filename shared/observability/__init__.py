from .setup import setup_observability
from .metrics import (
    bakery_checkout_total,
    bakery_checkout_duration_seconds,
    bakery_promo_applied_total,
    bakery_active_carts,
    bakery_catalog_refetch_total
)
