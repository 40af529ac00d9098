from prometheus_client import Counter, Gauge, Histogram

# Business Metrics
bakery_checkout_total = Counter(
    "bakery_checkout_total",
    "Total checkout submissions processed",
    ["status"]  # Labels: 'success', 'failed', 'duplicate'
)

bakery_checkout_duration_seconds = Histogram(
    "bakery_checkout_duration_seconds",
    "Order submission duration in seconds, simulated payment included"
)

bakery_promo_applied_total = Counter(
    "bakery_promo_applied_total",
    "Promo code applications",
    ["result"]  # Labels: 'accepted', 'rejected', 'pre_applied'
)

bakery_active_carts = Gauge(
    "bakery_active_carts",
    "Number of carts currently held in memory"
)

bakery_catalog_refetch_total = Counter(
    "bakery_catalog_refetch_total",
    "Full catalog refetches triggered by product changes"
)
