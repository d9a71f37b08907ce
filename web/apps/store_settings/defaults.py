"""Settings every store starts with.

Tuples of ``(key, value, type, description)``. Used by the seeding data
migration and by the ``seed_settings`` command, both of which only insert
keys that are missing so edited values are never overwritten.
"""

DEFAULT_SETTINGS = [
    ("tax_rate", "18", "number", "Tax rate percentage applied to orders (e.g., 18 for 18%)"),
    ("currency_symbol", "Rs. ", "string", "Currency symbol displayed in prices"),
    ("store_name", "ZinyasRang", "string", "Store name displayed across the site"),
    ("low_stock_threshold", "5", "number", "Threshold for low stock warnings"),
    ("free_shipping_threshold", "0", "number", "Minimum order amount for free shipping (0 for always free)"),
    ("shipping_cost", "200", "number", "Shipping cost when below free shipping threshold"),
]
