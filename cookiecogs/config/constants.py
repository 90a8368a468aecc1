# cookiecogs/config/constants.py
# Defaults and thresholds shared by the services

# New products
DEFAULT_PRICE = 2.50
DEFAULT_PRODUCTION_PRICE = 0.70
DEFAULT_CATEGORY = "Classic"
DEFAULT_WARN_LEVEL = 10  # units; also the fallback when a product has no warn level

# Recipes
DEFAULT_BATCH_YIELD = 100  # cookies per batch

# Stock status (percent of the warn threshold)
CRITICAL_PERCENT = 50
LOW_PERCENT = 100

# Audit deviation: |IST - SOLL| up to this is "minor"
MINOR_DEVIATION = 2

# Margin below this percentage is flagged
LOW_MARGIN_PERCENT = 30.0

# Shopping list fallback minimum when an ingredient has none
SHOPPING_FALLBACK_MIN = 2

# Sales trend: the last N days are compared with the days before them
TREND_RECENT_DAYS = 3
TREND_WINDOW_DAYS = 7
