"""
Settlement constants.

Fixed values shared by the engine and its transports.
"""

from decimal import Decimal

# Colones per US dollar used when a request does not carry its own rate
DEFAULT_EXCHANGE_RATE = Decimal("500")

NATIVE_CURRENCY = "USD"
SECONDARY_CURRENCY = "CRC"

OTHER_CATEGORY = "Other"
BUNDLE_CATEGORY = "Bundle"

ASSOCIATE_SALES_STATION = "Associate Sales"

# Tolerance for clause shares that should add up to one whole
SHARE_SUM_TOLERANCE = Decimal("0.0001")
