"""Constants for the Skolmaten adapter.

Uses the Skolmaten v3 API. Requests are identified by a static client id
and an optional client version token.
"""

SCHOOLMEAL_BASE_URL = "https://skolmaten.se/api/3"

# Index matches datetime.weekday()
WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
