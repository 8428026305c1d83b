"""Constants for the Västtrafik adapter.

Uses the Västtrafik Reseplaneraren v2 REST API.
Authentication: OAuth2 client credentials, bearer token per request.
"""

from zoneinfo import ZoneInfo

VASTTRAFIK_BASE_URL = "https://api.vasttrafik.se/bin/rest.exe/v2"
VASTTRAFIK_DEPARTURE_BOARD_URL = f"{VASTTRAFIK_BASE_URL}/departureBoard"
VASTTRAFIK_TOKEN_URL = "https://api.vasttrafik.se/token"

# Dates and times on the departure board are civil time in Gothenburg
VASTTRAFIK_TIMEZONE = ZoneInfo("Europe/Stockholm")

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
