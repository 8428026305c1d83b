"""Constants for the Göteborg traffic camera adapter.

Uses the City of Gothenburg open data TrafficCamera v0.2 API.
The API key is part of the URL path.
"""

GBGCAMERA_BASE_URL = "http://data.goteborg.se/TrafficCamera/v0.2"
