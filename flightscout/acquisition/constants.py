"""
Acquisition Constants
Provider endpoints, paging and rate-limit defaults.
"""

# Provider endpoints
AIRPORT_DETAILS_URL = "https://api.flightradar24.com/common/v1/airport.json"
LIVE_FEED_URL = "https://data-cloud.flightradar24.com/zones/fcgi/feed.js"
SEARCH_URL = "https://www.flightradar24.com/v1/search/web/find"
DEFAULT_API_TIMEOUT = 15  # seconds

# Schedule paging
DEFAULT_PAGE_SIZE = 100
FIRST_SCHEDULE_PAGE = 1  # provider pages are 1-based
SCHEDULE_DIRECTIONS = ("arrivals", "departures")

# Rate limiting
RATE_LIMIT_STATUS = 429
DELAY_BETWEEN_CALLS_MS = 1500  # 1.5 seconds
MAX_RETRY_ATTEMPTS = 5
BACKOFF_BASE_MS = 1500
BACKOFF_MULTIPLIER = 2

# Adaptive throttle
THROTTLE_FLOOR_MS = 1500
THROTTLE_CAP_MS = 30000
THROTTLE_COOLDOWN_MS = 60000  # window after a 429 in which delays keep growing
THROTTLE_GROWTH = 1.5
THROTTLE_DECAY = 0.8

# Aircraft scanner
DEFAULT_SCANNER_CONCURRENCY = 5

# Live feed parameters (everything the feed can report)
LIVE_FEED_PARAMS = {
    "faa": "1",
    "satellite": "1",
    "mlat": "1",
    "flarm": "1",
    "adsb": "1",
    "gnd": "1",
    "air": "1",
    "vehicles": "0",
    "estimated": "1",
    "maxage": "14400",
    "gliders": "1",
    "stats": "0",
    "limit": "5000",
}

# Non-flight keys at the top level of a live feed response
LIVE_FEED_META_KEYS = ("full_count", "version", "stats", "selected-aircraft")

SEARCH_RESULT_LIMIT = 50
