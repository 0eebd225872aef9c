"""Server and query configuration constants."""

# Server Configuration
DEFAULT_API_PORT = 3001  # Default port for the FastAPI backend

# Document store
DEFAULT_DATABASE_NAME = "clash_tracker"
WARS_COLLECTION = "wars"

# Query defaults
DEFAULT_STATS_WAR_COUNT = 10  # Wars folded into /api/wars/stats
DEFAULT_HISTORY_WAR_COUNT = 10  # Wars returned by member history
DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 20

# Outbound IP lookup
IP_LOOKUP_URL = "https://api.ipify.org?format=json"
IP_LOOKUP_TIMEOUT = 10.0  # seconds
IP_LOOKUP_MESSAGE = "Use this IP address for your Clash of Clans API token"
IP_LOOKUP_INSTRUCTIONS = (
    "Go to https://developer.clashofclans.com and create a token with this IP"
)
