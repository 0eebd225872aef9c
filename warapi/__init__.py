"""Backend package for the Clash War Tracker API.

This package provides the FastAPI web server, the MongoDB-backed war
store and the outbound IP lookup client.
"""

__version__ = "1.0.0"
