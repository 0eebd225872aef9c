"""War tracker exception hierarchy.

Routers translate these into JSON error envelopes; anything outside the
hierarchy falls through to the application's catch-all handler.
"""


class WarTrackerError(Exception):
    """Root of all war tracker domain exceptions."""


class StoreError(WarTrackerError):
    """The document store could not be reached or the query failed."""


class UpstreamError(WarTrackerError):
    """An external HTTP collaborator (IP lookup) failed."""


class ConfigurationError(WarTrackerError):
    """Invalid or missing configuration."""
