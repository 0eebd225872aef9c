"""Service health and outbound IP endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from warapi.ip_client import OutboundIPClient
from warapi.models import HealthStatus, OutboundIPInfo
from warapi.routers.request_guards import server_error
from warcore.config import IP_LOOKUP_INSTRUCTIONS, IP_LOOKUP_MESSAGE
from warcore.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def setup_health_router(ip_client: OutboundIPClient) -> APIRouter:
    """Create the health router.

    Args:
        ip_client: Client used to look up the outbound IP address

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api", tags=["health"])

    @router.get("/health")
    async def health():
        """Liveness check; does not touch the database."""
        status = HealthStatus(timestamp=utc_timestamp())
        return JSONResponse(status.model_dump(mode="json", by_alias=True))

    @router.get("/myip")
    async def my_ip():
        """Report the public IP this server's outbound requests come from.

        Clash of Clans API tokens must be created for this address.
        """
        try:
            outbound_ip = await ip_client.get_outbound_ip()
        except UpstreamError as e:
            return server_error(str(e))

        info = OutboundIPInfo(
            outbound_ip=outbound_ip,
            message=IP_LOOKUP_MESSAGE,
            timestamp=utc_timestamp(),
            instructions=IP_LOOKUP_INSTRUCTIONS,
        )
        return JSONResponse(info.model_dump(mode="json", by_alias=True))

    return router
