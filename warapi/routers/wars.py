"""War history and statistics endpoints.

Endpoints:
    GET /api/wars - Paginated finalized wars
    GET /api/wars/current - Latest war by preparation start
    GET /api/wars/stats - Member statistics over the last N finalized wars
    GET /api/wars/{war_id} - A specific war
"""

import logging
import math
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from warapi.models import Pagination, WarPage
from warapi.routers.request_guards import not_found, parse_positive_int, server_error
from warapi.war_store import WarStore, to_json_document
from warcore.config import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, DEFAULT_STATS_WAR_COUNT
from warcore.exceptions import StoreError
from warcore.war_records import WarRecord
from warcore.war_stats import compute_war_stats

logger = logging.getLogger(__name__)


def setup_wars_router(war_store: WarStore) -> APIRouter:
    """Create the wars router.

    Args:
        war_store: Store used for all war queries

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/wars", tags=["wars"])

    @router.get("")
    async def list_wars(page: Optional[str] = None, limit: Optional[str] = None):
        """List finalized wars, newest first, one page at a time."""
        page_number = parse_positive_int(page, DEFAULT_PAGE)
        page_size = parse_positive_int(limit, DEFAULT_PAGE_LIMIT)

        try:
            wars = await war_store.list_finalized_wars(
                skip=(page_number - 1) * page_size,
                limit=page_size,
            )
            total_wars = await war_store.count_finalized_wars()
        except StoreError as e:
            logger.error("Error fetching wars: %s", e, exc_info=True)
            return server_error("Failed to fetch wars")

        war_page = WarPage(
            wars=to_json_document(wars),
            pagination=Pagination(
                page=page_number,
                limit=page_size,
                total_wars=total_wars,
                total_pages=math.ceil(total_wars / page_size),
            ),
        )
        return JSONResponse(war_page.model_dump(mode="json", by_alias=True))

    # Fixed paths must be registered before /{war_id}.
    @router.get("/current")
    async def get_current_war():
        """Get the most recently prepared war, finalized or not."""
        try:
            war = await war_store.find_latest_war()
        except StoreError as e:
            logger.error("Error fetching current war: %s", e, exc_info=True)
            return server_error("Failed to fetch war data")

        if war is None:
            return not_found("No war data found")
        return JSONResponse(to_json_document(war))

    @router.get("/stats")
    async def get_war_stats(
        count: Optional[str] = None,
        war_type: Optional[str] = Query(None, alias="warType"),
    ):
        """Aggregate member attack statistics over the last N finalized wars.

        Args:
            count: Number of most recent wars to analyze (default 10)
            war_type: Optional war type filter ("regular" or "cwl")
        """
        war_count = parse_positive_int(count, DEFAULT_STATS_WAR_COUNT)

        try:
            documents = await war_store.find_finalized_wars(war_count, war_type=war_type)
        except StoreError as e:
            logger.error("Error fetching war stats: %s", e, exc_info=True)
            return server_error("Failed to fetch war statistics")

        result = compute_war_stats([WarRecord.from_document(d) for d in documents])
        logger.debug(
            "Computed war stats over %d wars (warType=%s)", len(documents), war_type
        )
        return JSONResponse(to_json_document(result.to_dict()))

    @router.get("/{war_id}")
    async def get_war(war_id: str):
        """Get a specific war by its war id."""
        try:
            war = await war_store.find_war(war_id)
        except StoreError as e:
            logger.error("Error fetching war %s: %s", war_id, e, exc_info=True)
            return server_error("Failed to fetch war")

        if war is None:
            return not_found("War not found")
        return JSONResponse(to_json_document(war))

    return router
