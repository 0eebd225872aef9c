"""Per-member war history endpoint."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from warapi.models import MemberHistory, MemberWarEntry
from warapi.routers.request_guards import parse_positive_int, server_error
from warapi.war_store import WarStore, to_json_document
from warcore.config import DEFAULT_HISTORY_WAR_COUNT
from warcore.exceptions import StoreError
from warcore.war_records import WarRecord

logger = logging.getLogger(__name__)

UNKNOWN_MEMBER_NAME = "Unknown"


def _participant_document(war: Dict[str, Any], member_tag: str) -> Optional[Dict[str, Any]]:
    for participant in war.get("participants") or ():
        if participant.get("tag") == member_tag:
            return participant
    return None


def setup_members_router(war_store: WarStore) -> APIRouter:
    """Create the members router.

    Args:
        war_store: Store used for war queries

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/members", tags=["members"])

    @router.get("/{member_tag}/history")
    async def get_member_history(member_tag: str, count: Optional[str] = None):
        """Get a member's performance in their most recent finalized wars.

        The tag arrives percent-decoded, so clients send ``%23ABC`` for
        ``#ABC``. A member with no recorded wars gets an empty history.
        """
        war_count = parse_positive_int(count, DEFAULT_HISTORY_WAR_COUNT)

        try:
            documents = await war_store.find_member_wars(member_tag, war_count)
        except StoreError as e:
            logger.error("Error fetching member history for %s: %s", member_tag, e, exc_info=True)
            return server_error("Failed to fetch member history")

        history = []
        for document in to_json_document(documents):
            war = WarRecord.from_document(document)
            history.append(
                MemberWarEntry(
                    war_id=document.get("warId"),
                    end_time=document.get("endTime"),
                    war_type=document.get("warType"),
                    team_size=document.get("teamSize"),
                    clan_score=document.get("clanScore"),
                    opponent_score=document.get("opponentScore"),
                    won=war.won,
                    member_data=_participant_document(document, member_tag),
                )
            )

        member_name = None
        if history and history[0].member_data:
            member_name = history[0].member_data.get("name")

        member_history = MemberHistory(
            member_tag=member_tag,
            member_name=member_name or UNKNOWN_MEMBER_NAME,
            wars_found=len(history),
            history=history,
        )
        return JSONResponse(member_history.model_dump(mode="json", by_alias=True))

    return router
