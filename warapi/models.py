"""Response models for the HTTP API.

Fields are declared in snake_case and serialized in camelCase; always
dump with ``model_dump(mode="json", by_alias=True)``.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for response models: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthStatus(ApiModel):
    """Liveness probe response."""

    status: str = "OK"
    timestamp: str


class OutboundIPInfo(ApiModel):
    """Public IP address of this server, for Clash API token setup."""

    outbound_ip: str = Field(alias="outboundIP")
    message: str
    timestamp: str
    instructions: str


class Pagination(ApiModel):
    page: int
    limit: int
    total_wars: int
    total_pages: int


class WarPage(ApiModel):
    """One page of finalized wars."""

    wars: List[Dict[str, Any]]
    pagination: Pagination


class MemberWarEntry(ApiModel):
    """A member's performance in one war."""

    war_id: Optional[str] = None
    end_time: Any = None
    war_type: Optional[str] = None
    team_size: Optional[int] = None
    clan_score: Optional[int] = None
    opponent_score: Optional[int] = None
    won: bool
    member_data: Optional[Dict[str, Any]] = None  # raw participant document


class MemberHistory(ApiModel):
    member_tag: str
    member_name: str
    wars_found: int
    history: List[MemberWarEntry]
