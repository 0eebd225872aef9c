"""Read-only views over clan war documents.

War documents are written by an external ingestion process; this module
only reads them. Every ``from_document`` constructor is tolerant of
missing fields: counts default to 0 and lists to empty. Missing scores
and a missing ``statistics`` block yield ``None`` values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


def _number(doc: Mapping[str, Any], key: str) -> Any:
    """Read a numeric field, treating missing/null as 0."""
    return doc.get(key) or 0


@dataclass(frozen=True)
class Attack:
    """One attack made by a participant.

    Attributes:
        stars: Stars earned (0-3)
        destruction_percentage: Destruction dealt (0-100)
    """

    stars: int = 0
    destruction_percentage: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Attack":
        return cls(
            stars=_number(doc, "stars"),
            destruction_percentage=_number(doc, "destructionPercentage"),
        )


@dataclass(frozen=True)
class Participant:
    """A clan member's entry within a single war."""

    tag: Optional[str]
    name: Optional[str] = None
    attacks_used: int = 0
    attacks_available: int = 0
    attacks: tuple[Attack, ...] = ()

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Participant":
        return cls(
            tag=doc.get("tag"),
            name=doc.get("name"),
            attacks_used=_number(doc, "attacksUsed"),
            attacks_available=_number(doc, "attacksAvailable"),
            attacks=tuple(Attack.from_document(a) for a in doc.get("attacks") or ()),
        )


@dataclass(frozen=True)
class WarStatistics:
    """War-level summary precomputed at ingestion time."""

    attack_usage_percentage: Any = None
    members_with_full_attacks: Optional[int] = None
    total_members: Optional[int] = None

    @classmethod
    def from_document(cls, doc: Optional[Mapping[str, Any]]) -> "WarStatistics":
        if not doc:
            return cls()
        return cls(
            attack_usage_percentage=doc.get("attackUsagePercentage"),
            members_with_full_attacks=doc.get("membersWithFullAttacks"),
            total_members=doc.get("totalMembers"),
        )


@dataclass(frozen=True)
class WarRecord:
    """A single clan war as stored in the ``wars`` collection.

    Timestamps are kept exactly as stored (ISO strings or datetimes) so
    they round-trip unchanged into API responses.
    """

    war_id: Optional[str]
    war_type: Optional[str] = None
    preparation_start_time: Any = None
    start_time: Any = None
    end_time: Any = None
    clan_score: Optional[int] = None
    opponent_score: Optional[int] = None
    team_size: int = 0
    finalized: bool = False
    statistics: WarStatistics = field(default_factory=WarStatistics)
    participants: tuple[Participant, ...] = ()

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "WarRecord":
        return cls(
            war_id=doc.get("warId"),
            war_type=doc.get("warType"),
            preparation_start_time=doc.get("preparationStartTime"),
            start_time=doc.get("startTime"),
            end_time=doc.get("endTime"),
            clan_score=doc.get("clanScore"),
            opponent_score=doc.get("opponentScore"),
            team_size=_number(doc, "teamSize"),
            finalized=bool(doc.get("finalized", False)),
            statistics=WarStatistics.from_document(doc.get("statistics")),
            participants=tuple(
                Participant.from_document(p) for p in doc.get("participants") or ()
            ),
        )

    @property
    def won(self) -> bool:
        # A draw is not a win; a missing score counts as 0.
        return (self.clan_score or 0) > (self.opponent_score or 0)
