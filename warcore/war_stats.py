"""Clan war statistics aggregation.

Folds the most recent finalized wars into per-member attack statistics,
a war-by-war trend series and an attack-usage histogram. This is the
logic behind ``GET /api/wars/stats``.

Input wars must already be filtered (finalized, optional war type),
sorted by end time descending and limited by the caller. The fold is
pure: the same input always produces the same report.

Derived percentages and averages are always two-decimal strings. A
member with no available attacks reports an attack usage of "0.00", and
a member who made no attacks reports "0.00" averages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from warcore.statistics_utils import (
    clamp,
    format_two_places,
    safe_ratio,
    usage_distribution,
)
from warcore.war_records import Attack, Participant, WarRecord

NO_FINALIZED_WARS_MESSAGE = "No finalized wars found"


@dataclass
class MemberAggregate:
    """Running totals for one member across the analyzed wars.

    ``total_attacks_made`` counts the attacks actually folded in and is
    independent of ``total_attacks_used``; the two may disagree when the
    source data is inconsistent.
    """

    tag: Optional[str]
    name: Optional[str] = None
    wars_participated: int = 0
    total_attacks_used: int = 0
    total_attacks_available: int = 0
    total_stars: int = 0
    total_destruction: float = 0.0
    total_attacks_made: int = 0
    attacks: List[Attack] = field(default_factory=list)

    def add_participation(self, participant: Participant, clamp_inputs: bool = False) -> None:
        attacks_used = participant.attacks_used
        attacks_available = participant.attacks_available
        if clamp_inputs:
            attacks_used = max(0, attacks_used)
            attacks_available = max(0, attacks_available)

        self.wars_participated += 1
        self.total_attacks_used += attacks_used
        self.total_attacks_available += attacks_available

        for attack in participant.attacks:
            stars = attack.stars
            destruction = attack.destruction_percentage
            if clamp_inputs:
                stars = clamp(stars, 0, 3)
                destruction = clamp(destruction, 0.0, 100.0)
            self.total_stars += stars
            self.total_destruction += destruction
            self.total_attacks_made += 1
            self.attacks.append(attack)

    @property
    def attack_used_percentage(self) -> float:
        return safe_ratio(self.total_attacks_used, self.total_attacks_available) * 100

    @property
    def average_stars_per_attack(self) -> float:
        return safe_ratio(self.total_stars, self.total_attacks_made)

    @property
    def average_destruction_percentage(self) -> float:
        return safe_ratio(self.total_destruction, self.total_attacks_made)

    def to_member_stats(self) -> "MemberStats":
        return MemberStats(
            tag=self.tag,
            name=self.name,
            wars_participated=self.wars_participated,
            attack_used_percentage=format_two_places(self.attack_used_percentage),
            average_stars_per_attack=format_two_places(self.average_stars_per_attack),
            average_destruction_percentage=format_two_places(
                self.average_destruction_percentage
            ),
            total_attacks_used=self.total_attacks_used,
            total_attacks_available=self.total_attacks_available,
            total_stars=self.total_stars,
            total_attacks_made=self.total_attacks_made,
        )


@dataclass(frozen=True)
class MemberStats:
    """One row of the member statistics table."""

    tag: Optional[str]
    name: Optional[str]
    wars_participated: int
    attack_used_percentage: str
    average_stars_per_attack: str
    average_destruction_percentage: str
    total_attacks_used: int
    total_attacks_available: int
    total_stars: int
    total_attacks_made: int

    @property
    def usage(self) -> float:
        """Attack usage as a number, parsed back from its formatted value."""
        return float(self.attack_used_percentage)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "tag": self.tag,
            "name": self.name,
            "warsParticipated": self.wars_participated,
            "attackUsedPercentage": self.attack_used_percentage,
            "averageStarsPerAttack": self.average_stars_per_attack,
            "averageDestructionPercentage": self.average_destruction_percentage,
            "totalAttacksUsed": self.total_attacks_used,
            "totalAttacksAvailable": self.total_attacks_available,
            "totalStars": self.total_stars,
            "totalAttacksMade": self.total_attacks_made,
        }


@dataclass(frozen=True)
class WarTrend:
    """One point of the war-by-war trend series."""

    war_id: Optional[str]
    end_time: Any
    clan_score: Optional[int]
    opponent_score: Optional[int]
    attack_usage_percentage: Any
    members_with_full_attacks: Optional[int]
    total_members: Optional[int]
    won: bool

    @classmethod
    def from_war(cls, war: WarRecord) -> "WarTrend":
        return cls(
            war_id=war.war_id,
            end_time=war.end_time,
            clan_score=war.clan_score,
            opponent_score=war.opponent_score,
            attack_usage_percentage=war.statistics.attack_usage_percentage,
            members_with_full_attacks=war.statistics.members_with_full_attacks,
            total_members=war.statistics.total_members,
            won=war.won,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "warId": self.war_id,
            "endTime": self.end_time,
            "clanScore": self.clan_score,
            "opponentScore": self.opponent_score,
            "attackUsagePercentage": self.attack_usage_percentage,
            "membersWithFullAttacks": self.members_with_full_attacks,
            "totalMembers": self.total_members,
            "won": self.won,
        }


@dataclass(frozen=True)
class StatsSummary:
    """Header block of a stats report.

    Attributes:
        total_wars_analyzed: Number of wars folded
        total_members: Number of distinct member tags seen
        date_from: End time of the oldest analyzed war
        date_to: End time of the newest analyzed war
    """

    total_wars_analyzed: int
    total_members: int
    date_from: Any
    date_to: Any

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalWarsAnalyzed": self.total_wars_analyzed,
            "totalMembers": self.total_members,
            "dateRange": {"from": self.date_from, "to": self.date_to},
        }


@dataclass(frozen=True)
class StatsReport:
    """Complete result of a statistics aggregation."""

    summary: StatsSummary
    member_stats: List[MemberStats]
    war_trends: List[WarTrend]
    attack_usage_distribution: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": self.summary.to_dict(),
            "memberStats": [m.to_dict() for m in self.member_stats],
            "warTrends": [t.to_dict() for t in self.war_trends],
            "attackUsageDistribution": dict(self.attack_usage_distribution),
        }


@dataclass(frozen=True)
class NoStatsData:
    """Returned instead of a report when there are no wars to analyze."""

    message: str = NO_FINALIZED_WARS_MESSAGE

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "stats": None}


def fold_member_aggregates(
    wars: Sequence[WarRecord],
    *,
    clamp_inputs: bool = False,
) -> Dict[Optional[str], MemberAggregate]:
    """Accumulate per-member totals across all wars.

    Members are keyed by tag in first-seen order. The first occurrence of
    a tag fixes the member's name; later renames are ignored.
    """
    aggregates: Dict[Optional[str], MemberAggregate] = {}
    for war in wars:
        for participant in war.participants:
            aggregate = aggregates.get(participant.tag)
            if aggregate is None:
                aggregate = MemberAggregate(tag=participant.tag, name=participant.name)
                aggregates[participant.tag] = aggregate
            aggregate.add_participation(participant, clamp_inputs=clamp_inputs)
    return aggregates


def compute_war_stats(
    wars: Sequence[WarRecord],
    *,
    clamp_inputs: bool = False,
) -> Union[StatsReport, NoStatsData]:
    """Aggregate member and war statistics over the given wars.

    Args:
        wars: Finalized wars ordered newest-first
        clamp_inputs: Clamp negative attack counts to 0, stars into
            [0, 3] and destruction into [0, 100] instead of passing
            source values through unchanged

    Returns:
        StatsReport, or NoStatsData when ``wars`` is empty
    """
    if not wars:
        return NoStatsData()

    # Bounds come from the newest-first ordering, before any reordering.
    newest_end_time = wars[0].end_time
    oldest_end_time = wars[-1].end_time

    aggregates = fold_member_aggregates(wars, clamp_inputs=clamp_inputs)

    member_stats = [aggregate.to_member_stats() for aggregate in aggregates.values()]
    # sorted() is stable, so ties keep first-seen order
    member_stats = sorted(member_stats, key=lambda m: m.usage, reverse=True)

    war_trends = [WarTrend.from_war(war) for war in reversed(wars)]

    return StatsReport(
        summary=StatsSummary(
            total_wars_analyzed=len(wars),
            total_members=len(member_stats),
            date_from=oldest_end_time,
            date_to=newest_end_time,
        ),
        member_stats=member_stats,
        war_trends=war_trends,
        attack_usage_distribution=usage_distribution(m.usage for m in member_stats),
    )
