"""Pytest configuration and fixtures for war tracker tests."""

from typing import Any, Dict, List, Optional

import pytest


def make_attack(stars: int = 0, destruction: float = 0.0) -> Dict[str, Any]:
    return {"stars": stars, "destructionPercentage": destruction}


def make_participant(
    tag: str,
    name: Optional[str] = None,
    attacks_used: int = 0,
    attacks_available: int = 2,
    attacks: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    return {
        "tag": tag,
        "name": name or f"Member {tag}",
        "attacksUsed": attacks_used,
        "attacksAvailable": attacks_available,
        "attacks": attacks or [],
    }


def make_war(
    war_id: str,
    end_time: str,
    clan_score: int = 0,
    opponent_score: int = 0,
    participants: Optional[List[Dict[str, Any]]] = None,
    war_type: str = "regular",
    finalized: bool = True,
    preparation_start_time: Optional[str] = None,
) -> Dict[str, Any]:
    participants = participants or []
    return {
        "warId": war_id,
        "warType": war_type,
        "preparationStartTime": preparation_start_time or end_time,
        "startTime": end_time,
        "endTime": end_time,
        "clanScore": clan_score,
        "opponentScore": opponent_score,
        "teamSize": len(participants),
        "finalized": finalized,
        "statistics": {
            "attackUsagePercentage": 75,
            "membersWithFullAttacks": len(participants),
            "totalMembers": len(participants),
        },
        "participants": participants,
    }


@pytest.fixture
def two_war_documents():
    """War A (won) and war B (lost) for member #A, newest first."""
    war_a = make_war(
        "war-a",
        "2024-01-01T00:00:00.000Z",
        clan_score=50,
        opponent_score=40,
        participants=[
            make_participant("#A", "Alpha", 1, 1, [make_attack(3, 100)]),
        ],
    )
    war_b = make_war(
        "war-b",
        "2024-01-08T00:00:00.000Z",
        clan_score=30,
        opponent_score=45,
        participants=[make_participant("#A", "Alpha", 0, 1)],
    )
    return [war_b, war_a]
