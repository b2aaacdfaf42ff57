"""
Team Balancer - picks the team for a newly joined player.
"""

from typing import Iterable

from math_challenge.core.game_phases import Team

# Largest head-count gap tolerated before the next joiner is forced onto the smaller team
CORRECTION_THRESHOLD = 1


def team_counts(teams: Iterable[Team]):
    """Return (count_a, count_b) for an iterable of team assignments."""
    count_a = count_b = 0
    for team in teams:
        if team == Team.A:
            count_a += 1
        else:
            count_b += 1
    return count_a, count_b


def choose_team(room) -> Team:
    """
    Choose a team for the next player joining ``room``.

    Ties and near-balance favor Team A so the outcome is deterministic.
    """
    count_a, count_b = team_counts(player.team for player in room.players.values())
    diff = count_a - count_b

    if diff > CORRECTION_THRESHOLD:
        return Team.B
    if diff < -CORRECTION_THRESHOLD:
        return Team.A
    return Team.A if count_a <= count_b else Team.B
