"""
Game Room for the Math Challenge game

A Room is one match: its players, the two team scores and the phase of the
game. Room operations never talk to sockets or timers directly. Each one
returns a RoomUpdate describing what has to happen next (messages to send,
whether activity was recorded, whether the room must be closed) and the
caller applies it while still holding the room lock.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from math_challenge.config.game_settings import GameSettings
from math_challenge.core import messages
from math_challenge.core.errors import AlreadyInRoomError, InvalidPhaseError, RoomFullError
from math_challenge.core.game_phases import GamePhase, RematchVote, Team
from math_challenge.services.problem_generator import Problem, ProblemGenerator, is_numeric
from math_challenge.services.team_balancer import choose_team, team_counts

logger = logging.getLogger(__name__)


@dataclass
class Player:
    """A connection seated in a room."""
    player_id: str
    name: str
    team: Team
    score: int = 0
    current_problem: Optional[Problem] = None
    rematch_vote: RematchVote = RematchVote.UNSET


@dataclass
class OutboundMessage:
    """A payload and the connection ids that should receive it."""
    recipients: Tuple[str, ...]
    payload: Dict[str, Any]


@dataclass
class RoomUpdate:
    """State delta produced by one room operation."""
    messages: List[OutboundMessage] = field(default_factory=list)
    touched: bool = False
    close_reason: Optional[str] = None
    closing: bool = False

    def unicast(self, player_id: str, payload: Dict[str, Any]) -> None:
        self.messages.append(OutboundMessage((player_id,), payload))

    def send(self, recipients, payload: Dict[str, Any]) -> None:
        recipients = tuple(recipients)
        if recipients:
            self.messages.append(OutboundMessage(recipients, payload))

    def close(self, reason: Optional[str]) -> None:
        """Mark the room for teardown; ``reason`` is sent as room_closed when not None."""
        self.closing = True
        self.close_reason = reason

    def merge(self, other: 'RoomUpdate') -> 'RoomUpdate':
        self.messages.extend(other.messages)
        self.touched = self.touched or other.touched
        if other.closing:
            self.close(other.close_reason)
        return self


class Room:
    """Per-match state machine: Waiting -> InProgress -> GameOver -> InProgress | closed."""

    def __init__(self, room_id: int, settings: Optional[GameSettings] = None,
                 problem_generator: Optional[ProblemGenerator] = None,
                 team_chooser: Callable[['Room'], Team] = choose_team):
        self.room_id = room_id
        self.settings = settings or GameSettings()
        self.problem_generator = problem_generator or ProblemGenerator()
        self._choose_team = team_chooser

        self.players: Dict[str, Player] = {}
        self.team_a_score = 0
        self.team_b_score = 0
        self.phase = GamePhase.WAITING
        self.last_activity: Optional[float] = None
        self.expiration_deadline: Optional[float] = None
        self.closed = False

    # Queries

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def capacity(self) -> int:
        return self.settings.max_players_per_room

    def is_full(self) -> bool:
        return len(self.players) >= self.capacity

    def team_sizes(self) -> Tuple[int, int]:
        return team_counts(player.team for player in self.players.values())

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)

    def score_for(self, team: Team) -> int:
        return self.team_a_score if team == Team.A else self.team_b_score

    def summary(self) -> Dict[str, Any]:
        count_a, count_b = self.team_sizes()
        return {
            'room_id': self.room_id,
            'phase': self.phase.value,
            'players': len(self.players),
            'team_a_players': count_a,
            'team_b_players': count_b,
            'team_a_score': self.team_a_score,
            'team_b_score': self.team_b_score,
        }

    def _everyone(self):
        return tuple(self.players)

    def _game_state_payload(self) -> Dict[str, Any]:
        return messages.game_state_message(
            waiting=self.phase != GamePhase.IN_PROGRESS,
            team_a_score=self.team_a_score,
            team_b_score=self.team_b_score,
        )

    def _has_quorum(self, count: int) -> bool:
        return count >= self.settings.min_players_required

    # Operations

    def join(self, player_id: str, name: str) -> Tuple[Player, RoomUpdate]:
        """
        Seat a new player.

        Raises:
            AlreadyInRoomError: If ``player_id`` is already seated here
            RoomFullError: If the room is already at capacity
        """
        if player_id in self.players:
            raise AlreadyInRoomError(self.room_id, player_id)
        if self.is_full():
            raise RoomFullError(self.room_id, self.capacity)

        team = self._choose_team(self)
        player = Player(player_id=player_id, name=name, team=team)
        self.players[player_id] = player
        logger.info(f"Player {name} ({player_id}) joined room {self.room_id} on {team.value}")

        update = RoomUpdate(touched=True)
        update.unicast(player_id, messages.player_id_message(player_id, team.value))

        if self.phase == GamePhase.WAITING and self._has_quorum(len(self.players)):
            return player, update.merge(self.start())

        update.send(self._everyone(), self._game_state_payload())

        if self.phase == GamePhase.IN_PROGRESS:
            # Late joiner gets dealt in immediately
            player.current_problem = self.problem_generator.generate()
            update.unicast(player_id, messages.new_problem_message(player.current_problem.to_dict()))
            update.unicast(player_id, messages.game_started_message())
            update.unicast(player_id, self._game_state_payload())
        elif self.phase == GamePhase.GAME_OVER:
            update.unicast(player_id, messages.rematch_request_message())

        return player, update

    def start(self) -> RoomUpdate:
        """
        Begin a round: reset scores and deal every player a problem.

        Valid from Waiting, and from GameOver once a rematch has been accepted.
        """
        if self.phase == GamePhase.IN_PROGRESS:
            raise InvalidPhaseError(self.room_id, 'start', self.phase)

        self.team_a_score = 0
        self.team_b_score = 0
        self.phase = GamePhase.IN_PROGRESS

        update = RoomUpdate(touched=True)
        for player in self.players.values():
            player.score = 0
            player.rematch_vote = RematchVote.UNSET
            player.current_problem = self.problem_generator.generate()
            update.unicast(player.player_id, messages.new_problem_message(player.current_problem.to_dict()))

        update.send(self._everyone(), messages.game_started_message())
        update.send(self._everyone(), self._game_state_payload())
        logger.info(f"Game started in room {self.room_id} with {len(self.players)} players")
        return update

    def submit_answer(self, player_id: str, problem_id: Any, value: Any) -> RoomUpdate:
        """Score an answer. Stale or malformed submissions are ignored (empty update)."""
        update = RoomUpdate()
        player = self.players.get(player_id)
        if player is None or self.phase != GamePhase.IN_PROGRESS:
            return update
        if player.current_problem is None:
            return update
        if not is_numeric(value):
            logger.debug(f"Ignoring non-numeric answer from {player_id} in room {self.room_id}")
            return update
        if problem_id != player.current_problem.id:
            logger.debug(f"Ignoring answer for stale problem {problem_id!r} from {player_id}")
            return update

        problem = player.current_problem
        update.touched = True

        if not self.problem_generator.score(problem, value):
            update.unicast(player_id, messages.wrong_answer_message())
            return update

        if player.team == Team.A:
            self.team_a_score += 1
        else:
            self.team_b_score += 1
        player.score += 1

        falling_text = f"{player.team.value}: {problem.equation}"
        update.send(self._everyone(), messages.score_update_message(
            self.team_a_score, self.team_b_score, falling_text))

        if self.score_for(player.team) >= self.settings.win_score:
            return update.merge(self.end_game(player.team))

        player.current_problem = self.problem_generator.generate()
        update.unicast(player_id, messages.new_problem_message(player.current_problem.to_dict()))
        return update

    def end_game(self, winning_team: Team) -> RoomUpdate:
        """Finish the round and open rematch negotiation."""
        if self.phase != GamePhase.IN_PROGRESS:
            raise InvalidPhaseError(self.room_id, 'end', self.phase)

        self.phase = GamePhase.GAME_OVER
        update = RoomUpdate(touched=True)
        update.send(self._everyone(), messages.game_over_message(
            winning_team.value, self.team_a_score, self.team_b_score))

        for player in self.players.values():
            player.current_problem = None
            player.rematch_vote = RematchVote.UNSET
            update.unicast(player.player_id, messages.rematch_request_message())

        logger.info(f"Game over in room {self.room_id}: {winning_team.value} wins "
                    f"({self.team_a_score}-{self.team_b_score})")
        return update

    def end_game_prematurely(self, reason: str) -> RoomUpdate:
        """Abort the round without a winner and close the room. No rematch is offered."""
        if self.phase != GamePhase.IN_PROGRESS:
            raise InvalidPhaseError(self.room_id, 'end', self.phase)

        self.phase = GamePhase.GAME_OVER
        for player in self.players.values():
            player.current_problem = None

        update = RoomUpdate()
        update.send(self._everyone(), messages.game_over_message(None, reason=reason))
        update.close(reason)
        logger.info(f"Game in room {self.room_id} ended prematurely: {reason}")
        return update

    def record_rematch_vote(self, player_id: str, accepted: Any) -> RoomUpdate:
        """Store a rematch vote and resolve the negotiation once everyone has answered."""
        update = RoomUpdate()
        player = self.players.get(player_id)
        if player is None or self.phase != GamePhase.GAME_OVER:
            return update
        if not isinstance(accepted, bool):
            logger.debug(f"Ignoring malformed rematch response from {player_id}")
            return update

        player.rematch_vote = RematchVote.ACCEPTED if accepted else RematchVote.DECLINED
        logger.info(f"Player {player.name} ({player_id}) rematch vote: {player.rematch_vote.value}")
        update.touched = True
        return update.merge(self._resolve_rematch())

    def _resolve_rematch(self) -> RoomUpdate:
        if self.phase != GamePhase.GAME_OVER or not self.players:
            return RoomUpdate()
        if any(player.rematch_vote == RematchVote.UNSET for player in self.players.values()):
            return RoomUpdate()

        accepted = sum(1 for player in self.players.values()
                       if player.rematch_vote == RematchVote.ACCEPTED)
        if self._has_quorum(accepted):
            logger.info(f"Rematch accepted in room {self.room_id} ({accepted} players)")
            return self.start()

        logger.info(f"Rematch failed in room {self.room_id}: only {accepted} accepted")
        update = RoomUpdate()
        update.send(self._everyone(), messages.game_over_message(
            None, reason=messages.REMATCH_DECLINED_REASON, content=messages.REMATCH_DECLINED_TEXT))
        update.close(messages.REMATCH_DECLINED_TEXT)
        return update

    def leave(self, player_id: str) -> RoomUpdate:
        """Remove a player and react to the smaller head-count."""
        update = RoomUpdate()
        player = self.players.pop(player_id, None)
        if player is None:
            return update

        logger.info(f"Player {player.name} ({player_id}) left room {self.room_id}")
        if not self.players:
            # Nobody left to notify
            update.close(None)
            return update

        update.touched = True
        update.send(self._everyone(), self._game_state_payload())

        if self.phase == GamePhase.IN_PROGRESS and not self._has_quorum(len(self.players)):
            return update.merge(self.end_game_prematurely(messages.NOT_ENOUGH_PLAYERS_TEXT))
        if self.phase == GamePhase.GAME_OVER:
            return update.merge(self._resolve_rematch())
        return update
