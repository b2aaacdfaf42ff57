"""
Message taxonomy for the game protocol.

Inbound frames are parsed into a closed set of message types; anything else
becomes an UnrecognizedMessage. Outbound payloads are built by the helper
functions at the bottom of this module so every sender produces the same shape.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class MessageType(Enum):
    """Message tags carried in the ``type`` field of every frame."""

    # Inbound
    SET_USERNAME = "set_username"
    ANSWER = "answer"
    REMATCH_RESPONSE = "rematch_response"

    # Outbound
    PLAYER_ID = "player_id"
    GAME_STARTED = "game_started"
    NEW_PROBLEM = "new_problem"
    SCORE_UPDATE = "score_update"
    WRONG_ANSWER = "wrong_answer"
    GAME_OVER = "game_over"
    GAME_STATE = "game_state"
    ROOM_CLOSED = "room_closed"
    REMATCH_REQUEST = "rematch_request"


GAME_STARTED_TEXT = "The game has started"
REMATCH_PROMPT_TEXT = "Do you want to play again?"
INACTIVITY_TEXT = "The room was closed due to inactivity."
NOT_ENOUGH_PLAYERS_TEXT = "Not enough players to continue the game"
REMATCH_DECLINED_TEXT = "Not enough players accepted the rematch."
REMATCH_DECLINED_REASON = "rematch_declined"


@dataclass(frozen=True)
class SetUsername:
    name: str


@dataclass(frozen=True)
class Answer:
    # Kept raw; the room decides whether they are usable.
    answer: Any
    problem_id: Any


@dataclass(frozen=True)
class RematchResponse:
    ready: Any


@dataclass(frozen=True)
class UnrecognizedMessage:
    type: Any


InboundMessage = Union[SetUsername, Answer, RematchResponse, UnrecognizedMessage]


def parse_inbound(data: Any) -> InboundMessage:
    """Turn a decoded frame into one of the inbound message types."""
    if not isinstance(data, dict):
        return UnrecognizedMessage(type=None)

    tag = data.get('type')
    if tag == MessageType.SET_USERNAME.value:
        name = data.get('name')
        return SetUsername(name=name if isinstance(name, str) else '')
    if tag == MessageType.ANSWER.value:
        return Answer(answer=data.get('answer'), problem_id=data.get('problemId'))
    if tag == MessageType.REMATCH_RESPONSE.value:
        return RematchResponse(ready=data.get('ready'))
    return UnrecognizedMessage(type=tag)


# Outbound payloads

def player_id_message(player_id: str, team: str) -> Dict[str, Any]:
    return {'type': MessageType.PLAYER_ID.value, 'playerId': player_id, 'team': team}


def game_started_message() -> Dict[str, Any]:
    return {'type': MessageType.GAME_STARTED.value, 'content': GAME_STARTED_TEXT}


def new_problem_message(problem: Dict[str, Any]) -> Dict[str, Any]:
    return {'type': MessageType.NEW_PROBLEM.value, 'problem': problem}


def score_update_message(team_a_score: int, team_b_score: int,
                         falling_text: Optional[str] = None) -> Dict[str, Any]:
    message = {
        'type': MessageType.SCORE_UPDATE.value,
        'teamAScore': team_a_score,
        'teamBScore': team_b_score,
    }
    if falling_text is not None:
        message['fallingText'] = falling_text
    return message


def wrong_answer_message() -> Dict[str, Any]:
    return {'type': MessageType.WRONG_ANSWER.value}


def game_over_message(winning_team: Optional[str], team_a_score: Optional[int] = None,
                      team_b_score: Optional[int] = None, reason: Optional[str] = None,
                      content: Optional[str] = None) -> Dict[str, Any]:
    """Build a game_over payload; optional fields are omitted when None."""
    message = {'type': MessageType.GAME_OVER.value, 'winningTeam': winning_team}
    optional = {
        'teamAScore': team_a_score,
        'teamBScore': team_b_score,
        'reason': reason,
        'content': content,
    }
    message.update({key: value for key, value in optional.items() if value is not None})
    return message


def game_state_message(waiting: bool, team_a_score: int, team_b_score: int) -> Dict[str, Any]:
    return {
        'type': MessageType.GAME_STATE.value,
        'state': {
            'waiting': waiting,
            'teamAScore': team_a_score,
            'teamBScore': team_b_score,
        }
    }


def room_closed_message(content: str) -> Dict[str, Any]:
    return {'type': MessageType.ROOM_CLOSED.value, 'content': content}


def rematch_request_message() -> Dict[str, Any]:
    return {'type': MessageType.REMATCH_REQUEST.value, 'content': REMATCH_PROMPT_TEXT}
