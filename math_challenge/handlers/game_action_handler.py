"""
Game Action Handler

Handles in-game messages: answers and rematch votes.
"""

import logging

from math_challenge.core.messages import Answer, RematchResponse
from .base_handler import BaseHandler

logger = logging.getLogger(__name__)


class GameActionHandler(BaseHandler):
    """Handler for answer submission and rematch negotiation."""

    def handle_answer(self, socket_id: str, message: Answer):
        """
        Submit an answer to the sender's current problem.

        Expected data format:
        {
            'type': 'answer',
            'answer': 7,
            'problemId': 'k3j9x0a'
        }
        """
        return self.run_room_operation(
            socket_id,
            lambda room, player: room.submit_answer(player.player_id, message.problem_id, message.answer)
        )

    def handle_rematch_response(self, socket_id: str, message: RematchResponse):
        """Record the sender's rematch vote."""
        self.log_handler_start('handle_rematch_response', socket_id, message)
        return self.run_room_operation(
            socket_id,
            lambda room, player: room.record_rematch_vote(player.player_id, message.ready)
        )
