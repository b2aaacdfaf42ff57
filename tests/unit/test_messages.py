"""
Message Taxonomy Unit Tests
"""

from math_challenge.core import messages
from math_challenge.core.messages import (
    Answer, RematchResponse, SetUsername, UnrecognizedMessage, parse_inbound
)


class TestParseInbound:
    """Test parsing decoded frames into inbound messages"""

    def test_set_username(self):
        """Test set_username carries the name"""
        assert parse_inbound({'type': 'set_username', 'name': 'Alice'}) == SetUsername('Alice')

    def test_set_username_without_string_name(self):
        """Test a missing or non-string name becomes empty"""
        assert parse_inbound({'type': 'set_username'}) == SetUsername('')
        assert parse_inbound({'type': 'set_username', 'name': 42}) == SetUsername('')

    def test_answer_keeps_raw_fields(self):
        """Test answer fields are passed through unvalidated"""
        message = parse_inbound({'type': 'answer', 'answer': '7', 'problemId': 'abc'})
        assert message == Answer(answer='7', problem_id='abc')

    def test_rematch_response(self):
        """Test rematch_response carries the ready flag"""
        assert parse_inbound({'type': 'rematch_response', 'ready': True}) == RematchResponse(True)

    def test_unknown_type(self):
        """Test unknown tags are kept for logging"""
        assert parse_inbound({'type': 'dance'}) == UnrecognizedMessage('dance')

    def test_non_map_frame(self):
        """Test frames that are not maps are unrecognized"""
        assert parse_inbound([1, 2, 3]) == UnrecognizedMessage(None)
        assert parse_inbound('answer') == UnrecognizedMessage(None)


class TestOutboundMessages:
    """Test outbound payload builders"""

    def test_game_over_omits_unset_fields(self):
        """Test optional fields appear only when given"""
        assert messages.game_over_message('Team B', 3, 9) == {
            'type': 'game_over', 'winningTeam': 'Team B', 'teamAScore': 3, 'teamBScore': 9
        }
        assert messages.game_over_message(None, reason='gone') == {
            'type': 'game_over', 'winningTeam': None, 'reason': 'gone'
        }

    def test_score_update_with_falling_text(self):
        """Test the falling text is optional"""
        assert 'fallingText' not in messages.score_update_message(1, 2)
        assert messages.score_update_message(1, 2, 'Team A: 1 + 1 = 2')['fallingText'] == 'Team A: 1 + 1 = 2'

    def test_game_state_nests_state(self):
        """Test game_state wraps its fields in a state map"""
        assert messages.game_state_message(True, 0, 1) == {
            'type': 'game_state',
            'state': {'waiting': True, 'teamAScore': 0, 'teamBScore': 1}
        }

    def test_fixed_texts(self):
        """Test messages with fixed content"""
        assert messages.game_started_message()['content'] == 'The game has started'
        assert messages.rematch_request_message()['content'] == 'Do you want to play again?'
        assert messages.room_closed_message('bye') == {'type': 'room_closed', 'content': 'bye'}
