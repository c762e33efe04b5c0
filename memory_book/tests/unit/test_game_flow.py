"""
End-to-end test of a game session with a mocked memory source.

Fetch, normalize, filter, shuffle, guess and submit, without Streamlit.
"""

import random

from unittest.mock import Mock, patch

from memory_book.api.client import MemorySourceClient
from memory_book.models import GuessSubmission, Identity
from memory_book.services.guess_state import GameState, SubmissionFinished, SubmitGuess, reduce
from memory_book.services.memory_store import MemoryStore

RECORDS = [
    {
        "Timestamp": "3/1/2024 10:15:00",
        "What's your name?": "John Doe",
        "memory": "The snow day picnic.",
        "Exclude": "",
    },
    {
        "Timestamp": "3/2/2024 08:00:00",
        "What's your name?": "Prankster",
        "memory": "Please hide this one.",
        "Exclude": "TRUE",
    },
    {
        "Timestamp": "3/3/2024 19:30:00",
        "name": "Lee",
        "text": "Singing in the car.",
    },
]


class TestGameFlow:
    """Full session against a mocked endpoint."""

    def setup_method(self):
        self.client = MemorySourceClient(source_url="https://script.example.com/exec", timeout=5, retries=0)
        self.identity = Identity(name="Sam", email="sam@example.com")

    @patch('memory_book.api.client.requests.request')
    def test_session(self, mock_request):
        mock_request.return_value = Mock(status_code=200, json=Mock(return_value=RECORDS))

        memories = MemoryStore(self.client, rng=random.Random(5)).load()

        assert len(memories) == 2
        assert {m.id for m in memories} == {"3/1/2024 10:15:00", "3/3/2024 19:30:00"}

        target = next(m for m in memories if m.author_name == "John Doe")
        other = next(m for m in memories if m.author_name == "Lee")

        state = reduce(GameState(), SubmitGuess(memory_id=target.id, author_name=target.author_name, text="  john   DOE "))
        guess = state.guess_for(target.id)

        mock_request.reset_mock()
        mock_request.return_value = Mock(status_code=200)
        self.client.submit_guess(GuessSubmission.for_guess(target, "  john   DOE ", guess.is_correct, self.identity))
        state = reduce(state, SubmissionFinished(memory_id=target.id))

        assert guess.is_correct is True
        assert state.is_guessed(target.id)
        assert not state.has_guessed(other.id)
        assert state.submitting is None

        payload = mock_request.call_args[1]['json']
        assert payload["memoryId"] == "3/1/2024 10:15:00"
        assert payload["actualName"] == "John Doe"
        assert payload["isCorrect"] is True
        assert payload["guesserEmail"] == "sam@example.com"
