"""Pytest fixtures for the studio server tests."""
import pytest

from studio_server.app import app as flask_app
from studio_server.assistant import DataAssistant
from studio_server.engine import DecisionEngine
from studio_server.models import Card


class FakeClient:
    """Stands in for ChatCompletionClient: replays answers or raises errors."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def complete(self, system, user, temperature=0.3, max_tokens=500):
        self.calls.append({'system': system, 'user': user,
                           'temperature': temperature, 'max_tokens': max_tokens})
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def hand():
    """Build a hand from card labels: hand('A♠', '10♥')."""
    def build(*labels):
        return tuple(Card.from_label(label) for label in labels)
    return build


@pytest.fixture
def app(tmp_path):
    """Flask app with a local-rules engine and an unconfigured assistant."""
    flask_app.config.update({
        'TESTING': True,
        'DECISION_ENGINE': DecisionEngine(api_key=''),
        'DATA_ASSISTANT': DataAssistant(api_key=''),
        'LOGS_DIR': str(tmp_path),
    })
    yield flask_app
    flask_app.config.update({'DECISION_ENGINE': None, 'DATA_ASSISTANT': None, 'LOGS_DIR': None})


@pytest.fixture
def client(app):
    """Create Flask test client."""
    return app.test_client()
