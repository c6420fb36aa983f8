"""Tests for the chat-completion client against a fake HTTP layer."""
import pytest
import requests

from studio_server.errors import MissingCredentialError, NetworkError, QuotaError, UpstreamError
from studio_server.openai_client import ChatCompletionClient


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self._text = text

    def json(self):
        if self._body is None:
            raise ValueError('No JSON object could be decoded')
        return self._body


class FakeHttp:
    """Records posts and returns a canned response (or raises)."""

    def __init__(self, response):
        self.response = response
        self.posts = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({'url': url, 'json': json, 'headers': headers, 'timeout': timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def completion(content):
    return FakeResponse(200, {'choices': [{'message': {'role': 'assistant', 'content': content}}]})


def make_client(response):
    http = FakeHttp(response)
    client = ChatCompletionClient('sk-test', api_url='https://llm.example/v1/chat/completions',
                                  model='test-model', timeout=5, http=http)
    return client, http


class TestRequest:

    def test_requires_credential(self):
        with pytest.raises(MissingCredentialError):
            ChatCompletionClient('')

    def test_request_shape(self):
        client, http = make_client(completion('1♠'))
        client.complete('rules', 'context', temperature=0.2, max_tokens=10)

        assert len(http.posts) == 1
        post = http.posts[0]
        assert post['url'] == 'https://llm.example/v1/chat/completions'
        assert post['headers']['Authorization'] == 'Bearer sk-test'
        assert post['timeout'] == 5
        assert post['json'] == {
            'model': 'test-model',
            'messages': [
                {'role': 'system', 'content': 'rules'},
                {'role': 'user', 'content': 'context'},
            ],
            'temperature': 0.2,
            'max_tokens': 10,
        }

    def test_returns_trimmed_content(self):
        client, _ = make_client(completion('  2♦ \n'))
        assert client.complete('rules', 'context') == '2♦'

    def test_null_content_is_empty(self):
        client, _ = make_client(completion(None))
        assert client.complete('rules', 'context') == ''

    def test_from_config(self):
        client = ChatCompletionClient.from_config({
            'api_key': 'sk-x', 'api_url': 'http://u', 'model': 'm', 'timeout': 2.5})
        assert (client.api_url, client.model, client.timeout) == ('http://u', 'm', 2.5)


class TestFailures:

    def test_transport_failure(self):
        client, _ = make_client(requests.ConnectionError('connection refused'))
        with pytest.raises(NetworkError):
            client.complete('rules', 'context')

    def test_timeout(self):
        client, _ = make_client(requests.Timeout('read timed out'))
        with pytest.raises(NetworkError):
            client.complete('rules', 'context')

    def test_quota(self):
        client, _ = make_client(FakeResponse(429, {'error': {'message': 'Rate limit reached'}}))
        with pytest.raises(QuotaError, match='Rate limit reached') as exc:
            client.complete('rules', 'context')
        assert exc.value.status == 429

    def test_upstream_error_message_from_body(self):
        client, _ = make_client(FakeResponse(401, {'error': {'message': 'Incorrect API key'}}))
        with pytest.raises(UpstreamError, match='Incorrect API key'):
            client.complete('rules', 'context')

    def test_upstream_error_without_body(self):
        client, _ = make_client(FakeResponse(503))
        with pytest.raises(UpstreamError, match='Erreur API: 503'):
            client.complete('rules', 'context')

    def test_body_not_json(self):
        client, _ = make_client(FakeResponse(200))
        with pytest.raises(UpstreamError, match='not JSON'):
            client.complete('rules', 'context')

    @pytest.mark.parametrize('body', [{}, {'choices': []}, {'choices': [{}]}, {'choices': [{'message': {'content': 3}}]}])
    def test_body_without_content(self, body):
        client, _ = make_client(FakeResponse(200, body))
        with pytest.raises(UpstreamError):
            client.complete('rules', 'context')
