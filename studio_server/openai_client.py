"""Chat-completion client: one POST per call, no retries.

  POST <api_url>
      headers: Authorization: Bearer <api_key>
      body: {model, messages: [{role: system}, {role: user}], temperature, max_tokens}
      returns: {choices: [{message: {content}}]}

Every failure is raised as a RemoteDecisionError subclass; the caller
decides what to do instead.
"""
import requests

from .config import DEFAULT_API_URL, DEFAULT_MODEL, get_openai_config
from .errors import MissingCredentialError, NetworkError, QuotaError, UpstreamError


class ChatCompletionClient:
    def __init__(self, api_key: str, api_url: str = DEFAULT_API_URL,
                 model: str = DEFAULT_MODEL, timeout: float = 15.0, http=None):
        if not api_key:
            raise MissingCredentialError("No API key configured for the completion endpoint")
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        # Anything with a requests-style post(); the requests module by default
        self.http = http if http is not None else requests

    @classmethod
    def from_config(cls, config: dict = None, http=None) -> "ChatCompletionClient":
        c = config or get_openai_config()
        return cls(c['api_key'], api_url=c['api_url'], model=c['model'],
                   timeout=c['timeout'], http=http)

    def complete(self, system: str, user: str, temperature: float = 0.3,
                 max_tokens: int = 500) -> str:
        """Send one system + user exchange and return the trimmed answer text."""
        payload = {
            'model': self.model,
            'messages': [
                {'role': 'system', 'content': system},
                {'role': 'user', 'content': user},
            ],
            'temperature': temperature,
            'max_tokens': max_tokens,
        }
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}',
        }

        try:
            r = self.http.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f'Request to {self.api_url} failed: {e}') from e

        if r.status_code == 429:
            raise QuotaError(_error_message(r), status=r.status_code)
        if not 200 <= r.status_code < 300:
            raise UpstreamError(_error_message(r), status=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            raise UpstreamError('Response body is not JSON', status=r.status_code) from e

        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError('Response has no choices[0].message.content', status=r.status_code) from e
        if content is None:
            return ''
        if not isinstance(content, str):
            raise UpstreamError('Response content is not text', status=r.status_code)
        return content.strip()


def _error_message(r) -> str:
    """The API's own error message when the body carries one."""
    try:
        body = r.json()
        message = body.get('error', {}).get('message')
    except (ValueError, AttributeError):
        message = None
    return message or f'Erreur API: {r.status_code}'
