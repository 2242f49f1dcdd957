"""
Generation Client Tests

Exercises GenerationClient against a scripted stand-in for the OpenAI SDK
client, so no request leaves the process.

Run with: python -m pytest tests/test_generation_client.py -v
"""

from types import SimpleNamespace

import httpx
import openai
import pytest

from services.documents import EmptyResponse, GenerationClient, UpstreamUnavailable

API_KEY = 'sk-secret-do-not-leak'
REQUEST = httpx.Request('POST', 'https://api.openai.com/v1/chat/completions')


def _reply(*contents):
    return SimpleNamespace(choices=[
        SimpleNamespace(message=SimpleNamespace(content=content)) for content in contents
    ])


class ScriptedOpenAI:
    """Mimics openai.OpenAI().chat.completions.create."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self.create))

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class TestComplete:
    """Successful generation calls."""

    def test_returns_reply_text(self):
        sdk = ScriptedOpenAI(response=_reply('## NOTICE\n\nPay now.'))
        client = GenerationClient(API_KEY, client=sdk)

        assert client.complete('system', 'user prompt') == '## NOTICE\n\nPay now.'

    def test_sends_one_request_with_both_prompts(self):
        sdk = ScriptedOpenAI(response=_reply('text'))
        client = GenerationClient(API_KEY, model='gpt-4o', max_tokens=2048, client=sdk)

        client.complete('system instructions', 'generate a notice')

        assert len(sdk.requests) == 1
        request = sdk.requests[0]
        assert request['model'] == 'gpt-4o'
        assert request['max_tokens'] == 2048
        assert request['messages'] == [
            {'role': 'system', 'content': 'system instructions'},
            {'role': 'user', 'content': 'generate a notice'},
        ]

    def test_skips_empty_choices(self):
        """The first choice carrying text wins."""
        sdk = ScriptedOpenAI(response=_reply(None, '   ', 'real text'))
        client = GenerationClient(API_KEY, client=sdk)

        assert client.complete('system', 'user') == 'real text'

    def test_first_choice_wins_when_it_has_text(self):
        sdk = ScriptedOpenAI(response=_reply('first', 'second'))
        client = GenerationClient(API_KEY, client=sdk)

        assert client.complete('system', 'user') == 'first'


class TestFailures:
    """Error mapping never exposes provider error bodies."""

    def test_no_text_raises_empty_response(self):
        sdk = ScriptedOpenAI(response=_reply(None, ''))
        client = GenerationClient(API_KEY, client=sdk)

        with pytest.raises(EmptyResponse):
            client.complete('system', 'user')

    def test_no_choices_raises_empty_response(self):
        sdk = ScriptedOpenAI(response=SimpleNamespace(choices=[]))
        client = GenerationClient(API_KEY, client=sdk)

        with pytest.raises(EmptyResponse):
            client.complete('system', 'user')

    def test_status_error_maps_to_upstream_unavailable(self):
        error = openai.InternalServerError(
            f'Incorrect API key provided: {API_KEY}',
            response=httpx.Response(500, request=REQUEST),
            body=None
        )
        client = GenerationClient(API_KEY, client=ScriptedOpenAI(error=error))

        with pytest.raises(UpstreamUnavailable) as exc_info:
            client.complete('system', 'user')

        assert exc_info.value.status_code == 500
        assert '500' in str(exc_info.value)
        assert API_KEY not in str(exc_info.value)
        assert exc_info.value.__cause__ is None

    def test_status_error_does_not_log_key(self, caplog):
        error = openai.AuthenticationError(
            f'Incorrect API key provided: {API_KEY}',
            response=httpx.Response(401, request=REQUEST),
            body=None
        )
        client = GenerationClient(API_KEY, client=ScriptedOpenAI(error=error))

        with pytest.raises(UpstreamUnavailable):
            client.complete('system', 'user')

        assert API_KEY not in caplog.text
        assert '401' in caplog.text

    def test_connection_error_maps_to_upstream_unavailable(self):
        error = openai.APIConnectionError(request=REQUEST)
        client = GenerationClient(API_KEY, client=ScriptedOpenAI(error=error))

        with pytest.raises(UpstreamUnavailable) as exc_info:
            client.complete('system', 'user')

        assert exc_info.value.status_code is None

    def test_timeout_maps_to_upstream_unavailable(self):
        error = openai.APITimeoutError(request=REQUEST)
        client = GenerationClient(API_KEY, client=ScriptedOpenAI(error=error))

        with pytest.raises(UpstreamUnavailable):
            client.complete('system', 'user')


class TestConstruction:
    """Client configuration."""

    def test_missing_key_is_unavailable(self):
        with pytest.raises(UpstreamUnavailable):
            GenerationClient('')

    def test_sdk_client_does_not_retry(self):
        client = GenerationClient(API_KEY, timeout=5)
        assert client._client.max_retries == 0
