import os
from collections.abc import Generator

import httpx
import pytest
from fastapi.testclient import TestClient

# Ensure settings are resolved from test env before app modules import.
os.environ['ENVIRONMENT'] = 'test'
os.environ['LOG_LEVEL'] = 'INFO'
os.environ['TELEGRAM_BOT_TOKEN'] = 'test-token'
os.environ['TELEGRAM_BOT_USERNAME'] = 'bridge_bot'
os.environ['TELEGRAM_API_BASE_URL'] = 'https://api.telegram.org'
os.environ['MAX_MESSAGE_LENGTH'] = '4000'
os.environ['INFERENCE_BACKEND'] = 'workers_ai'
os.environ['INFERENCE_API_KEY'] = 'test-inference-key'
os.environ['INFERENCE_ACCOUNT_ID'] = 'acct-123'
os.environ.pop('INFERENCE_BASE_URL', None)
os.environ.pop('INFERENCE_MODEL', None)

TELEGRAM_BASE_URL = 'https://api.telegram.org/bottest-token'
WORKERS_AI_URL = (
    'https://api.cloudflare.com/client/v4/accounts/acct-123/ai/run/'
    '@cf/meta/llama-3.3-70b-instruct-fp8-fast'
)


class FakeHttp:
    """Stands in for ``httpx.AsyncClient`` and records every outbound POST."""

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self.client_kwargs: list[dict] = []
        self.inference_payload: object = {'result': {'response': 'Model says hi.'}, 'success': True}
        self.inference_status = 200
        self.inference_exc: Exception | None = None
        self.telegram_failures: dict[str, Exception | int] = {}

    def __call__(self, *args, **kwargs) -> 'FakeHttp':
        self.client_kwargs.append(kwargs)
        return self

    async def __aenter__(self) -> 'FakeHttp':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False

    async def post(self, url: str, json=None, headers=None, **kwargs) -> httpx.Response:
        request = httpx.Request('POST', url)
        method = url.rsplit('/', 1)[-1]
        self.calls.append({'url': url, 'method': method, 'json': json, 'headers': headers})

        if url.startswith(TELEGRAM_BASE_URL):
            failure = self.telegram_failures.get(method)
            if isinstance(failure, Exception):
                raise failure
            if isinstance(failure, int):
                return httpx.Response(
                    failure,
                    json={'ok': False, 'description': 'Bad Request'},
                    request=request,
                )
            return httpx.Response(200, json={'ok': True, 'result': True}, request=request)

        if self.inference_exc is not None:
            raise self.inference_exc
        return httpx.Response(self.inference_status, json=self.inference_payload, request=request)

    @property
    def telegram_calls(self) -> list[dict]:
        return [call for call in self.calls if call['url'].startswith(TELEGRAM_BASE_URL)]

    @property
    def inference_calls(self) -> list[dict]:
        return [call for call in self.calls if not call['url'].startswith(TELEGRAM_BASE_URL)]

    def sent_messages(self) -> list[dict]:
        return [call['json'] for call in self.telegram_calls if call['method'] == 'sendMessage']


@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    from aibridge.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr(httpx, 'AsyncClient', fake)
    return fake


@pytest.fixture
def client(fake_http: FakeHttp) -> Generator[TestClient, None, None]:
    from aibridge.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client

