import pytest
from pydantic import ValidationError

from aibridge.core.config import Settings


def test_defaults_match_the_reference_deployment(monkeypatch):
    monkeypatch.delenv('MAX_MESSAGE_LENGTH')
    settings = Settings()

    assert settings.max_message_length == 4000
    assert settings.inference_backend == 'workers_ai'
    assert settings.inference_model == '@cf/meta/llama-3.3-70b-instruct-fp8-fast'
    assert settings.effective_inference_base_url == 'https://api.cloudflare.com/client/v4'
    assert settings.telegram_bot_token.get_secret_value() == 'test-token'


def test_backend_is_normalized_and_validated():
    assert Settings(inference_backend='  OPENAI ').inference_backend == 'openai'
    with pytest.raises(ValidationError, match='INFERENCE_BACKEND must be one of'):
        Settings(inference_backend='llamacpp')


def test_bot_username_is_normalized():
    assert Settings(telegram_bot_username='@Bridge_Bot').telegram_bot_username == 'bridge_bot'
    assert Settings(telegram_bot_username='  ').telegram_bot_username is None


@pytest.mark.parametrize('length', [0, 1, 4097])
def test_message_length_is_bounded_by_telegram_limit(length):
    with pytest.raises(ValidationError):
        Settings(max_message_length=length)


def test_legacy_token_variable_is_accepted(monkeypatch):
    monkeypatch.delenv('TELEGRAM_BOT_TOKEN')
    monkeypatch.setenv('TELEGRAM_TOKEN', 'legacy-token')

    assert Settings().telegram_bot_token.get_secret_value() == 'legacy-token'


def test_production_requires_secrets(monkeypatch):
    monkeypatch.setenv('ENVIRONMENT', 'production')
    assert Settings().environment == 'production'

    monkeypatch.delenv('INFERENCE_ACCOUNT_ID')
    with pytest.raises(ValidationError, match='INFERENCE_ACCOUNT_ID is required'):
        Settings()
    assert Settings(inference_backend='openai').inference_backend == 'openai'

    monkeypatch.delenv('TELEGRAM_BOT_TOKEN')
    with pytest.raises(ValidationError, match='TELEGRAM_BOT_TOKEN is required'):
        Settings(inference_backend='openai')


def test_local_environment_allows_missing_secrets(monkeypatch):
    for name in ('TELEGRAM_BOT_TOKEN', 'INFERENCE_API_KEY', 'INFERENCE_ACCOUNT_ID'):
        monkeypatch.delenv(name)

    settings = Settings()
    assert settings.telegram_bot_token is None
    assert settings.inference_api_key is None


def test_blank_secrets_count_as_missing(monkeypatch):
    monkeypatch.setenv('TELEGRAM_BOT_TOKEN', '   ')
    monkeypatch.setenv('INFERENCE_API_KEY', '')

    settings = Settings()
    assert settings.telegram_bot_token is None
    assert settings.inference_api_key is None
