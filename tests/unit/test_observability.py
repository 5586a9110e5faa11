import json
import logging

import pytest

from aibridge.core.logging import RequestIdFilter, configure_logging
from aibridge.core.observability import log_event
from aibridge.core.request_context import get_request_id, request_id_scope, resolve_request_id


def test_log_event_emits_sorted_json_with_request_id(caplog):
    logger = logging.getLogger('aibridge.test.events')

    with caplog.at_level(logging.INFO, logger='aibridge.test.events'):
        with request_id_scope('req-42'):
            log_event(logger, event='telegram.update.dispatched', outcome='command', update_id=9)

    record = caplog.records[-1]
    prefix, _, payload = record.getMessage().partition(' fields=')
    assert prefix == 'event=telegram.update.dispatched'
    assert json.loads(payload) == {'outcome': 'command', 'request_id': 'req-42', 'update_id': 9}


def test_log_event_normalizes_unknown_values(caplog):
    logger = logging.getLogger('aibridge.test.events')

    with caplog.at_level(logging.WARNING, logger='aibridge.test.events'):
        log_event(logger, event='x', level=logging.WARNING, chat=('a', 1), obj=object)

    payload = json.loads(caplog.records[-1].getMessage().partition(' fields=')[2])
    assert payload['chat'] == ['a', 1]
    assert payload['obj'].startswith("<class 'object'")
    assert 'request_id' not in payload


def test_request_id_scope_restores_previous_value():
    assert get_request_id() is None
    with request_id_scope('outer'):
        with request_id_scope('inner'):
            assert get_request_id() == 'inner'
        assert get_request_id() == 'outer'
    assert get_request_id() is None


def test_resolve_request_id_rejects_unusable_headers():
    assert resolve_request_id('  abc-123 ') == 'abc-123'
    assert len(resolve_request_id(None)) == 32
    assert len(resolve_request_id('x' * 500)) == 32
    assert len(resolve_request_id('bad\nid')) == 32


def test_request_id_filter_defaults_to_dash():
    record = logging.LogRecord('n', logging.INFO, __file__, 1, 'msg', None, None)
    assert RequestIdFilter().filter(record) is True
    assert record.request_id == '-'


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match='Invalid LOG_LEVEL'):
        configure_logging('chatty')


def test_configure_logging_keeps_http_client_urls_out_of_info_logs():
    configure_logging('debug')

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger('httpx').level == logging.WARNING
    assert logging.getLogger('httpcore').level == logging.WARNING


def test_log_event_keeps_user_text_readable(caplog):
    logger = logging.getLogger('aibridge.test.events')

    with caplog.at_level(logging.INFO, logger='aibridge.test.events'):
        log_event(logger, event='telegram.update.dispatched', command='/start', note='héllo \U0001F600')

    assert caplog.records[-1].getMessage().endswith('"note":"héllo \U0001F600"}')
