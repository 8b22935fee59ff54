import pytest

from emitlog.collector import CollectorConfig, ElasticCollector
from emitlog.elasticsearch.client import ConnectionFailedError
from emitlog.elasticsearch.naming import IndexTemplate
from emitlog.events import Event
from emitlog.levels import LogLevel


def test_default_config_targets_localhost():
    collector = ElasticCollector.local()
    assert collector.config.server_url == "http://localhost:9200/"
    assert collector.template == IndexTemplate()
    assert collector.client.base_url == "http://localhost:9200"


def test_with_auth_returns_configured_copy():
    collector = ElasticCollector.local()
    authed = collector.with_auth("Basic abc")
    assert authed.config.auth == "Basic abc"
    assert authed.client.headers["Authorization"] == "Basic abc"
    assert collector.config.auth is None


def test_accept_events_sends_one_bulk_request(fake_client, timestamp):
    collector = ElasticCollector(CollectorConfig(template=IndexTemplate("testlog-")), client=fake_client)
    events = [
        Event(timestamp, LogLevel.INFO, "one"),
        Event(timestamp, LogLevel.INFO, "two"),
    ]

    assert collector.accept_events(events) == 2
    assert len(fake_client.bulk_calls) == 1
    assert fake_client.bulk_calls[0].count(b"\n") == 4
    assert b'"_index":"testlog-20140708"' in fake_client.bulk_calls[0]


def test_accept_no_events_sends_nothing(fake_client):
    collector = ElasticCollector(client=fake_client)
    assert collector.accept_events([]) == 0
    assert fake_client.bulk_calls == []


def test_send_failure_propagates(make_client, timestamp):
    client = make_client(error=ConnectionFailedError("down"))
    collector = ElasticCollector(client=client)
    with pytest.raises(ConnectionFailedError):
        collector.accept_events([Event(timestamp, LogLevel.INFO, "x")])


def test_register_template(fake_client):
    collector = ElasticCollector(CollectorConfig(template=IndexTemplate("testlog-")), client=fake_client)
    collector.register_template()
    name, payload = fake_client.template_calls[0]
    assert name == "emitlog"
    assert payload.startswith(b'{"template":"testlog-*"')


def test_with_auth_builds_its_own_client(fake_client):
    collector = ElasticCollector(client=fake_client)
    authed = collector.with_auth("Basic abc")
    assert authed.client is not fake_client
    assert authed.client.headers["Authorization"] == "Basic abc"
