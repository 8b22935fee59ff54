import json

from emitlog.elasticsearch.mappings import DOC_TYPE, TIMESTAMP_FORMAT, build_index_template
from emitlog.elasticsearch.naming import IndexTemplate


def test_template_matches_prefix_with_glob():
    body = json.loads(build_index_template(IndexTemplate("testlog-", "%Y%m%d")))
    assert body["template"] == "testlog-*"


def test_timestamp_has_date_mapping():
    payload = build_index_template(IndexTemplate("testlog-"))
    assert payload == (
        b'{"template":"testlog-*","mappings":{"emitlog":{"properties":'
        b'{"@t":{"type":"date","format":"yyyy-MM-dd\'T\'HH:mm:ss.SSSZ"}}}}}'
    )


def test_mapping_keyed_by_doc_type():
    body = json.loads(build_index_template(IndexTemplate()))
    timestamp_mapping = body["mappings"][DOC_TYPE]["properties"]["@t"]
    assert DOC_TYPE == "emitlog"
    assert timestamp_mapping == {"type": "date", "format": TIMESTAMP_FORMAT}
