# Rendering events into Elasticsearch documents

import json
from datetime import datetime
from typing import Any, Dict

from .events import Event, to_utc

TIMESTAMP_FIELD = "@t"
MESSAGE_FIELD = "@m"
TEMPLATE_ID_FIELD = "@i"
LEVEL_FIELD = "@l"

RenderedDocument = Dict[str, Any]


def format_timestamp(timestamp: datetime) -> str:
	"""ISO-8601 in UTC with millisecond precision and a trailing Z."""
	ts = to_utc(timestamp)
	return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def _property_name(name: str) -> str:
	# A leading "@" is doubled so properties never clobber the fixed fields
	if name.startswith("@"):
		return "@" + name
	return name


def render(event: Event) -> RenderedDocument:
	"""Project an event onto the flat document indexed in Elasticsearch."""
	doc: RenderedDocument = {
		TIMESTAMP_FIELD: format_timestamp(event.timestamp),
		MESSAGE_FIELD: event.message,
		TEMPLATE_ID_FIELD: event.message_template.id,
		LEVEL_FIELD: event.level.short_code,
	}
	for name in sorted(event.properties):
		doc[_property_name(name)] = event.properties[name]
	return doc


def dumps(value: Any) -> bytes:
	"""Compact UTF-8 JSON, as written on the wire.

	Lone surrogates (e.g. from surrogateescape-decoded paths) cannot be
	encoded as UTF-8 and are written as \\uXXXX escapes instead.
	"""
	text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
	return text.encode("utf-8", errors="backslashreplace")


def render_json(event: Event) -> bytes:
	return dumps(render(event))
