# Building `_bulk` request bodies

from typing import Iterable

from ..events import Event
from ..rendering import dumps, render_json
from .mappings import DOC_TYPE
from .naming import IndexTemplate

BULK_CONTENT_TYPE = "application/x-ndjson"


def action_line(index_name: str) -> bytes:
	return dumps({"index": {"_index": index_name, "_type": DOC_TYPE}})


def build_batch(events: Iterable[Event], template: IndexTemplate) -> bytes:
	"""Build a `_bulk` request body for the given events.

	Each event produces an action line naming its index followed by the
	rendered document, both newline-terminated, in input order. No events
	produce an empty body.
	"""
	lines = []
	for event in events:
		lines.append(action_line(template.index(event.timestamp)))
		lines.append(render_json(event))
	if not lines:
		return b""
	return b"\n".join(lines) + b"\n"
