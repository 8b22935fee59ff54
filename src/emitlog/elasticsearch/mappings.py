# Elasticsearch index template and mappings

from typing import Any, Dict

from ..rendering import TIMESTAMP_FIELD, dumps
from .naming import IndexTemplate

# Document type for every log document; also the template registration name
DOC_TYPE = "emitlog"

# Joda pattern matching rendering.format_timestamp, e.g. 2014-07-08T09:10:11.000Z
TIMESTAMP_FORMAT = "yyyy-MM-dd'T'HH:mm:ss.SSSZ"


def log_mapping() -> Dict[str, Any]:
	return {
		"properties": {
			TIMESTAMP_FIELD: {"type": "date", "format": TIMESTAMP_FORMAT},
		}
	}


def index_template_body(template: IndexTemplate) -> Dict[str, Any]:
	return {
		"template": template.pattern,
		"mappings": {
			DOC_TYPE: log_mapping(),
		},
	}


def build_index_template(template: IndexTemplate) -> bytes:
	"""Build the `_template/emitlog` payload registering the log mapping.

	Register it once, before the first batch is sent, so that new indices
	parse `@t` as a date rather than a string.
	"""
	return dumps(index_template_body(template))
