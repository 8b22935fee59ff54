# Batch structured log events into Elasticsearch `_bulk` requests

from .collector import CollectorConfig, ElasticCollector
from .elasticsearch.bulk import build_batch
from .elasticsearch.mappings import DOC_TYPE, build_index_template
from .elasticsearch.naming import IndexTemplate, InvalidIndexTemplateError, index
from .events import Event
from .levels import LogLevel
from .rendering import render, render_json
from .templates import MessageTemplate

__version__ = "0.1.0"
