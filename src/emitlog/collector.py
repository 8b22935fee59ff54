# Log collector that ships event batches to Elasticsearch

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from .config import LOCAL_SERVER_URL
from .elasticsearch.bulk import build_batch
from .elasticsearch.client import ElasticsearchClient, ElasticsearchError
from .elasticsearch.mappings import DOC_TYPE, build_index_template
from .elasticsearch.naming import IndexTemplate
from .events import Event

_logger = logging.getLogger("emitlog.collector")


@dataclass(frozen=True)
class CollectorConfig:
	"""Where and how a collector ships its batches."""
	server_url: str = LOCAL_SERVER_URL
	template: IndexTemplate = field(default_factory=IndexTemplate)
	auth: Optional[str] = None
	timeout: int = 30


class ElasticCollector:
	"""Log collector for Elasticsearch.

	Events are written to an index based on their timestamp and the
	configured IndexTemplate. Each call to accept_events() is sent as one
	`_bulk` request; a failure aborts that batch and is raised.
	"""

	def __init__(self, config: Optional[CollectorConfig] = None, client=None):
		self.config = config or CollectorConfig()
		self.client = client or ElasticsearchClient(
			self.config.server_url,
			auth=self.config.auth,
			timeout=self.config.timeout,
		)

	@classmethod
	def local(cls, template: Optional[IndexTemplate] = None) -> "ElasticCollector":
		"""Create a collector for logging to localhost:9200."""
		return cls(CollectorConfig(server_url=LOCAL_SERVER_URL, template=template or IndexTemplate()))

	def with_auth(self, auth: str) -> "ElasticCollector":
		"""Return a collector that sends the given Authorization header value.

		The new collector builds its own client from the updated config; a
		client injected into this collector is not carried over.
		"""
		return ElasticCollector(replace(self.config, auth=auth), client=None)

	@property
	def template(self) -> IndexTemplate:
		return self.config.template

	def register_template(self):
		"""Register the index template; call once before the first batch."""
		payload = build_index_template(self.template)
		_logger.debug("Registering index template %s for %s", DOC_TYPE, self.template.pattern)
		try:
			return self.client.put_template(DOC_TYPE, payload)
		except ElasticsearchError as e:
			_logger.warning("Failed to register index template %s: %s", DOC_TYPE, e)
			raise

	def accept_events(self, events: Sequence[Event]) -> int:
		"""Send the events as a single `_bulk` request. Returns the count sent."""
		if not events:
			return 0
		payload = build_batch(events, self.template)
		try:
			self.client.bulk(payload)
		except ElasticsearchError as e:
			_logger.warning("Failed to send batch of %d events: %s", len(events), e)
			raise
		_logger.debug("Sent batch of %d events (%d bytes)", len(events), len(payload))
		return len(events)
