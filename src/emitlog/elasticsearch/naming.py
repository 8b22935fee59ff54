# Time-partitioned index naming

from dataclasses import dataclass
from datetime import datetime, timezone

from ..events import to_utc

DEFAULT_INDEX_PREFIX = "emitlog-"
DEFAULT_DATE_FORMAT = "%Y%m%d"

# Characters Elasticsearch rejects in index names
_FORBIDDEN_CHARS = set('\\/*?"<>| ,#:')
_SAMPLE_DATE = datetime(2014, 7, 8, 9, 10, 11, tzinfo=timezone.utc)


class InvalidIndexTemplateError(ValueError):
	"""Raised when an index template cannot produce valid index names."""
	pass


@dataclass(frozen=True)
class IndexTemplate:
	"""Template for naming log indices.

	The index name is `prefix` followed by the event timestamp formatted
	with `date_format` (strftime syntax). The default template produces
	names like 'emitlog-20160501'; use '%Y%m' for one index per month.
	"""
	prefix: str = DEFAULT_INDEX_PREFIX
	date_format: str = DEFAULT_DATE_FORMAT

	def __post_init__(self):
		self.validate()

	def validate(self):
		if "*" in self.prefix:
			raise InvalidIndexTemplateError(
				f"Index prefix {self.prefix!r} must not contain '*'"
			)
		if not self.date_format:
			raise InvalidIndexTemplateError("Index date format must not be empty")
		try:
			sample = self.index(_SAMPLE_DATE)
		except ValueError as e:
			raise InvalidIndexTemplateError(f"Invalid date format {self.date_format!r}: {e}")
		bad = sorted(set(sample) & _FORBIDDEN_CHARS)
		if bad:
			raise InvalidIndexTemplateError(
				f"Index name {sample!r} contains forbidden characters: {''.join(bad)!r}"
			)
		if sample != sample.lower():
			raise InvalidIndexTemplateError(f"Index name {sample!r} must be lowercase")
		if sample.startswith(("-", "_", "+")):
			raise InvalidIndexTemplateError(f"Index name {sample!r} must not start with '-', '_' or '+'")

	def index(self, timestamp: datetime) -> str:
		"""Resolve the index name for an event timestamp."""
		return self.prefix + to_utc(timestamp).strftime(self.date_format)

	@property
	def pattern(self) -> str:
		"""Glob matching every index this template names."""
		return f"{self.prefix}*"


def index(template: IndexTemplate, timestamp: datetime) -> str:
	return template.index(timestamp)
