# Structured log events

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .levels import LogLevel, normalize_level
from .templates import MessageTemplate

_SCALAR_TYPES = (str, int, bool, type(None))


def coerce_value(value: Any) -> Any:
	"""Coerce a property value into one of the supported variants.

	Supported: str, int, float, bool, None and nested mappings of those.
	Anything else, including non-finite floats, becomes its str() form.
	"""
	if isinstance(value, _SCALAR_TYPES):
		return value
	if isinstance(value, float):
		return value if math.isfinite(value) else str(value)
	if isinstance(value, Mapping):
		return normalize_properties(value)
	return str(value)


def normalize_properties(value: Optional[Mapping[Any, Any]]) -> Dict[str, Any]:
	"""Copy a property bag into a plain dict sorted by key.

	Keys are converted with str(); None and empty keys are dropped. When a
	non-str key collides with a str key after conversion (1 and "1"), the
	str key's value wins, whatever the input order.
	"""
	if not value:
		return {}
	properties: Dict[str, Any] = {}
	# Non-str keys first so that str keys overwrite them
	items = sorted(value.items(), key=lambda item: isinstance(item[0], str))
	for key, val in items:
		if key is None:
			continue
		key_text = str(key)
		if not key_text:
			continue
		properties[key_text] = coerce_value(val)
	return dict(sorted(properties.items()))


def to_utc(timestamp: datetime) -> datetime:
	"""Treat naive datetimes as UTC and convert aware ones, truncating to ms."""
	if timestamp.tzinfo is None:
		timestamp = timestamp.replace(tzinfo=timezone.utc)
	else:
		timestamp = timestamp.astimezone(timezone.utc)
	return timestamp.replace(microsecond=timestamp.microsecond // 1000 * 1000)


@dataclass(frozen=True)
class Event:
	"""An immutable structured log event.

	`level` may be given as a LogLevel, a level name or a stdlib level
	number, and `message_template` as plain text. The event owns a
	sorted, read-only copy of its properties so that rendering it is
	reproducible.
	"""
	timestamp: datetime
	level: LogLevel
	message_template: MessageTemplate
	properties: Mapping[str, Any] = field(default_factory=dict, hash=False)

	def __post_init__(self):
		level = normalize_level(self.level)
		if level is None:
			raise ValueError(f"Unknown log level: {self.level!r}")
		template = self.message_template
		if not isinstance(template, MessageTemplate):
			template = MessageTemplate(str(template))
		object.__setattr__(self, "timestamp", to_utc(self.timestamp))
		object.__setattr__(self, "level", level)
		object.__setattr__(self, "message_template", template)
		object.__setattr__(self, "properties", MappingProxyType(normalize_properties(self.properties)))

	@property
	def message(self) -> str:
		return self.message_template.render(self.properties)
