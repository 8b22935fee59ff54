# Message templates: placeholder substitution and template ids

import json
import re
from typing import Any, List, Mapping

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def template_id(text: str) -> str:
	"""Return a stable 8 hex digit id for a template's text.

	Uses Jenkins' one-at-a-time hash, so every occurrence of the same
	template maps to the same id regardless of its property values.
	"""
	h = 0
	for ch in text:
		h = (h + ord(ch)) & 0xFFFFFFFF
		h = (h + (h << 10)) & 0xFFFFFFFF
		h ^= h >> 6
	h = (h + (h << 3)) & 0xFFFFFFFF
	h ^= h >> 11
	h = (h + (h << 15)) & 0xFFFFFFFF
	return f"{h:08x}"


def format_value(value: Any) -> str:
	"""String form of a property value as it appears in a rendered message."""
	if value is None:
		return ""
	if isinstance(value, str):
		return value
	if isinstance(value, bool):
		return "true" if value else "false"
	if isinstance(value, Mapping):
		return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
	return str(value)


class MessageTemplate:
	"""A log message with named `{name}` placeholders."""

	def __init__(self, text: str):
		self.text = text
		self.id = template_id(text)

	@property
	def placeholders(self) -> List[str]:
		return _PLACEHOLDER.findall(self.text)

	def render(self, properties: Mapping[str, Any]) -> str:
		# Missing properties render as the empty string
		def _substitute(match):
			name = match.group(1)
			if name not in properties:
				return ""
			return format_value(properties[name])
		return _PLACEHOLDER.sub(_substitute, self.text)

	def __eq__(self, other):
		if not isinstance(other, MessageTemplate):
			return NotImplemented
		return self.text == other.text

	def __hash__(self):
		return hash(self.text)

	def __repr__(self):
		return f"MessageTemplate({self.text!r})"
