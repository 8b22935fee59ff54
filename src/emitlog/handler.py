# ElasticsearchHandler implementation

import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .collector import ElasticCollector
from .events import Event
from .levels import from_logging_level

_OWN_LOGGER = "emitlog"


def _is_own_record(record: logging.LogRecord) -> bool:
	return record.name == _OWN_LOGGER or record.name.startswith(_OWN_LOGGER + ".")


def _extract_properties(record: logging.LogRecord) -> Dict[str, Any]:
	properties: Dict[str, Any] = {}
	value = getattr(record, "properties", None)
	if isinstance(value, Mapping):
		properties.update(value)
	properties.setdefault("logger", record.name)
	return properties


class ElasticsearchHandler(logging.Handler):
	"""Logging handler that batches log records into an ElasticCollector.

	Pass structured values with `extra={"properties": {...}}` and use
	`{name}` placeholders in the message; records with `%`-style args are
	indexed with their formatted message as the template.
	"""

	def __init__(
		self,
		collector: Optional[ElasticCollector] = None,
		level=logging.NOTSET,
		capacity: int = 100,
		circuit_breaker_duration: float = 60.0,
		error_print_interval: float = 10.0,
	):
		super().__init__(level)
		self.collector = collector or ElasticCollector.local()
		self.capacity = capacity
		self.buffer: List[Event] = []
		self.circuit_breaker_duration = circuit_breaker_duration
		self.error_print_interval = error_print_interval
		self._circuit_open_until = 0.0
		self._last_error_printed = 0.0

	@property
	def circuit_open(self) -> bool:
		return time.time() < self._circuit_open_until

	def to_event(self, record: logging.LogRecord) -> Event:
		# Only structured records treat their braces as placeholders
		structured = isinstance(getattr(record, "properties", None), Mapping)
		if structured and not record.args and isinstance(record.msg, str):
			template = record.msg
		else:
			template = record.getMessage()
		properties = _extract_properties(record)
		if record.exc_info:
			properties["exception"] = self.formatException(record.exc_info)
		return Event(
			timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
			level=from_logging_level(record.levelno),
			message_template=template,
			properties=properties,
		)

	def formatException(self, exc_info) -> str:
		formatter = self.formatter or logging.Formatter()
		return formatter.formatException(exc_info)

	def emit(self, record):
		if _is_own_record(record):
			return
		try:
			self.buffer.append(self.to_event(record))
		except Exception:
			self.handleError(record)
			return
		if len(self.buffer) >= self.capacity:
			self.flush()

	def flush(self):
		self.acquire()
		try:
			if not self.buffer:
				return
			events, self.buffer = self.buffer, []
			self._send(events)
		finally:
			self.release()

	def _send(self, events: List[Event]):
		current_time = time.time()
		# Circuit breaker: drop the batch while the server is known to be unavailable
		if current_time < self._circuit_open_until:
			return
		try:
			self.collector.accept_events(events)
		except Exception as e:
			self._circuit_open_until = current_time + self.circuit_breaker_duration
			# Only print error occasionally to avoid log spam
			if current_time - self._last_error_printed > self.error_print_interval:
				print(
					f"[emitlog] Failed to send {len(events)} events, pausing for {self.circuit_breaker_duration}s: {e}",
					file=sys.stderr,
				)
				self._last_error_printed = current_time
			return
		if self._circuit_open_until:
			self._circuit_open_until = 0.0
			print("[emitlog] Connection restored, resuming indexing", file=sys.stderr)

	def close(self):
		try:
			self.flush()
		finally:
			super().close()
