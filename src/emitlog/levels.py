# Log levels and level normalization

import logging
from enum import IntEnum
from typing import Any, Optional


class LogLevel(IntEnum):
	"""Ordered event severity."""
	TRACE = 0
	DEBUG = 1
	INFO = 2
	WARN = 3
	ERROR = 4

	@property
	def short_code(self) -> str:
		return self.name


_ALIASES = {
	"trace": LogLevel.TRACE,
	"debug": LogLevel.DEBUG,
	"info": LogLevel.INFO,
	"information": LogLevel.INFO,
	"warn": LogLevel.WARN,
	"warning": LogLevel.WARN,
	"error": LogLevel.ERROR,
	"err": LogLevel.ERROR,
	"critical": LogLevel.ERROR,
	"fatal": LogLevel.ERROR,
}


def from_logging_level(levelno: int) -> LogLevel:
	"""Map a stdlib logging level number onto a LogLevel."""
	if levelno >= logging.ERROR:
		return LogLevel.ERROR
	if levelno >= logging.WARNING:
		return LogLevel.WARN
	if levelno >= logging.INFO:
		return LogLevel.INFO
	if levelno > 5:
		return LogLevel.DEBUG
	return LogLevel.TRACE


def normalize_level(value: Any) -> Optional[LogLevel]:
	if value is None:
		return None
	if isinstance(value, LogLevel):
		return value
	# bool is an int subclass
	if isinstance(value, bool):
		return None
	if isinstance(value, int):
		return from_logging_level(value)
	text = str(value).strip().lower()
	if not text:
		return None
	return _ALIASES.get(text)
