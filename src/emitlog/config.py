# Configuration loading for emitlog

import os

from .elasticsearch.naming import DEFAULT_DATE_FORMAT, DEFAULT_INDEX_PREFIX, IndexTemplate

LOCAL_SERVER_URL = "http://localhost:9200/"

# Lazy load dotenv - only when config is first accessed
_dotenv_loaded = False
_custom_dotenv_path = None


class ConfigError(ValueError):
	"""Raised when a configuration value cannot be parsed."""
	pass


def _getenv(name, default):
	value = os.getenv(name)
	return value if value else default


def _getenv_int(name, default):
	value = _getenv(name, None)
	if value is None:
		return default
	try:
		parsed = int(value)
	except ValueError:
		raise ConfigError(f"{name} must be an integer, got {value!r}")
	if parsed <= 0:
		raise ConfigError(f"{name} must be positive, got {parsed}")
	return parsed


class EmitlogConfig:
	"""Loads configuration from environment variables and provides defaults."""
	def __init__(self):
		self.server_url = _getenv("EMITLOG_SERVER_URL", LOCAL_SERVER_URL)
		self.index_prefix = _getenv("EMITLOG_INDEX_PREFIX", DEFAULT_INDEX_PREFIX)
		self.index_date_format = _getenv("EMITLOG_INDEX_DATE_FORMAT", DEFAULT_DATE_FORMAT)
		self.auth = _getenv("EMITLOG_AUTH", None)
		self.timeout = _getenv_int("EMITLOG_TIMEOUT", 30)
		self.batch_size = _getenv_int("EMITLOG_BATCH_SIZE", 100)

	def index_template(self) -> IndexTemplate:
		"""Build the index template, validating the prefix and date format."""
		return IndexTemplate(prefix=self.index_prefix, date_format=self.index_date_format)

	def collector_config(self):
		from .collector import CollectorConfig
		return CollectorConfig(
			server_url=self.server_url,
			template=self.index_template(),
			auth=self.auth,
			timeout=self.timeout,
		)


def set_dotenv_path(path: str):
	"""Set a custom .env file path to load. Must be called before load_config()."""
	global _custom_dotenv_path, _dotenv_loaded
	_custom_dotenv_path = path
	_dotenv_loaded = False  # Reset to force reload with new path


def load_config() -> EmitlogConfig:
	"""Return a config object with all settings loaded."""
	global _dotenv_loaded, _custom_dotenv_path
	if not _dotenv_loaded:
		from dotenv import load_dotenv, find_dotenv
		# Check for DOTENV_PATH environment variable first
		dotenv_path = os.getenv("DOTENV_PATH") or _custom_dotenv_path
		if dotenv_path:
			# Explicit env files take precedence over the process environment
			load_dotenv(dotenv_path, override=True)
		else:
			# Search for .env file in current directory and parents
			dotenv_path = find_dotenv(usecwd=True)
			if dotenv_path:
				load_dotenv(dotenv_path)
		_dotenv_loaded = True
	return EmitlogConfig()
