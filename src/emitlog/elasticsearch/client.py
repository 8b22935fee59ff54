# Elasticsearch HTTP client - using stdlib urllib for fast imports

import json
import logging
import urllib.error
import urllib.request
from typing import Any, Dict, List, Optional

from .bulk import BULK_CONTENT_TYPE

_logger = logging.getLogger("emitlog.client")

JSON_CONTENT_TYPE = "application/json"


class ElasticsearchError(Exception):
	"""Base exception for Elasticsearch errors with user-friendly messages."""
	pass


class ConnectionFailedError(ElasticsearchError):
	"""Raised when Elasticsearch is not reachable."""
	pass


class AuthenticationError(ElasticsearchError):
	"""Raised when authentication fails."""
	pass


class RequestFailedError(ElasticsearchError):
	"""Raised for any other non-2xx response."""

	def __init__(self, status: int, reason: str, body: str = ""):
		super().__init__(f"Elasticsearch returned HTTP {status} {reason}: {body[:500]}")
		self.status = status
		self.reason = reason
		self.body = body


class BulkRejectedError(ElasticsearchError):
	"""Raised when a `_bulk` request succeeds but some items were rejected."""

	def __init__(self, failures: List[Dict[str, Any]]):
		first = failures[0].get("error") if failures else None
		super().__init__(f"{len(failures)} bulk item(s) rejected, first error: {first}")
		self.failures = failures


def _bulk_failures(response: Dict[str, Any]) -> List[Dict[str, Any]]:
	failures = []
	for item in response.get("items", []):
		for result in item.values():
			if isinstance(result, dict) and result.get("error"):
				failures.append(result)
	return failures


class ElasticsearchClient:
	"""Minimal Elasticsearch client using stdlib urllib for fast imports.

	Sends each payload as a single request. Retries, pooling and TLS
	settings are left to the caller.
	"""

	def __init__(self, server_url, auth=None, timeout=30):
		self.base_url = server_url.rstrip("/")
		self.timeout = timeout
		self.headers = {}
		if auth:
			self.headers["Authorization"] = auth

	def _request(self, method, path, data=None, content_type=JSON_CONTENT_TYPE):
		"""Make HTTP request to Elasticsearch."""
		url = f"{self.base_url}{path}"
		headers = dict(self.headers)
		if data is not None:
			headers["Content-Type"] = content_type
		req = urllib.request.Request(url, data=data, headers=headers, method=method)
		try:
			with urllib.request.urlopen(req, timeout=self.timeout) as resp:
				raw = resp.read().decode("utf-8")
				if not raw:
					return {}
				return json.loads(raw)
		except urllib.error.HTTPError as e:
			if e.code in (401, 403):
				raise AuthenticationError(f"Authentication failed (HTTP {e.code})")
			body = ""
			try:
				body = e.read().decode("utf-8", errors="replace")
			except (OSError, AttributeError):
				pass
			raise RequestFailedError(e.code, str(e.reason), body)
		except urllib.error.URLError as e:
			raise ConnectionFailedError(f"Cannot connect to {self.base_url}: {e.reason}")

	def info(self):
		"""Get cluster info (used for connection check)."""
		return self._request("GET", "/")

	def bulk(self, payload: bytes) -> Dict[str, Any]:
		"""POST a `_bulk` body. Raises BulkRejectedError if any item failed."""
		response = self._request("POST", "/_bulk", payload, content_type=BULK_CONTENT_TYPE)
		if response.get("errors"):
			failures = _bulk_failures(response)
			_logger.debug("Bulk response reported %d failed item(s)", len(failures))
			raise BulkRejectedError(failures)
		return response

	def put_template(self, name: str, payload: bytes) -> Dict[str, Any]:
		"""Create or update a legacy index template."""
		return self._request("PUT", f"/_template/{name}", payload)


def check_connection(client: ElasticsearchClient, server_url: Optional[str] = None):
	"""Check if Elasticsearch is reachable. Raises ConnectionFailedError if not."""
	target = server_url or client.base_url
	try:
		client.info()
	except ConnectionFailedError:
		raise ConnectionFailedError(
			f"Cannot connect to Elasticsearch at {target}\n"
			f"Make sure Elasticsearch is running and accessible."
		)
	except AuthenticationError:
		raise AuthenticationError(
			f"Authentication failed for Elasticsearch at {target}\n"
			f"Check EMITLOG_AUTH in your .env file."
		)
