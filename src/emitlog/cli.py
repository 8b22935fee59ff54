import signal
import sys

# Handle Ctrl+C gracefully before any other imports
signal.signal(signal.SIGINT, lambda *_: sys.exit(130))

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional

import click
import typer

from .collector import ElasticCollector
from .config import ConfigError, load_config, set_dotenv_path
from .elasticsearch.bulk import build_batch
from .elasticsearch.client import ElasticsearchError, check_connection
from .elasticsearch.mappings import DOC_TYPE, build_index_template
from .elasticsearch.naming import InvalidIndexTemplateError
from .events import Event

app = typer.Typer()


class EventParseError(ValueError):
	pass


def _fail(message):
	typer.echo(typer.style(f"Error: {message}", fg=typer.colors.RED), err=True)
	raise typer.Exit(1)


def _parse_timestamp(value: Any) -> datetime:
	if value is None:
		return datetime.now(timezone.utc)
	if isinstance(value, bool):
		raise EventParseError(f"invalid timestamp {value!r}")
	if isinstance(value, (int, float)):
		try:
			return datetime.fromtimestamp(value, tz=timezone.utc)
		except (OverflowError, OSError, ValueError):
			raise EventParseError(f"timestamp out of range {value!r}")
	clean = str(value).replace("Z", "+00:00")
	try:
		return datetime.fromisoformat(clean)
	except ValueError:
		raise EventParseError(f"invalid timestamp {value!r}")


def parse_event(line: str) -> Event:
	"""Parse one JSON line into an Event."""
	try:
		data = json.loads(line)
	except json.JSONDecodeError as e:
		raise EventParseError(f"invalid JSON: {e}")
	if not isinstance(data, dict):
		raise EventParseError("expected a JSON object")
	template = data.get("template", data.get("message_template"))
	if not isinstance(template, str):
		raise EventParseError("missing 'template'")
	properties = data.get("properties") or {}
	if not isinstance(properties, dict):
		raise EventParseError("'properties' must be an object")
	try:
		return Event(
			timestamp=_parse_timestamp(data.get("timestamp")),
			level=data.get("level", "info"),
			message_template=template,
			properties=properties,
		)
	except ValueError as e:
		raise EventParseError(str(e))


def read_events(lines: Iterable[str]) -> Iterator[Event]:
	for lineno, line in enumerate(lines, start=1):
		if not line.strip():
			continue
		try:
			yield parse_event(line)
		except EventParseError as e:
			raise EventParseError(f"line {lineno}: {e}")


def _batches(events: Iterable[Event], size: int) -> Iterator[List[Event]]:
	batch: List[Event] = []
	for event in events:
		batch.append(event)
		if len(batch) >= size:
			yield batch
			batch = []
	if batch:
		yield batch


def require_collector(check=True):
	"""Build a collector from config and verify Elasticsearch is accessible."""
	try:
		cfg = load_config()
		collector = ElasticCollector(cfg.collector_config())
	except (ConfigError, InvalidIndexTemplateError) as e:
		_fail(e)
	if check:
		try:
			check_connection(collector.client, cfg.server_url)
		except ElasticsearchError as e:
			_fail(e)
	return collector, cfg


@app.callback()
def main_callback(
	env: Optional[str] = typer.Option(None, "--env", help="Path to a .env file to load"),
):
	"""Ship structured log events to Elasticsearch."""
	if env:
		set_dotenv_path(env)


@app.command()
def init(
	dry_run: bool = typer.Option(False, "--dry-run", help="Print the template instead of registering it"),
):
	"""Register the emitlog index template (idempotent)."""
	if dry_run:
		collector, _ = require_collector(check=False)
		typer.echo(build_index_template(collector.template).decode("utf-8"))
		return
	collector, cfg = require_collector()
	try:
		collector.register_template()
	except ElasticsearchError as e:
		_fail(e)
	typer.echo(f"Registered index template '{DOC_TYPE}' for '{collector.template.pattern}' at {cfg.server_url}")


@app.command("index-name")
def index_name(
	at: Optional[str] = typer.Option(None, "--at", help="ISO-8601 timestamp (default: now)"),
):
	"""Print the index an event at the given time is written to."""
	collector, _ = require_collector(check=False)
	try:
		timestamp = _parse_timestamp(at)
	except EventParseError as e:
		_fail(e)
	typer.echo(collector.template.index(timestamp))


@app.command()
def send(
	path: str = typer.Argument("-", help="JSON lines file of events, '-' for stdin"),
	batch_size: Optional[int] = typer.Option(None, "--batch-size", "-b", help="Events per _bulk request"),
	dry_run: bool = typer.Option(False, "--dry-run", help="Print the _bulk payload instead of sending it"),
):
	"""Send events read as JSON lines to Elasticsearch."""
	collector, cfg = require_collector(check=not dry_run)
	size = batch_size or cfg.batch_size
	if size <= 0:
		_fail("--batch-size must be positive")

	stream = sys.stdin if path == "-" else None
	try:
		if stream is None:
			stream = open(path, "r", encoding="utf-8")
	except OSError as e:
		_fail(f"Cannot read {path}: {e}")

	sent = 0
	try:
		for batch in _batches(read_events(stream), size):
			if dry_run:
				typer.echo(build_batch(batch, collector.template).decode("utf-8"), nl=False)
				continue
			sent += collector.accept_events(batch)
	except EventParseError as e:
		_fail(e)
	except ElasticsearchError as e:
		_fail(f"{e} ({sent} events sent before the failure)")
	finally:
		if stream is not sys.stdin:
			stream.close()

	if not dry_run:
		typer.echo(f"Sent {sent} events.")


def main():
	if len(sys.argv) == 1:
		# No arguments: show help
		command = typer.main.get_command(app)
		ctx = click.Context(command)
		typer.echo(command.get_help(ctx), err=True)
		return 0
	try:
		app()
	except typer.Exit:
		raise
	except Exception as e:
		typer.echo(typer.style(
			f"Fatal error: {type(e).__name__}: {e}",
			fg=typer.colors.RED
		), err=True)
		sys.exit(1)

if __name__ == "__main__":
	main()
