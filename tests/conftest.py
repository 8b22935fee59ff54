import os
import sys
from datetime import datetime, timezone

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


class FakeClient:
    """Records payloads instead of sending them."""

    def __init__(self, error=None):
        self.error = error
        self.bulk_calls = []
        self.template_calls = []

    def bulk(self, payload):
        self.bulk_calls.append(payload)
        if self.error:
            raise self.error
        return {"errors": False, "items": []}

    def put_template(self, name, payload):
        self.template_calls.append((name, payload))
        if self.error:
            raise self.error
        return {"acknowledged": True}

    def info(self):
        return {"version": {"number": "5.6.0"}}


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def timestamp():
    return datetime(2014, 7, 8, 9, 10, 11, tzinfo=timezone.utc)


@pytest.fixture
def make_client():
    return FakeClient
