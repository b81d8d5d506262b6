"""
Shared fixtures: an in-memory stand-in for the async Supabase query builder
and a recording email sender.
"""
import copy
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
import pytz

from app.core.errors import NotificationError
from app.services.notification_service import NotificationDispatcher
from app.services.waitlist_service import WaitlistStore


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.row_limit = None

    def select(self, *columns, **kwargs):
        self.action = "select"
        return self

    def insert(self, row):
        self.action = "insert"
        self.payload = row
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    async def execute(self):
        self.db.calls.append(self.action)
        if self.db.error is not None:
            raise self.db.error
        rows = self.db.tables.setdefault(self.table, [])

        if self.action == "insert":
            rows.append(copy.deepcopy(self.payload))
            return SimpleNamespace(data=[copy.deepcopy(self.payload)])

        if self.action == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=removed)

        result = [copy.deepcopy(row) for row in rows if self._matches(row)]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda row: row[column], reverse=desc)
        if self.row_limit is not None:
            result = result[:self.row_limit]
        return SimpleNamespace(data=result)


class FakeSupabase:
    """Just enough of supabase.AsyncClient for WaitlistStore"""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.error = None

    def table(self, name):
        return FakeQuery(self, name)


class RecordingSender:
    """Records sends; addresses listed in ``fail_for`` raise NotificationError"""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)
        self.fail_all = False

    async def send_email(self, to_email, subject, html_content, text_content, tags=None, to_name=None):
        self.sent.append({
            "to_email": to_email,
            "subject": subject,
            "html_content": html_content,
            "text_content": text_content,
            "tags": tags,
        })
        if self.fail_all or to_email in self.fail_for:
            raise NotificationError(f"Brevo rejected email to {to_email}")
        return {"success": True, "message_id": f"<msg-{len(self.sent)}>", "to_email": to_email}


class StepClock:
    """Deterministic clock advancing one second per call"""

    def __init__(self, start=None):
        self.now = start or pytz.UTC.localize(datetime(2025, 1, 1, 12, 0, 0))

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


OPERATOR = "ops@example.com"
TEST_INBOX = "qa@example.com"


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def store(fake_db):
    return WaitlistStore(fake_db, clock=StepClock())


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def outcomes():
    return []


@pytest.fixture
def dispatcher(sender, outcomes):
    return NotificationDispatcher(
        sender,
        operator_email=OPERATOR,
        test_email=TEST_INBOX,
        test_mode=False,
        on_outcome=outcomes.append
    )
