"""
Shared test fixtures for the school assistant tools.
The record store and Twilio client are replaced with in-memory fakes.
Zero network calls: all data from the seed rows below.
"""
import copy

import pytest

from school_assistant.services import messaging, record_store
from school_assistant.services.record_store import Record

SEED = {
    "guardians": [
        {"guardian_id": "G001", "first_name": "John", "last_name": "Doe",
         "email": "parent@example.com", "phone": "+15551234567", "pin": "1234"},
        # Stored with stray whitespace around the email
        {"guardian_id": "G002", "first_name": "Mary", "last_name": "Roe",
         "email": " other@example.com ", "phone": "+15559876543", "pin": "9999"},
        {"guardian_id": "G003", "first_name": "Lone", "last_name": "Parent",
         "email": "nokids@example.com", "phone": "+15550000000", "pin": "0000"},
    ],
    "students": [
        {"student_id": "S001", "first_name": "Jane", "last_name": "Doe",
         "grade": "5", "class": "5A", "guardian_id": "G001"},
        {"student_id": "S002", "first_name": "Jim", "last_name": "Doe",
         "grade": 3, "class": "3B", "guardian_id": "G001"},
        {"student_id": "S003", "first_name": "Ann", "last_name": "Roe",
         "grade": "8", "class": "8C", "guardian_id": "G002"},
    ],
    "absences": [
        {"student_id": "S001", "date": "2024-03-15", "reason": "Doctor appointment",
         "status": "approved", "reported_by": "parent@example.com"},
        {"student_id": "S002", "date": "2024-05-02", "reason": "Fever",
         "status": "pending", "reported_by": "+15551234567"},
        {"student_id": "S001", "date": "2023-11-20", "reason": "Family trip",
         "status": "approved", "reported_by": "parent@example.com"},
        {"student_id": "S003", "date": "2024-04-01", "reason": "Dentist",
         "status": "pending", "reported_by": "other@example.com"},
    ],
    "field_trips": [
        {"trip_id": "T001", "name": "Museum Visit", "date": "2024-04-15",
         "location": "Science Museum", "grade_levels": "3-5",
         "description": "Educational visit to the Science Museum"},
        {"trip_id": "T002", "name": "Zoo Day", "date": "2024-05-10",
         "location": "City Zoo", "grade_levels": "6-8", "description": "Animal habitats"},
        {"trip_id": "T003", "name": "Pumpkin Patch", "date": "2024-10-20",
         "location": "Hill Farm", "grade_levels": "1-2", "description": "Harvest festival"},
    ],
    "counselor_appointments": [],
}


class FakeRecordStore:
    """In-memory stand-in for AirtableStore.

    Evaluates the same Filter objects the real store renders to formulas,
    and renders each one too so every filter used is known to be valid.
    """

    def __init__(self, tables=None):
        self.tables = {}
        self.counter = 0
        self.calls = []
        self.fail_create = False
        for table, rows in (tables or {}).items():
            for fields in rows:
                self.add(table, copy.deepcopy(fields))

    def add(self, table, fields):
        self.counter += 1
        record = Record(id=f"rec{self.counter:05d}", fields=fields,
                        created_time="2024-01-01T00:00:00.000Z")
        self.tables.setdefault(table, []).append(record)
        return record

    def find(self, table, filter=None, max_records=None, sort=None, fields=None):
        formula = filter.render() if filter is not None else None
        self.calls.append(("find", table, formula, max_records, sort))
        rows = [r for r in self.tables.get(table, [])
                if filter is None or filter.matches(r.fields)]
        for sort_field, direction in reversed(sort or []):
            rows.sort(key=lambda r: str(r.fields.get(sort_field, "")),
                      reverse=direction == "desc")
        if max_records:
            rows = rows[:max_records]
        if fields:
            rows = [Record(r.id, {k: v for k, v in r.fields.items() if k in fields}, r.created_time)
                    for r in rows]
        return [Record(r.id, dict(r.fields), r.created_time) for r in rows]

    def create(self, table, fields):
        self.calls.append(("create", table, dict(fields)))
        if self.fail_create:
            return None
        return self.add(table, dict(fields))

    def rows(self, table):
        return [r.fields for r in self.tables.get(table, [])]


class FakeTwilioClient:
    """Records every provider call instead of talking to Twilio."""

    def __init__(self):
        self.account_sid = "ACtest"
        self.messages = []
        self.call_updates = []
        self.interactions = []
        self.users = {}
        self.fail_interaction = False

    def send_message(self, to, from_, body):
        self.messages.append({"to": to, "from": from_, "body": body})
        return f"SM{len(self.messages):032d}"

    def update_call(self, call_sid, twiml):
        self.call_updates.append({"call_sid": call_sid, "twiml": twiml})
        return {"sid": call_sid}

    def create_interaction(self, channel, routing):
        from school_assistant.errors import ProviderError
        if self.fail_interaction:
            raise ProviderError()
        self.interactions.append({"channel": channel, "routing": routing})
        return {"sid": f"KD{len(self.interactions):032d}"}

    def fetch_conversation_user(self, identity):
        from school_assistant.errors import ProviderError
        if identity not in self.users:
            raise ProviderError()
        return {"identity": identity, "friendly_name": self.users[identity]}


TEST_ENV = {
    "AIRTABLE_API_KEY": "keyTest",
    "AIRTABLE_BASE_ID": "appTest",
    "TWILIO_ACCOUNT_SID": "ACtest",
    "TWILIO_AUTH_TOKEN": "token",
    "TWILIO_PHONE_NUMBER": "+15550001111",
    "FLEX_WORKFLOW_SID": "WWtest",
    "FLEX_WORKSPACE_SID": "WStest",
    "STUDIO_FLOW_SID": "FWtest",
}


@pytest.fixture
def store():
    """A fake record store seeded with two families and a guardian with no students."""
    return FakeRecordStore(SEED)


@pytest.fixture
def twilio():
    return FakeTwilioClient()


@pytest.fixture
def env(monkeypatch):
    """Full configuration in the environment."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    return TEST_ENV


@pytest.fixture
def app(monkeypatch, env, store, twilio):
    """Flask app wired to the fakes."""
    from school_assistant.app import create_app
    # Route handlers still go through get_record_store / get_twilio_client,
    # which build these fakes instead of real clients
    monkeypatch.setattr(record_store, "_store", None)
    monkeypatch.setattr(record_store, "AirtableStore", lambda *args, **kwargs: store)
    monkeypatch.setattr(messaging, "_client", None)
    monkeypatch.setattr(messaging, "TwilioClient", lambda *args, **kwargs: twilio)
    app = create_app(load_env=False)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
