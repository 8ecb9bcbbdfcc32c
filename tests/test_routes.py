"""
Test: Tool webhook routes end to end through the Flask test client.
"""
from school_assistant.services import guardians

PARENT = {"x-identity": "email:parent@example.com"}
PARENT_PHONE = {"x-identity": "phone:+15551234567"}


class TestEnvelope:
    def test_guardian_not_found(self, client):
        resp = client.get("/tools/student-lookup", headers={"x-identity": "email:nobody@example.com"})
        assert resp.status_code == 404
        assert resp.get_json() == {"status": 404, "message": "Guardian not found."}

    def test_missing_identity(self, client):
        resp = client.get("/tools/student-lookup")
        assert resp.status_code == 400
        assert resp.get_json()["message"].startswith("Missing x-identity header")

    def test_invalid_identity(self, client):
        resp = client.get("/tools/student-lookup", headers={"x-identity": "Email:x"})
        assert resp.get_json()["message"].startswith("Invalid x-identity format")

    def test_missing_config_before_store(self, client, monkeypatch, store):
        monkeypatch.delenv("AIRTABLE_BASE_ID")
        resp = client.get("/tools/student-lookup", headers=PARENT_PHONE)
        assert resp.status_code == 500
        assert resp.get_json() == {
            "status": 500,
            "message": "Airtable configuration error. Please check environment variables.",
        }
        assert store.calls == []

    def test_unexpected_error_is_generic(self, client, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("database password is hunter2")
        monkeypatch.setattr(guardians, "find_guardian", explode)
        resp = client.get("/tools/student-lookup", headers=PARENT)
        assert resp.status_code == 500
        assert resp.get_json() == {
            "status": 500,
            "message": "An unexpected error occurred. Please try again later.",
        }
        assert "hunter2" not in resp.get_data(as_text=True)


class TestGuardianAuthentication:
    def test_header_pin(self, client):
        resp = client.get("/tools/guardian-authentication", headers={**PARENT, "pin": '"1234"'})
        assert resp.status_code == 200
        assert resp.get_json()["guardian"]["guardian_id"] == "G001"

    def test_query_pin(self, client):
        resp = client.get("/tools/guardian-authentication?pin=1234", headers=PARENT)
        assert resp.get_json()["status"] == 200

    def test_body_pin(self, client):
        resp = client.post("/tools/guardian-authentication", headers=PARENT, json={"pin": 1234})
        assert resp.get_json()["status"] == 200

    def test_header_wins_over_body(self, client):
        resp = client.post("/tools/guardian-authentication",
                           headers={**PARENT, "pin": "0000"}, json={"pin": "1234"})
        assert resp.status_code == 401

    def test_missing_pin(self, client):
        resp = client.get("/tools/guardian-authentication", headers=PARENT)
        assert resp.status_code == 400
        assert resp.get_json()["message"].startswith("Missing PIN")

    def test_legacy_identity_param(self, client):
        resp = client.get("/tools/guardian-authentication?x-identity=phone:%2B15551234567&pin=1234")
        assert resp.get_json()["guardian"]["email"] == "parent@example.com"


class TestStudentLookup:
    def test_two_students(self, client):
        resp = client.get("/tools/student-lookup", headers=PARENT_PHONE)
        data = resp.get_json()
        assert data["status"] == 200
        assert sorted(s["student_id"] for s in data["students"]) == ["S001", "S002"]

    def test_no_students(self, client):
        resp = client.get("/tools/student-lookup", headers={"x-identity": "email:nokids@example.com"})
        assert resp.get_json() == {"status": 404, "message": "No students found for this guardian."}


class TestAbsenceLookup:
    def test_date_range_headers(self, client):
        resp = client.get("/tools/absence-lookup", headers={
            **PARENT, "x-start-date": "2024-01-01", "x-end-date": "2024-04-30"})
        data = resp.get_json()
        assert data["status"] == 200
        assert data["total"] == 1
        assert data["absences"][0]["status"] == "approved"

    def test_date_range_params(self, client):
        resp = client.get("/tools/absence-lookup?start_date=2024-05-01&end_date=2024-05-31", headers=PARENT)
        data = resp.get_json()
        assert data["total"] == 1
        assert data["absences"][0]["status"] == "pending"

    def test_sorted_descending(self, client):
        data = client.get("/tools/absence-lookup", headers=PARENT).get_json()
        dates = [a["date"] for a in data["absences"]]
        assert dates == sorted(dates, reverse=True)

    def test_bad_date(self, client):
        resp = client.get("/tools/absence-lookup", headers={
            **PARENT, "x-start-date": "2024/01/01", "x-end-date": "2024-12-31"})
        assert resp.get_json() == {"status": 400, "message": "Invalid date format. Please use YYYY-MM-DD format."}


class TestReportAbsence:
    def test_json_body(self, client, store):
        resp = client.post("/tools/report-absence", headers=PARENT, json={
            "student_name": "Jim Doe", "date": "2024-06-03", "reason": "Fever"})
        data = resp.get_json()
        assert data["status"] == 200
        assert data["absence"]["student_id"] == "S002"
        assert data["absence"]["status"] == "pending"

    def test_form_body(self, client):
        resp = client.post("/tools/report-absence", headers=PARENT, data={
            "student_name": "Jane Doe", "date": "2024-06-03", "reason": "Sick"})
        assert resp.get_json()["absence"]["student_id"] == "S001"

    def test_crafted_name_cannot_reach_other_family(self, client, store):
        resp = client.post("/tools/report-absence", headers=PARENT, json={
            "student_name": "Ann Roe'),TRUE()", "date": "2024-06-03", "reason": "x"})
        assert resp.get_json()["status"] in (400, 404)
        assert not any(c[0] == "create" for c in store.calls)

    def test_missing_fields(self, client):
        resp = client.post("/tools/report-absence", headers=PARENT, json={"student_name": "Jane Doe"})
        assert resp.status_code == 400


class TestFieldTripInfo:
    def test_by_guardian(self, client):
        data = client.get("/tools/field-trip-info", headers=PARENT).get_json()
        assert [t["name"] for t in data["field_trips"]] == ["Museum Visit"]

    def test_by_trip_id(self, client):
        data = client.get("/tools/field-trip-info", headers={**PARENT, "x-trip-id": "T002"}).get_json()
        assert [t["name"] for t in data["field_trips"]] == ["Zoo Day"]

    def test_trip_not_found(self, client):
        resp = client.get("/tools/field-trip-info?trip_id=T404", headers=PARENT)
        assert resp.get_json() == {"status": 404, "message": "Field trip not found."}


class TestScheduleCounselorConference:
    def test_schedules_without_identity(self, client):
        resp = client.post("/tools/schedule-counselor-conference", json={
            "student_name": "Jane Doe", "preferred_date": "2024-04-02",
            "preferred_time": "morning", "reason": "Course planning"})
        data = resp.get_json()
        assert data["status"] == 200
        assert data["appointment"]["status"] == "scheduled"

    def test_missing_fields_checked_before_config(self, client, monkeypatch):
        monkeypatch.delenv("AIRTABLE_API_KEY")
        resp = client.post("/tools/schedule-counselor-conference", json={"student_name": "Jane Doe"})
        assert resp.get_json() == {
            "status": 400,
            "message": "Missing required fields: preferred_date, preferred_time, reason",
        }


class TestSendSms:
    def test_sends(self, client, twilio):
        resp = client.post("/tools/send-sms", headers=PARENT_PHONE, json={"message": "Reminder"})
        data = resp.get_json()
        assert data["status"] == 200
        assert data["sid"].startswith("SM")
        assert twilio.messages[0]["from"] == "+15550001111"

    def test_email_identity(self, client, twilio):
        resp = client.post("/tools/send-sms", headers=PARENT)
        assert resp.status_code == 400
        assert resp.get_json()["message"].startswith("SMS can only be sent to phone numbers")
        assert twilio.messages == []

    def test_missing_sender(self, client, monkeypatch, twilio):
        monkeypatch.delenv("TWILIO_PHONE_NUMBER")
        resp = client.post("/tools/send-sms", headers=PARENT_PHONE, json={"message": "Hi"})
        assert resp.status_code == 500
        assert resp.get_json()["message"].startswith("Twilio configuration error")
        assert twilio.messages == []


class TestSendToFlex:
    def test_voice(self, client, twilio):
        resp = client.post("/tools/send-to-flex", headers={"x-session-id": "voice:CA123/abc"})
        assert resp.get_json() == {"status": 200, "message": "Call forwarded"}
        assert twilio.call_updates[0]["call_sid"] == "CA123"
        assert "Accounts/ACtest/Flows/FWtest" in twilio.call_updates[0]["twiml"]

    def test_conversation(self, client, twilio):
        resp = client.post("/tools/send-to-flex", headers={
            "x-session-id": "conversations__IS1/CH2", "x-identity": "phone:+15551234567"})
        assert resp.get_json() == {"status": 200, "message": "Transferred to human agent"}
        assert twilio.interactions[0]["channel"]["type"] == "sms"
        assert twilio.interactions[0]["routing"]["properties"]["workflow_sid"] == "WWtest"

    def test_workflow_override(self, client, twilio):
        client.post("/tools/send-to-flex?FlexWorkflowSid=WWother", headers={
            "x-session-id": "conversations__IS1/CH2", "x-identity": "whatsapp:+15551234567"})
        assert twilio.interactions[0]["routing"]["properties"]["workflow_sid"] == "WWother"

    def test_missing_workspace(self, client, monkeypatch, twilio):
        monkeypatch.delenv("FLEX_WORKSPACE_SID")
        resp = client.post("/tools/send-to-flex", headers={
            "x-session-id": "conversations__IS1/CH2", "x-identity": "phone:+15551234567"})
        assert resp.status_code == 500
        assert twilio.interactions == []

    def test_missing_session(self, client):
        resp = client.post("/tools/send-to-flex", headers={"x-identity": "phone:+15551234567"})
        assert resp.get_json() == {"status": 400, "message": "Invalid request"}

    def test_handoff_failure(self, client, twilio):
        twilio.fail_interaction = True
        resp = client.post("/tools/send-to-flex", headers={
            "x-session-id": "conversations__IS1/CH2", "x-identity": "phone:+15551234567"})
        assert resp.get_json() == {"status": 500, "message": "Failed to hand over to a human agent"}
