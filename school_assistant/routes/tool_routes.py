"""
Tool Webhook Routes
===================
One route per assistant tool. Each handler reads its arguments through
ToolRequest, calls the matching service, and returns the response envelope:

    {"status": <code>, "message": "...", <payload key>: ...}

The HTTP status of the response mirrors the envelope status.
"""
import functools
import logging

from flask import Blueprint, jsonify, request

from school_assistant.config import get_config
from school_assistant.errors import InvalidRequest, ToolError, UnexpectedError
from school_assistant.services import (
    absences, counselor, field_trips, guardians, handoff, messaging,
    notifications, record_store,
)
from school_assistant.tool_request import ToolRequest

tools_bp = Blueprint('tools', __name__, url_prefix='/tools')
logger = logging.getLogger(__name__)

METHODS = ['GET', 'POST']


def _respond(envelope):
    return jsonify(envelope), envelope.get("status", 200)


def tool_endpoint(fn):
    """Run a tool handler and turn any failure into an envelope."""
    @functools.wraps(fn)
    def wrapper():
        try:
            return _respond(fn(ToolRequest.from_flask(request)))
        except ToolError as e:
            if e.status >= 500:
                logger.error("%s failed: %s", fn.__name__, e.message)
            return _respond(e.to_response())
        except Exception:
            logger.exception("Unexpected error in %s", fn.__name__)
            return _respond(UnexpectedError().to_response())
    return wrapper


@tools_bp.route('/guardian-authentication', methods=METHODS)
@tool_endpoint
def guardian_authentication(req):
    store = record_store.get_record_store()
    return guardians.authenticate_guardian(store, req.identity, req.get("pin"))


@tools_bp.route('/student-lookup', methods=METHODS)
@tool_endpoint
def student_lookup(req):
    store = record_store.get_record_store()
    return guardians.lookup_students(store, req.identity)


@tools_bp.route('/absence-lookup', methods=METHODS)
@tool_endpoint
def absence_lookup(req):
    store = record_store.get_record_store()
    return absences.lookup_absences(
        store, req.identity,
        start_date=req.get("x-start-date", "x-start-date", "startDate", "start_date"),
        end_date=req.get("x-end-date", "x-end-date", "endDate", "end_date"),
    )


@tools_bp.route('/report-absence', methods=METHODS)
@tool_endpoint
def report_absence(req):
    store = record_store.get_record_store()
    return absences.report_absence(
        store, req.identity,
        student_name=req.get(None, "student_name"),
        date=req.get(None, "date"),
        reason=req.get(None, "reason"),
    )


@tools_bp.route('/field-trip-info', methods=METHODS)
@tool_endpoint
def field_trip_info(req):
    store = record_store.get_record_store()
    return field_trips.lookup_field_trips(
        store, req.identity,
        trip_id=req.get("x-trip-id", "x-trip-id", "tripId", "trip_id"),
    )


@tools_bp.route('/schedule-counselor-conference', methods=METHODS)
@tool_endpoint
def schedule_counselor_conference(req):
    values = {name: req.get(None, name) for name in counselor.REQUIRED_FIELDS}
    # Field check comes before config so callers see what they left out
    counselor.check_required(values)
    store = record_store.get_record_store()
    return counselor.schedule_conference(store, **values)


@tools_bp.route('/send-sms', methods=METHODS)
@tool_endpoint
def send_sms(req):
    config = get_config().require("twilio_account_sid", "twilio_auth_token", "twilio_phone_number")
    client = messaging.get_twilio_client()
    return notifications.send_sms(
        client, config.twilio_phone_number, req.identity,
        message=req.get(None, "message"),
    )


@tools_bp.route('/send-to-flex', methods=METHODS)
@tool_endpoint
def send_to_flex(req):
    session_id = req.get("x-session-id")
    if not session_id:
        raise InvalidRequest()

    config = get_config()
    if session_id.startswith(handoff.VOICE_PREFIX):
        config.require("twilio_account_sid", "studio_flow_sid")
        client = messaging.get_twilio_client()
        redirect_url = handoff.studio_return_url(config.twilio_account_sid, config.studio_flow_sid)
        return handoff.forward_call(client, session_id, redirect_url)

    workflow_sid = req.get(None, "FlexWorkflowSid") or config.flex_workflow_sid
    workspace_sid = req.get(None, "FlexWorkspaceSid") or config.flex_workspace_sid
    handoff.require_routing(workflow_sid, workspace_sid)
    client = messaging.get_twilio_client()
    return handoff.create_flex_interaction(client, session_id, req.identity, workflow_sid, workspace_sid)
