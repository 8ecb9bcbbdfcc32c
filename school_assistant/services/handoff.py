"""
Human Handoff
=============
Send to Flex tool: move the conversation from the assistant to a human
agent.

    x-session-id: voice:CAxxxx/...             -> redirect the live call
    x-session-id: conversations__ISxxxx/CHxxxx -> create a Flex interaction
"""
import logging
from xml.sax.saxutils import escape

from school_assistant.errors import (
    ConfigurationError, HandoffFailed, InvalidRequest, ToolError,
)

logger = logging.getLogger(__name__)

VOICE_PREFIX = "voice:"
CONVERSATIONS_PREFIX = "conversations__"
HOLD_MESSAGE = "One second while we connect you"


def studio_return_url(account_sid, flow_sid):
    return (f"https://webhooks.twilio.com/v1/Accounts/{account_sid}"
            f"/Flows/{flow_sid}?FlowEvent=return")


def redirect_twiml(redirect_url):
    return (f"<Response><Say>{escape(HOLD_MESSAGE)}</Say>"
            f"<Redirect>{escape(redirect_url)}</Redirect></Response>")


def forward_call(client, session_id, redirect_url):
    """Hand a voice call back to the Studio flow that routes to an agent."""
    call_sid = session_id[len(VOICE_PREFIX):].split("/")[0]
    if not call_sid:
        raise InvalidRequest()
    logger.info("Forwarding call %s", call_sid)
    client.update_call(call_sid, redirect_twiml(redirect_url))
    return {"status": 200, "message": "Call forwarded"}


def parse_session(session_id):
    """conversations__ISxxx/CHxxx -> ("ISxxx", "CHxxx"); missing parts are ""."""
    session = (session_id or "").replace(CONVERSATIONS_PREFIX, "", 1)
    service_sid, _, conversation_sid = session.partition("/")
    return service_sid, conversation_sid.split("/")[0]


def parse_identity(identity_header):
    """whatsapp:+1555... -> ("whatsapp", "+1555..."); no colon -> ("", "")."""
    trait, _, value = (identity_header or "").partition(":")
    return trait, value.split(":")[0].strip()


def classify_customer(client, trait, identity):
    """Work out channel type and the customer attributes for the task.

    Returns (channel_type, from, customer_name, customer_address).
    """
    if trait == "whatsapp":
        address = f"whatsapp:{identity}"
        return "whatsapp", address, address, address
    if identity.startswith("+"):
        return "sms", identity, identity, identity
    if identity.startswith("FX"):
        # Flex web chat user; show their display name to the agent if we can
        display = identity
        try:
            user = client.fetch_conversation_user(identity)
            display = user.get("friendly_name") or identity
        except ToolError as e:
            logger.warning("Could not fetch chat user %s: %s", identity, e)
        return "web", display, identity, identity
    return "chat", identity, identity, identity


def require_routing(workflow_sid, workspace_sid):
    if not workflow_sid or not workspace_sid:
        raise ConfigurationError("Missing configuration for FLEX_WORKSPACE_SID OR FLEX_WORKFLOW_SID")


def create_flex_interaction(client, session_id, identity_header, workflow_sid, workspace_sid):
    require_routing(workflow_sid, workspace_sid)

    _, conversation_sid = parse_session(session_id)
    trait, identity = parse_identity(identity_header)
    if not identity or not conversation_sid:
        raise InvalidRequest()

    channel_type, from_, customer_name, customer_address = classify_customer(client, trait, identity)
    channel = {
        "type": channel_type,
        "initiated_by": "customer",
        "properties": {"media_channel_sid": conversation_sid},
    }
    routing = {
        "properties": {
            "workspace_sid": workspace_sid,
            "workflow_sid": workflow_sid,
            "task_channel_unique_name": "chat",
            "attributes": {
                "from": from_,
                "customerName": customer_name,
                "customerAddress": customer_address,
            },
        },
    }
    try:
        result = client.create_interaction(channel, routing)
    except ToolError as e:
        logger.error("Flex interaction failed for %s: %s", conversation_sid, e)
        raise HandoffFailed()

    logger.info("Created Flex interaction %s (%s)", result.get("sid"), channel_type)
    return {"status": 200, "message": "Transferred to human agent"}
