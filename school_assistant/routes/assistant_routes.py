"""
Assistant Routes
================
Service metadata: health check and the tool/knowledge descriptors to
register with the conversational assistant.
"""
from flask import Blueprint, jsonify, request

from school_assistant.assistant_config import KNOWLEDGE_SOURCES, tool_definitions
from school_assistant.config import get_config

assistant_bp = Blueprint('assistant', __name__)


@assistant_bp.route('/health', methods=['GET'])
def health():
    return "ok", 200, {"Content-Type": "text/plain"}


@assistant_bp.route('/assistant/config', methods=['GET'])
def assistant_config():
    """Tool and knowledge descriptors with tool URLs on this host.

    Pass ?domain=example.com to build URLs for a different public host.
    """
    domain = request.args.get("domain") or request.host
    return jsonify({
        "tools": tool_definitions(domain),
        "knowledge": KNOWLEDGE_SOURCES,
        "configuration": get_config().to_dict(),
    })
