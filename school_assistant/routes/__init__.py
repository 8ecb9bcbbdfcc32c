"""
School Assistant Routes
=======================

Route blueprints for the webhook service.

Usage:
    from school_assistant.routes import register_routes
    register_routes(app)
"""
from .assistant_routes import assistant_bp
from .tool_routes import tools_bp


def register_routes(app):
    """Register all route blueprints with the Flask app."""
    app.register_blueprint(assistant_bp)
    app.register_blueprint(tools_bp)


__all__ = [
    'register_routes',
    'assistant_bp',
    'tools_bp',
]
