#!/usr/bin/env python3
"""
School Assistant Tools - Webhook Service
========================================
Run: python3 -m school_assistant.app
Then point the assistant's tools at: http://localhost:3000/tools/<tool>
"""
import logging
import os

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from school_assistant import config as app_config
from school_assistant.routes import register_routes

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level=None):
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def create_app(load_env=True):
    """Build the Flask app with every tool route registered."""
    if load_env:
        _root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        load_dotenv(os.path.join(_root_dir, '.env'))
    setup_logging()

    app = Flask(__name__)
    app.json.sort_keys = False
    CORS(app)
    register_routes(app)
    return app


if __name__ == '__main__':
    app = create_app()
    # .env is loaded by now, so re-read server settings
    app.run(
        host=os.getenv("HOST", app_config.HOST),
        port=int(os.getenv("PORT", app_config.PORT)),
        debug=app_config.DEBUG,
    )
