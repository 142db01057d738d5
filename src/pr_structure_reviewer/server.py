"""
HTTP Server

Flask application exposing the webhook receiver, manual analysis and
health endpoints.
"""

import logging
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from . import __version__
from .api import StructureReviewerAPI
from .config import AppConfig
from .github.webhook import EVENT_HEADER, SIGNATURE_HEADER


logger = logging.getLogger(__name__)

ENDPOINTS = {
    'webhook': 'POST /webhook',
    'analyze': 'POST /analyze',
    'health': 'GET /health',
}


def create_app(
    api: Optional[StructureReviewerAPI] = None,
    config: Optional[AppConfig] = None,
) -> Flask:
    """
    Create the Flask application.

    Args:
        api: Reviewer API instance (default: built from config)
        config: Application configuration (default: from environment)

    Returns:
        Configured Flask app
    """
    reviewer_api = api or StructureReviewerAPI(config=config)

    app = Flask(__name__)
    CORS(app)
    app.extensions['structure_reviewer'] = reviewer_api

    @app.route('/', methods=['GET'])
    def index():
        """Service information."""
        return jsonify({
            'service': 'pr-structure-reviewer',
            'version': __version__,
            'endpoints': ENDPOINTS,
        })

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify(reviewer_api.get_system_health())

    @app.route('/webhook', methods=['POST'])
    def webhook():
        """GitHub webhook receiver."""
        try:
            status, body = reviewer_api.handle_webhook(
                event_type=request.headers.get(EVENT_HEADER),
                raw_body=request.get_data(),
                signature=request.headers.get(SIGNATURE_HEADER),
            )
        except Exception as e:
            logger.exception(f"Webhook handling error: {e}")
            return jsonify({'error': 'Internal server error'}), 500

        return jsonify(body), status

    @app.route('/analyze', methods=['POST'])
    def analyze():
        """Manual analysis of a pull request or a local directory."""
        data = request.get_json(silent=True)
        status, body = reviewer_api.analyze(data)
        return jsonify(body), status

    return app
