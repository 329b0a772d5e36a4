from __future__ import annotations

import logging
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from shopeasy.app.config import Config
from shopeasy.app.extensions import checkout_tokens, cors, gateway
from shopeasy.app.common.errors import ErrorPayload
from shopeasy.app.common.request_context import REQUEST_ID_HEADER, init_request_id
from shopeasy.app.state import save_storefront
from shopeasy.app.cli import cli_bp
from shopeasy.modules.cart.model import format_amount
from shopeasy.modules.auth.routes import bp as auth_bp
from shopeasy.modules.cart.routes import bp as cart_bp
from shopeasy.modules.catalog.routes import bp as catalog_bp, home
from shopeasy.modules.checkout.routes import bp as checkout_bp


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__, static_folder="static", template_folder="templates")
    app.config.from_object(config_object)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    # Extensions
    gateway.init_app(app)
    checkout_tokens.init_app(app)
    cors.init_app(app, resources={r"/health": {"origins": app.config.get("CORS_ORIGINS") or "*"}})

    # Request id
    @app.before_request
    def _before_request():
        init_request_id()

    @app.after_request
    def _after_request(response):
        rid = getattr(g, "request_id", None)
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response

    # Persist cart/checkout back into the session cookie
    app.after_request(save_storefront)

    app.add_template_filter(format_amount, "money")

    # Health endpoint (for Docker/load balancers)
    @app.get("/health")
    def health():
        return {"status": "healthy", "service": "frontend"}, 200

    # Storefront pages
    app.register_blueprint(auth_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(checkout_bp)

    # CLI (flask check-api)
    app.register_blueprint(cli_bp)

    # Error handlers
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        # Client-side routing fallback: any GET without a GET route gets the entry document
        if err.code in (404, 405) and request.method == "GET":
            return home(), 200

        payload = ErrorPayload(
            status_code=err.code or 500,
            code="http_error",
            message=err.description or err.name,
            details={"name": err.name},
        )
        return jsonify(payload.to_dict(getattr(g, "request_id", None))), payload.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception")
        payload = ErrorPayload(status_code=500, code="internal_error", message="Internal server error")
        return jsonify(payload.to_dict(getattr(g, "request_id", None))), 500

    return app
