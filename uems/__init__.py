from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv
import os
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException
from uems.extensions import db, migrate, jwt
from uems.exceptions import EventManagementError
from uems.utils.email import mail
from datetime import timedelta
import logging

# Load environment variables
load_dotenv()


def create_app(config_overrides=None):
    app = Flask(__name__)

    # Set testing mode from environment variable
    app.config["TESTING"] = os.getenv("FLASK_ENV") in ["development", "testing"]

    # Configure logging
    logging.basicConfig(level=logging.INFO)
    app.logger.setLevel(logging.INFO)

    # Configure database
    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv(
        "DATABASE_URL", "postgresql://localhost/UEMS"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # Configure JWT
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET_KEY", "your-secret-key")
    app.config["JWT_ACCESS_TOKEN_DAYS"] = int(os.getenv("JWT_ACCESS_TOKEN_DAYS", 30))
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(
        days=app.config["JWT_ACCESS_TOKEN_DAYS"]
    )
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_HEADER_NAME"] = "Authorization"
    app.config["JWT_HEADER_TYPE"] = "Bearer"

    # Email configuration
    app.config["MAIL_SERVER"] = os.getenv("MAIL_SERVER")
    app.config["MAIL_PORT"] = int(os.getenv("MAIL_PORT", 587))
    app.config["MAIL_USE_TLS"] = os.getenv("MAIL_USE_TLS", "true").lower() in ["true", "1", "t"]
    app.config["MAIL_USERNAME"] = os.getenv("MAIL_USERNAME")
    app.config["MAIL_PASSWORD"] = os.getenv("MAIL_PASSWORD")
    app.config["CLIENT_URL"] = os.getenv("CLIENT_URL", "http://localhost:3000")
    app.config["SERVER_URL"] = os.getenv("SERVER_URL", "http://localhost:5000")

    app.config["RATELIMIT_ENABLED"] = os.getenv("RATELIMIT_ENABLED", "true").lower() in [
        "true",
        "1",
        "t",
    ]

    if config_overrides:
        app.config.update(config_overrides)

    # Implement rate limiting using flask-limiter
    Limiter(
        get_remote_address,
        app=app,
        default_limits=["150 per minute, 10000 per hour, 100000 per day"],
        storage_uri=os.getenv("LIMITER_STORAGE_URL", "memory://"),
        strategy="fixed-window",
    )

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)

    register_error_handlers(app)

    # Register blueprints
    from uems.routes.auth_routes import auth_bp
    from uems.routes.proposal_routes import proposal_bp
    from uems.routes.event_routes import event_bp
    from uems.routes.admin_routes import admin_bp
    from uems.routes.notification_routes import notification_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(proposal_bp, url_prefix="/api/events/proposals")
    app.register_blueprint(event_bp, url_prefix="/api/events")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.register_blueprint(notification_bp, url_prefix="/api/notifications")

    # Set up CORS
    cors_origins = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    ).split(",")
    app.logger.info(f"Initializing CORS with origins: {cors_origins}")

    CORS(
        app,
        resources={
            r"/api/*": {"origins": cors_origins},
        },
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
        expose_headers=["Content-Type"],
    )

    @app.route("/api/health", methods=["GET"])
    def health_check():
        return jsonify({"success": True, "message": "UEMS API is running"}), 200

    return app


def register_error_handlers(app):
    @app.errorhandler(EventManagementError)
    def handle_event_management_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"success": False, "message": "Route not found", "error": "NOT_FOUND"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return (
            jsonify({"success": False, "message": "Method not allowed", "error": "METHOD_NOT_ALLOWED"}),
            405,
        )

    @app.errorhandler(429)
    def handle_rate_limited(e):
        return (
            jsonify({"success": False, "message": "Too many requests", "error": "RATE_LIMITED"}),
            429,
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        if isinstance(e, HTTPException):
            return (
                jsonify({"success": False, "message": e.description, "error": e.name.upper().replace(" ", "_")}),
                e.code,
            )
        db.session.rollback()
        app.logger.exception(f"Unhandled error: {e}")
        return (
            jsonify({"success": False, "message": "Internal server error", "error": "SERVER_ERROR"}),
            500,
        )

    def _token_error(message):
        return jsonify({"success": False, "message": message, "error": "UNAUTHENTICATED"}), 401

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _token_error("No token, authorization denied")

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _token_error("Token is not valid")

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return _token_error("Token has expired")
