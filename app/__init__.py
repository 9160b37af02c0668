"""
Echo
Flask Application Factory.

Usage:
    from app import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os
import traceback

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from app.auth import init_auth
from app.config import config
from app.core.exceptions import ApiError, ConflictError, NotFoundError, ValidationError
from app.middleware.jwt_auth import init_jwt_middleware
from app.middleware.logging_config import configure_logging
from app.middleware.rate_limiter import init_rate_limits
from app.middleware.security_headers import init_security_headers
from app.middleware.tenant_context import init_tenant_context
from app.middleware.timing import init_request_timing
from app.models import db
from app.utils.errors import E, api_error

logger = logging.getLogger(__name__)


# ── SQLite FK enforcement (global engine event) ─────────────────────────
# ON DELETE SET NULL / CASCADE on goals, initiatives and customers rely on it.
@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit, applied per-blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),  # Redis in production, memory for dev
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])
    app.json.sort_keys = False

    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///") and \
            ":memory:" not in app.config["SQLALCHEMY_DATABASE_URI"]:
        os.makedirs(app.instance_path, exist_ok=True)

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()],
             expose_headers=["X-Total-Count", "X-Request-ID"])
    else:
        CORS(app, expose_headers=["X-Total-Count", "X-Request-ID"])

    # ── Request timing + request id (first before_request hook) ─────────
    init_request_timing(app)

    # ── CSRF mitigation (Content-Type enforcement) ──────────────────────
    init_auth(app)

    # ── Security headers ─────────────────────────────────────────────────
    init_security_headers(app)

    # ── JWT auth middleware (decodes Bearer token into g.jwt_*) ──────────
    init_jwt_middleware(app)

    # ── Tenant context middleware (sets g.tenant from JWT) ───────────────
    init_tenant_context(app)

    # ── Request guards (input length) ────────────────────────────────────
    app.config.setdefault("MAX_CONTENT_LENGTH", 2 * 1024 * 1024)  # 2 MB

    # ── Import all models so Alembic can detect them ─────────────────────
    from app.models import auth as _auth_models         # noqa: F401
    from app.models import comment as _comment_models   # noqa: F401
    from app.models import product as _product_models   # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ────────────────────────
    with app.app_context():
        try:
            db.create_all()
            app.logger.info("db.create_all() completed successfully")
        except SQLAlchemyError as e:
            app.logger.warning("db.create_all() failed: %s", e)

    # ── Blueprints ───────────────────────────────────────────────────────
    from app.blueprints.auth_bp import auth_bp
    from app.blueprints.comment_bp import comment_bp
    from app.blueprints.customer_bp import customer_bp
    from app.blueprints.dashboard_bp import dashboard_bp
    from app.blueprints.feedback_bp import feedback_bp
    from app.blueprints.goal_bp import goal_bp
    from app.blueprints.health_bp import health_bp
    from app.blueprints.idea_bp import idea_bp
    from app.blueprints.initiative_bp import initiative_bp
    from app.blueprints.users_bp import users_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(goal_bp)
    app.register_blueprint(initiative_bp)
    app.register_blueprint(customer_bp)
    app.register_blueprint(feedback_bp)
    app.register_blueprint(idea_bp)
    app.register_blueprint(comment_bp)
    app.register_blueprint(dashboard_bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-demo")
    def seed_demo_cmd():
        """Seed the demo.com tenant with users and a sample portfolio."""
        from app.services.seed_service import DEMO_PASSWORD, seed_demo
        result = seed_demo()
        logger.info(
            "Demo tenant ready (id=%s): admin@demo.com / user@demo.com, password %s. "
            "%s new users, portfolio %s.",
            result["tenant_id"], DEMO_PASSWORD, result["users_created"],
            "created" if result["portfolio_created"] else "unchanged",
        )

    # ── Error handlers ───────────────────────────────────────────────────
    _register_error_handlers(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app


def _register_error_handlers(app):
    """Map service exceptions and HTTP errors to JSON bodies."""

    @app.errorhandler(ApiError)
    def _api_error(e):
        body = {"error": e.message}
        if e.data is not None:
            body["data"] = e.data
        if app.debug:
            body["stack"] = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        if e.status_code >= 500:
            logger.error("API error %s: %s", e.status_code, e.message, exc_info=e)
        return jsonify(body), e.status_code

    @app.errorhandler(NotFoundError)
    def _not_found_error(e):
        logger.debug("Not found: %s", e)
        return api_error(E.NOT_FOUND, f"{e.resource} not found")

    @app.errorhandler(ValidationError)
    def _validation_error(e):
        return api_error(E.VALIDATION_INVALID, str(e), details=e.details)

    @app.errorhandler(ConflictError)
    def _conflict_error(e):
        return api_error(E.CONFLICT_DUPLICATE, f"{e.resource} conflicts with an existing record")

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found", "path": request.path}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({"error": "Too many requests", "retry_after": e.description}), 429

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def server_error(e):
        db.session.rollback()
        logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=e)
        body = {"error": "Internal server error"}
        if app.debug:
            body["stack"] = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        return jsonify(body), 500
