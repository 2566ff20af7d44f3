# judging/__init__.py
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from judging.config import Config
from judging.exceptions import JudgingError
from judging.extension.extensions import db, socketio

jwt = JWTManager()  # global instance


def _register_jwt_errors():
    # every token problem is a 403 with an {error} body
    @jwt.unauthorized_loader
    def _missing_token(reason):
        return jsonify({"error": "No token"}), 403

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return jsonify({"error": "Unauthorized"}), 403

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Token expired"}), 403


def _register_error_handlers(app):
    @app.errorhandler(JudgingError)
    def _judging_error(e):
        if e.status_code >= 500:
            app.logger.error(f"{request.method} {request.path} failed: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def _not_found(e):
        app.logger.info(f"404 Not Found: {request.method} {request.path}")
        return jsonify({"ok": False, "error": "API Endpoint Not Found"}), 404

    @app.errorhandler(Exception)
    def _server_error(e):
        if isinstance(e, HTTPException):
            return jsonify({"ok": False, "error": e.description}), e.code
        app.logger.exception(f"Server Error: {request.method} {request.path}")
        db.session.rollback()
        return jsonify({"ok": False, "error": str(e) or "Internal Server Error"}), 500


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    log_level = app.config.get("LOG_LEVEL", "INFO")
    logging.basicConfig(level=log_level)
    app.logger.setLevel(log_level)

    jwt.init_app(app)
    _register_jwt_errors()

    # Extensions
    CORS(app)
    db.init_app(app)
    Migrate(app, db)
    socketio.init_app(app, cors_allowed_origins="*")

    @app.before_request
    def _log_request():
        app.logger.info(f"{request.method} {request.path}")

    # Import blueprints AFTER extensions are inited to avoid premature current_app usage
    from judging import models  # noqa: F401
    from judging.controllers.auth_controller import bp_auth
    from judging.controllers.data_controller import bp_data
    from judging.controllers.project_controller import bp_projects
    from judging.controllers.evaluator_controller import bp_evaluators
    from judging.controllers.panel_controller import bp_panels
    from judging.controllers.result_controller import bp_results
    from judging.controllers.evaluator_portal_controller import bp_portal
    from judging.controllers.admin_controller import bp_admin
    from judging.controllers.score_controller import bp_scores, bp_export
    from judging.commands import register_commands

    # Register blueprints
    app.register_blueprint(bp_auth)
    app.register_blueprint(bp_data)
    app.register_blueprint(bp_projects)
    app.register_blueprint(bp_evaluators)
    app.register_blueprint(bp_panels)
    app.register_blueprint(bp_results)
    app.register_blueprint(bp_portal)
    app.register_blueprint(bp_admin)
    app.register_blueprint(bp_scores)
    app.register_blueprint(bp_export)

    _register_error_handlers(app)
    register_commands(app)

    return app
