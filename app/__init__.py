from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from app.extensions import db, migrate, jwt
from config import Config



def create_app(config_class=Config, blob_store=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    CORS(app) # Enable CORS for all routes

    from app import models  # noqa: F401  register tables with the metadata

    from app.services import init_services
    init_services(app, blob_store=blob_store)

    # Register Blueprints
    from app.api import api_bp
    from app.api.bookings import bookings_bp
    from app.api.admin import admin_bp
    from app.api.notifications import notifications_bp
    app.register_blueprint(api_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(notifications_bp)

    from app.db_init.cli import register_commands
    register_commands(app)

    @app.errorhandler(RequestEntityTooLarge)
    def file_too_large(e):
        from app.utils.api_response import APIResponse
        limit_mb = app.config['MAX_CONTENT_LENGTH'] / 1024 / 1024
        return APIResponse.error(f"Upload too large. Maximum {limit_mb:.1f} MB", status_code=413)

    return app
