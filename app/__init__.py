"""
Flask Application Factory
"""

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from config import config
from extensions import db, migrate, jwt, cors, limiter
from app.errors import EngineError
from app import models  # noqa: F401
import os


def create_app(config_name=None):
    """Application factory pattern"""
    
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')
    
    app = Flask(__name__)
    
    # Load configuration
    app.config.from_object(config[config_name])
    app.logger.setLevel(os.getenv('LOG_LEVEL', 'DEBUG' if app.debug else 'INFO'))
    
    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    cors.init_app(app, resources={
        r"/api/*": {
            "origins": app.config['CORS_ORIGINS'],
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }
    })
    limiter.init_app(app)
    
    # Register blueprints
    register_blueprints(app)
    
    # Register error handlers
    register_error_handlers(app)
    
    # Create database tables
    with app.app_context():
        db.create_all()

    return app


def register_blueprints(app):
    """Register Flask blueprints"""
    from app.api.interactions import interactions_bp
    from app.api.messaging import messaging_bp

    # API v1
    app.register_blueprint(interactions_bp, url_prefix='/api/interactions')
    app.register_blueprint(messaging_bp, url_prefix='/api/messaging')
    
    # Health check endpoint
    @app.route('/health')
    def health_check():
        return jsonify({'status': 'healthy', 'message': 'API is running'}), 200


def register_error_handlers(app):
    """Register error handlers"""
    
    @app.errorhandler(EngineError)
    def engine_error(error):
        if error.status_code >= 500:
            db.session.rollback()
        return jsonify(error.to_dict()), error.status_code
    
    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'success': False, 'error': error.name, 'message': error.description}), error.code
    
    @app.errorhandler(Exception)
    def handle_exception(error):
        db.session.rollback()
        app.logger.error(f'Unhandled exception: {str(error)}')
        return jsonify({'success': False, 'error': 'Internal Server Error', 'message': 'An unexpected error occurred'}), 500
    
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'success': False, 'error': 'not_authenticated', 'message': reason}), 401
