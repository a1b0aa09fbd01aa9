import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # JWT Configuration
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'jwt-secret-key-change-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_TOKEN_LOCATION = ['headers']
    JWT_HEADER_NAME = 'Authorization'
    JWT_HEADER_TYPE = 'Bearer'
    
    # Store connection pool; pool_timeout bounds how long a call waits for a connection
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 280,
        'pool_timeout': int(os.getenv('DB_POOL_TIMEOUT', 10)),
    }
    
    # WhatsApp relay used to notify matched users outside the app
    WHATSAPP_RELAY_URL = os.getenv('WHATSAPP_RELAY_URL')
    WHATSAPP_RELAY_TOKEN = os.getenv('WHATSAPP_RELAY_TOKEN')
    WHATSAPP_RELAY_TIMEOUT = float(os.getenv('WHATSAPP_RELAY_TIMEOUT', 5))
    MATCH_NOTIFICATIONS_ENABLED = os.getenv('MATCH_NOTIFICATIONS_ENABLED', 'True') == 'True'
    
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:3000')
    
    RATELIMIT_ENABLED = True
    
    CORS_ORIGINS = [
        os.getenv('FRONTEND_URL', 'http://localhost:3000'),
        'http://localhost:5001',
        'http://127.0.0.1:5001',
    ]


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'sqlite:///matchmaking.db')
    SQLALCHEMY_ECHO = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI')
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SQLALCHEMY_ECHO = False
    RATELIMIT_ENABLED = False
    MATCH_NOTIFICATIONS_ENABLED = False
    WHATSAPP_RELAY_URL = None


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
