import os

from utils.promotion import DEFAULT_CURRICULUM


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'secret-key-goes-here')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///rollover.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    DEFAULT_SCHOOL_ID = 1
    SUPERADMIN_ID = 'ADM001'
    SUPERADMIN_USERNAME = 'SuperAdmin'
    SUPERADMIN_PASSWORD = os.environ.get('SUPERADMIN_PASSWORD', 'Password123')

    # Stage -> grade levels, in promotion order
    CURRICULUM_STAGES = DEFAULT_CURRICULUM

    ROLLOVER_DEFAULT_SECTION = 'A'
    ROLLOVER_DEFAULT_CAPACITY = 30
    ROLLOVER_DEFAULT_THRESHOLD = 50
    ROLLOVER_TOKEN_MAX_AGE = 30 * 60  # seconds a preview stays committable


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = 'DEBUG'
