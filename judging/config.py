import os
from datetime import timedelta

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "DEV")
    DEBUG = os.getenv("FLASK_DEBUG", "0") == "1"

    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URI",
        "postgresql://postgres:postgres@db:5432/judging_db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,   # test connection before use
        "pool_recycle": 1800,    # recycle every 30min
        "pool_size": 5,
        "max_overflow": 10
    }

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Tokens
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ALGORITHM = "HS256"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_HOURS", "24")))

    # Seed credentials for the settings row created on first start
    DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
    DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

    # Panels
    PANEL_MIN_EVALUATORS = int(os.getenv("PANEL_MIN_EVALUATORS", "3"))
    PANEL_MIN_PROJECTS = int(os.getenv("PANEL_MIN_PROJECTS", "2"))
    PANEL_CONFLICT_POLICY = os.getenv("PANEL_CONFLICT_POLICY", "warn")  # 'warn' | 'block'

    # Rankings
    RANKING_MAX_POINTS_MODE = os.getenv("RANKING_MAX_POINTS_MODE", "flat")  # 'flat' | 'rubric'
    RANKING_FLAT_ITEM_MAX = int(os.getenv("RANKING_FLAT_ITEM_MAX", "10"))
    RANKING_HIGHLIGHT_COUNT = int(os.getenv("RANKING_HIGHLIGHT_COUNT", "5"))


class TestConfig(Config):
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    DEFAULT_ADMIN_EMAIL = "admin@example.com"
    DEFAULT_ADMIN_PASSWORD = "admin123"
    PANEL_CONFLICT_POLICY = "warn"
    RANKING_MAX_POINTS_MODE = "flat"
