import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///mealhub.db")

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "600 per hour")

    ACCESS_EXPIRES = int(os.getenv("ACCESS_EXPIRES", 86400))
    REFRESH_EXPIRES = int(os.getenv("REFRESH_EXPIRES", 86400 * 7))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # flat rate credited to an assignment per generated subscription order
    SUBSCRIPTION_UNIT_PRICE = float(os.getenv("SUBSCRIPTION_UNIT_PRICE", 50))
    SUBSCRIPTION_RESUME_MONTHS = int(os.getenv("SUBSCRIPTION_RESUME_MONTHS", 1))
    # widest startDate..endDate window a single generation call may cover
    SUBSCRIPTION_MAX_GENERATION_DAYS = int(os.getenv("SUBSCRIPTION_MAX_GENERATION_DAYS", 92))

    MAX_ACTIVE_ASSIGNMENTS_PER_USER = 3
    MAX_ACTIVE_ASSIGNMENTS_PER_CHEF = 10

class DevelopmentConfig(Config):
    DEBUG = True

class ProductionConfig(Config):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = (
        f"{os.getenv('DATABASE_URL')}"
        f"?sslmode={os.getenv('DB_SSLMODE', 'require')}"
    )

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    RATELIMIT_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    LOG_LEVEL = "DEBUG"

CONFIGS = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
