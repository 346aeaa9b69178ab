import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    APP_BASE_URL = data.get("APP_BASE_URL", "http://localhost:3000")
    EMAIL_BACKEND = data.get("EMAIL_BACKEND", "log")
    EMAIL_API_URL = data.get("EMAIL_API_URL", "https://api.brevo.com/v3/smtp/email")
    EMAIL_API_KEY = data.get("EMAIL_API_KEY", "")
    EMAIL_FROM = data.get("EMAIL_FROM", "no-reply@example.com")
    EMAIL_TIMEOUT_SECONDS = float(data.get("EMAIL_TIMEOUT_SECONDS", 10))
