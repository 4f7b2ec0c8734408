"""
Application configuration
All settings are read once from the environment (and an optional .env file)
"""

import os
from dotenv import load_dotenv

load_dotenv()

# MongoDB
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "meal-optimizer")
MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your-super-secret-jwt-key-change-in-production")
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_TIME_HOURS = int(os.getenv("JWT_EXPIRATION_TIME_HOURS", str(24 * 30)))

# AI agent service (meal-plan and insight generation)
AI_AGENT_SERVICE_URL = os.getenv("AI_AGENT_SERVICE_URL", "http://localhost:8000")
# Generation can take a while because the agent also fetches images and videos
AI_AGENT_TIMEOUT_SECONDS = float(os.getenv("AI_AGENT_TIMEOUT_SECONDS", "120"))

ENVIRONMENT = os.getenv("ENVIRONMENT", "production").lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin for origin in [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:5174",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:5174",
        os.getenv("FRONTEND_URL"),
    ] if origin
]


def is_development() -> bool:
    """Raw upstream payloads and exception text are only exposed in development"""
    return ENVIRONMENT in ("development", "dev", "local")
