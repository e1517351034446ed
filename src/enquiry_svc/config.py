import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Basic configuration loaded from environment with safe defaults for development
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./enquiries.db")

# Security / JWT configuration
# SECRET_KEY should be overridden in production via environment
SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
try:
    # 7 days
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))
except Exception as e:
    logging.error(e, exc_info=True)
    ACCESS_TOKEN_EXPIRE_MINUTES = 10080

# Pagination defaults for list endpoints
try:
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
except Exception as e:
    logging.error(e, exc_info=True)
    DEFAULT_PAGE_SIZE = 10

try:
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "100"))
except Exception as e:
    logging.error(e, exc_info=True)
    MAX_PAGE_SIZE = 100

# Comma separated list of allowed CORS origins
CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

HOST: str = os.getenv("HOST", "0.0.0.0")
try:
    PORT: int = int(os.getenv("PORT", "8000"))
except Exception as e:
    logging.error(e, exc_info=True)
    PORT = 8000
