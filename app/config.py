import os

SECRET_KEY = os.environ.get("SECRET_KEY", "TU_SECRET_KEY_TEMPORAL")
ALGORITHM = os.environ.get("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = float(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./synergy.db")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", 8000))
