import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

# "json" for log shippers, "console" for local development
LOG_FORMAT = os.getenv("LOG_FORMAT", "console" if DEBUG else "json").lower()

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

# Applied as statement_timeout on PostgreSQL and as the lock wait on SQLite
DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "5000"))

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS", "*")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",")
]

JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    raise ValueError("JWT_SECRET must be set in the environment")

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_TTL_HOURS = int(os.getenv("ACCESS_TOKEN_TTL_HOURS", "24"))

# bcrypt work factor; the test-suite lowers it to keep hashing fast
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
PASSWORD_RESET_TTL_MINUTES = int(os.getenv("PASSWORD_RESET_TTL_MINUTES", "60"))
# Development only: return reset tokens in the API response instead of mailing them
RESET_TOKEN_IN_RESPONSE = os.getenv("RESET_TOKEN_IN_RESPONSE", "false").lower() == "true"

PUSH_ENABLED = os.getenv("PUSH_ENABLED", "false").lower() == "true"
PUSH_API_URL = os.getenv("PUSH_API_URL", "https://exp.host/--/api/v2/push/send")
