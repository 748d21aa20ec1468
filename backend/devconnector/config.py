import os
from pathlib import Path
from dotenv import load_dotenv

# Override=True so changes in backend/.env take effect on process reload (and not get
# stuck on old environment variables).
#
# For automated tests (SQLite), we need to prevent backend/.env from overriding the
# test DATABASE_URL. Set DISABLE_DOTENV=1 to skip loading .env.
if os.getenv("DISABLE_DOTENV") != "1":
    load_dotenv(override=True)

_raw_database_url = (os.getenv("DATABASE_URL") or "").strip()
# Default to a local SQLite DB for dev so the backend can start out-of-the-box.
# Use an absolute path so it works regardless of current working directory.
_default_sqlite_path = (Path(__file__).resolve().parent.parent / "dev.db").as_posix()
DATABASE_URL = _raw_database_url or f"sqlite:///{_default_sqlite_path}"

# Auth / JWT
# NOTE: keep a default for local dev so the server can boot even if SECRET_KEY isn't set.
SECRET_KEY = os.getenv("SECRET_KEY") or "dev_secret_change_me"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10") or "10")

# GitHub repo listing (GET /profile/github/{username}).
# Client credentials are optional; without them GitHub applies the anonymous rate limit.
GITHUB_CLIENT_ID = os.getenv("GITHUB_CLIENT_ID") or ""
GITHUB_CLIENT_SECRET = os.getenv("GITHUB_CLIENT_SECRET") or ""
GITHUB_API_BASE_URL = os.getenv("GITHUB_API_BASE_URL") or "https://api.github.com"
GITHUB_TIMEOUT_S = float(os.getenv("GITHUB_TIMEOUT_S", "10") or "10")

# Server
PORT = int(os.getenv("PORT", "5000") or "5000")
LOG_LEVEL = (os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()
