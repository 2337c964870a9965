"""
config.py
----------
Central configuration for the ZKP authentication server and client.
This file holds constants, paths, and session settings.

Every value can be overridden with a ZKP_AUTH_<NAME> environment variable.
"""

import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _env(name, default):
    return os.environ.get(f"ZKP_AUTH_{name}", default)


# ===============================
# Server Configuration
# ===============================
HOST = _env("HOST", "127.0.0.1")
PORT = int(_env("PORT", "8080"))
SERVER_URL = _env("SERVER_URL", f"http://{HOST}:{PORT}")

# ===============================
# Group Parameters
# ===============================
GROUP_BITS = int(_env("GROUP_BITS", "1024"))  # 1024 or 2048

# ===============================
# Storage Configuration
# ===============================
STORAGE_BACKEND = _env("STORAGE_BACKEND", "memory")  # memory | sqlite
DB_PATH = _env("DB_PATH", os.path.join(BASE_DIR, "zkp_auth.db"))

# ===============================
# Challenge/Session Settings
# ===============================
CHALLENGE_TTL = int(_env("CHALLENGE_TTL", "30"))  # seconds
MAX_SESSIONS = int(_env("MAX_SESSIONS", "10000"))
MAX_SESSIONS_PER_USER = int(_env("MAX_SESSIONS_PER_USER", "8"))
MAX_USER_ID_LENGTH = 256
AUTH_ID_BYTES = 16
SESSION_TOKEN_BYTES = 32

# ===============================
# Client Settings
# ===============================
SECRET_DIR = _env("SECRET_DIR", os.getcwd())
REQUEST_TIMEOUT = float(_env("REQUEST_TIMEOUT", "10"))

LOG_LEVEL = _env("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
