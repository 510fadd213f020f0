# /gradeflow/config.py

"""
Process-wide settings, read once from the environment at import time.
The defaults are suitable for local development against SQLite.
"""

import os

# --- Persistence ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./gradeflow.db")

# --- Notifications ---
# The engine only builds notification payloads; this is the "from" address
# stamped on them for whichever mail collaborator dispatches them.
NOTIFICATION_SENDER_EMAIL = os.getenv("NOTIFICATION_SENDER_EMAIL", "no-reply@gradeflow.local")

# --- Logging ---
LOG_LEVEL = os.getenv("GRADEFLOW_LOG_LEVEL", "INFO").upper()

# --- Request Layer ---
# Authentication is handled upstream. When no acting user is forwarded in the
# X-User-Id header, mutations are stamped with this identity.
DEFAULT_ACTOR_ID = os.getenv("GRADEFLOW_DEFAULT_ACTOR_ID", "user_v1_demo")
