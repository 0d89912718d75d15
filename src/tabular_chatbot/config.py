from __future__ import annotations

import logging
import os

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Tabular Chatbot"
APP_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("TABULAR_CHATBOT_LOG_LEVEL", "INFO").strip().upper() or "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# ---------------------------------------------------------------------------
# Assistants
#
# "tips"  -> hair tips / nutrition tips / leg exercises
# "salon" -> show clients
# ---------------------------------------------------------------------------

DEFAULT_ASSISTANT = os.getenv("TABULAR_CHATBOT_DEFAULT_ASSISTANT", "tips").strip().lower() or "tips"

# ---------------------------------------------------------------------------
# Client seed data
#
# Optional local CSV file that replaces the built-in six-row block. It is a
# build-time seed input, read once when the client dataset is constructed.
# ---------------------------------------------------------------------------

CLIENTS_CSV_PATH = os.getenv("TABULAR_CHATBOT_CLIENTS_CSV_PATH", "").strip()


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging once for the app process.

    Streamlit re-runs the script on every interaction, so this is a no-op
    when handlers are already installed.
    """
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level or LOG_LEVEL)
        return
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
