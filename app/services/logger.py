import json
from datetime import datetime

from app.core.config import settings


def log_debug(event: str, data: dict):
    """
    Logs structured debug info if enabled.
    """
    if not settings.AI_DEBUG_MODE:
        return

    entry = {
        "timestamp": datetime.now().isoformat(),
        "event": event,
        "data": data
    }

    # Console only; Cloud Logging picks stdout up in deployment.
    print(f"\n[DEBUG] {event}:")
    print(json.dumps(entry, indent=2, default=str))


def log_warning(message: str, exc: Exception | None = None):
    if exc is not None:
        print(f"[WARN] {message}:", repr(exc))
    else:
        print(f"[WARN] {message}")
