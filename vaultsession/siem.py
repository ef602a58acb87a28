"""SIEM-compatible security event logging.

Provides structured JSON logging for session events (unlock attempts,
vault mutations), suitable for ingestion by SIEM platforms.

Events are written one JSON object per line through a rotating file
handler. Secrets and credential contents are never logged; only event
types, statuses and identifiers.
"""

import json
import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler
from threading import Lock
from typing import Optional

from vaultsession import config


_siem_logger = logging.getLogger("vaultsession.siem")
_configure_lock = Lock()
_configured_path: Optional[str] = None


def _configure_logging() -> None:
    """Attach the rotating JSONL handler on first use.

    Reconfigures if ``config.SIEM_LOG_FILE`` changed since the last call.
    """
    global _configured_path
    with _configure_lock:
        if _configured_path == config.SIEM_LOG_FILE:
            return

        for handler in list(_siem_logger.handlers):
            _siem_logger.removeHandler(handler)
            handler.close()

        log_dir = os.path.dirname(config.SIEM_LOG_FILE)
        if log_dir:
            os.makedirs(log_dir, mode=0o700, exist_ok=True)

        handler = RotatingFileHandler(
            config.SIEM_LOG_FILE,
            maxBytes=config.SIEM_LOG_MAX_BYTES,
            backupCount=config.SIEM_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

        _siem_logger.setLevel(logging.INFO)
        _siem_logger.addHandler(handler)
        _siem_logger.propagate = False
        _configured_path = config.SIEM_LOG_FILE


def log_siem_event(
    event_type: str,
    status: str,
    username: str = "master",
    details: Optional[dict] = None
) -> None:
    """Log event in JSON format suitable for SIEM tools.

    Args:
        event_type: Type of security event (e.g., 'unlock_attempt', 'credential_added')
        status: Event status (e.g., 'SUCCESS', 'FAILURE')
        username: User identifier
        details: Optional additional event details
    """
    _configure_logging()

    event = {
        "timestamp": datetime.now().isoformat(),
        "event_type": event_type,
        "status": status,
        "username": username,
        "source": "vault_session",
    }
    if details:
        event["details"] = details

    _siem_logger.info(json.dumps(event))


def log_unlock_attempt(success: bool, mode: str, reason: Optional[str] = None) -> None:
    """Record an unlock or vault initialization attempt.

    Args:
        success: Whether the attempt succeeded
        mode: 'first_run' or 'returning_user'
        reason: Failure reason, if any
    """
    details = {"mode": mode}
    if reason:
        details["reason"] = reason
    log_siem_event("unlock_attempt", "SUCCESS" if success else "FAILURE", details=details)


def get_siem_events(limit: int = 100) -> list[dict]:
    """Read the most recent security events.

    Args:
        limit: Maximum number of events to return

    Returns:
        List of event dictionaries, oldest first
    """
    if not os.path.exists(config.SIEM_LOG_FILE):
        return []

    events = []
    with open(config.SIEM_LOG_FILE, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                events.append(json.loads(line))
            except json.JSONDecodeError:
                continue
    return events[-limit:]
