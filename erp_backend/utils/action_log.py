"""
Holiday-action logging: writes which client changed which holiday to the application log.
Use this so logs show e.g. "HOLIDAY_CREATED holiday_id=4 name='Republic Day'".
"""
import logging
from typing import Any, Optional

from fastapi import Request

ACTION_LOGGER = logging.getLogger("erp.actions")


def _client_context(request: Optional[Request]) -> str:
    """Caller IP (first X-Forwarded-For hop when proxied) and user agent."""
    if request is None:
        return "internal"
    forwarded = request.headers.get("x-forwarded-for")
    client_ip = forwarded.split(",")[0].strip() if forwarded else None
    if not client_ip and request.client:
        client_ip = request.client.host

    parts = []
    if client_ip:
        parts.append(f"ip={client_ip}")
    user_agent = request.headers.get("user-agent")
    if user_agent:
        parts.append(f"agent={user_agent!r}")
    return " | ".join(parts) if parts else "anonymous"


def log_holiday_action(action: str, request: Optional[Request] = None, **details: Any) -> None:
    """
    Log a holiday write to the application log (logs/app.log and console).

    Example:
        log_holiday_action("HOLIDAY_CREATED", request, holiday_id=4, name="Republic Day")
    """
    extra_parts = [f"{k}={v!r}" if isinstance(v, str) else f"{k}={v}" for k, v in details.items()]
    extra = " " + " ".join(extra_parts) if extra_parts else ""
    ACTION_LOGGER.info(f"HOLIDAY_ACTION | {_client_context(request)} | {action}{extra}")
