# planner/errors.py
from __future__ import annotations
from enum import Enum
from typing import Any, Optional

import httpx
import requests


class ErrorType(str, Enum):
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    NETWORK = "network"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


class PlannerError(RuntimeError):
    def __init__(self, type: ErrorType, message: str, code: Optional[str] = None, original: Any = None):
        super().__init__(message)
        self.type = type
        self.message = message
        self.code = code
        self.original = original

    def __str__(self) -> str:
        suffix = f" ({self.code})" if self.code else ""
        return f"[{self.type.value}] {self.message}{suffix}"


class ConfigError(PlannerError):
    def __init__(self, message: str):
        super().__init__(ErrorType.VALIDATION, message)


def map_supabase_error(exc: BaseException) -> PlannerError:
    """
    Turn whatever supabase-py / postgrest / gotrue raised into a PlannerError.
    supabase-py talks over httpx; requests errors come from the Discord notifier.
    """
    if isinstance(exc, PlannerError):
        return exc
    code = getattr(exc, "code", None)
    code = str(code) if code else None
    msg = str(getattr(exc, "message", None) or exc) or "An unexpected error occurred."

    if "already registered" in msg or code == "user_already_exists":
        return PlannerError(ErrorType.AUTHENTICATION, "This email is already registered. Please sign in instead.", code, exc)
    if "Invalid login credentials" in msg or code == "invalid_credentials":
        return PlannerError(ErrorType.AUTHENTICATION, "Invalid email or password. Please try again.", code, exc)
    if code and (code.startswith("PGRST") or code == "42P01"):
        return PlannerError(ErrorType.DATABASE, "Database error. Please try again later.", code, exc)
    if isinstance(exc, (httpx.TransportError, requests.ConnectionError, requests.Timeout, ConnectionError, TimeoutError)) or "network" in msg.lower():
        return PlannerError(ErrorType.NETWORK, "Network error. Please check your internet connection.", code, exc)
    return PlannerError(ErrorType.UNKNOWN, msg, code, exc)
