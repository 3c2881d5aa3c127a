# planner/auth.py
# Thin layer over supabase-py's GoTrue client. One anon client per process so
# the session survives between calls.
from __future__ import annotations
from typing import Any, Callable, Optional

from supabase import Client

from . import db
from .errors import ConfigError, ErrorType, PlannerError, map_supabase_error

_auth_client: Optional[Client] = None


def _sb() -> Client:
    global _auth_client
    if _auth_client is None:
        _auth_client = db._client(service=False)
        if _auth_client is None:
            raise ConfigError("Supabase auth is not configured (set SUPABASE_URL and SUPABASE_ANON_KEY).")
    return _auth_client


def _auth_error(e: Exception) -> PlannerError:
    err = map_supabase_error(e)
    if err.type is ErrorType.UNKNOWN:
        err.type = ErrorType.AUTHENTICATION
    return err


def login(email: str, password: str) -> Any:
    client = _sb()
    try:
        res = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        raise _auth_error(e) from e
    return res.user


def register(email: str, password: str, name: Optional[str] = None) -> Any:
    creds: dict = {"email": email, "password": password}
    if name:
        creds["options"] = {"data": {"name": name}}
    client = _sb()
    try:
        res = client.auth.sign_up(creds)
    except Exception as e:
        raise _auth_error(e) from e
    return res.user


def login_with_provider(provider: str, redirect_to: Optional[str] = None) -> str:
    """Returns the URL the user has to open to finish the OAuth flow."""
    creds: dict = {"provider": provider}
    if redirect_to:
        creds["options"] = {"redirect_to": redirect_to}
    client = _sb()
    try:
        res = client.auth.sign_in_with_oauth(creds)
    except Exception as e:
        raise _auth_error(e) from e
    return res.url


def sign_out() -> None:
    client = _sb()
    try:
        client.auth.sign_out()
    except Exception as e:
        raise _auth_error(e) from e


def current_user() -> Optional[Any]:
    client = _sb()
    try:
        res = client.auth.get_user()
    except Exception as e:
        raise _auth_error(e) from e
    return res.user if res else None


def on_auth_change(callback: Callable[[str, Any], None]) -> Any:
    """callback(event, session) on sign-in / sign-out / refresh. Returns the subscription."""
    return _sb().auth.on_auth_state_change(callback)


def display_name(user: Any) -> str:
    meta = getattr(user, "user_metadata", None) or {}
    return meta.get("name") or meta.get("full_name") or getattr(user, "email", None) or "Teacher"
