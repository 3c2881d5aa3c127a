# planner/notifier.py
from __future__ import annotations
import json
import os
from typing import Any, Dict, List, Optional

import requests

DRY_RUN = os.getenv("DRY_RUN", "true").lower() == "true"
WEBHOOK = os.getenv("DISCORD_WEBHOOK_URL")
WEBHOOK_LOG = os.getenv("DISCORD_WEBHOOK_LOG_URL")

# Discord rejects message content over 2000 chars
MAX_CONTENT = 2000


def _chunks(content: str) -> List[str]:
    if len(content) <= MAX_CONTENT:
        return [content]
    out: List[str] = []
    buf = ""
    for line in content.splitlines(keepends=True):
        while len(line) > MAX_CONTENT:
            if buf:
                out.append(buf)
                buf = ""
            out.append(line[:MAX_CONTENT])
            line = line[MAX_CONTENT:]
        if len(buf) + len(line) > MAX_CONTENT:
            out.append(buf)
            buf = ""
        buf += line
    if buf:
        out.append(buf)
    return out


def _post(url: str, payload: Dict[str, Any]) -> bool:
    if DRY_RUN:
        print("[DRY_RUN] Discord payload:", json.dumps(payload, ensure_ascii=False))
        return True
    try:
        r = requests.post(url, json=payload, timeout=15)
        return r.status_code in (200, 204)
    except requests.RequestException as e:
        print("[notifier] Discord error:", e)
        return False


def _deliver(url: Optional[str], content: str, embed: Optional[Dict[str, Any]]) -> bool:
    if not url and not DRY_RUN:
        print("[notifier] no webhook configured.")
        return False
    ok = True
    parts = _chunks(content)
    for i, part in enumerate(parts):
        payload: Dict[str, Any] = {"content": part}
        if embed and i == len(parts) - 1:
            payload["embeds"] = [embed]
        ok = _post(url or "", payload) and ok
    return ok


def send(content: str, embed: Optional[Dict[str, Any]] = None) -> bool:
    return _deliver(WEBHOOK, content, embed)


def log(content: str, embed: Optional[Dict[str, Any]] = None) -> bool:
    return _deliver(WEBHOOK_LOG or WEBHOOK, content, embed)
