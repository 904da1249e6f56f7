"""Local state storage: access token, chosen fork and edit-mode flag.

Everything lives in one JSON file (~/.open-authoring/state.json by default)
so the fork choice and credentials survive restarts.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from open_authoring import config


def state_path() -> Path:
    return config.settings.state_path or Path.home() / ".open-authoring" / "state.json"


def read_state(path: Path | None = None) -> dict[str, Any]:
    p = path or state_path()
    if not p.exists():
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def write_state(data: dict[str, Any], path: Path | None = None) -> None:
    p = path or state_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _update(key: str, value: Any, path: Path | None) -> None:
    """Set or remove a single key, deleting the file once it is empty."""
    data = read_state(path)
    if value is None:
        data.pop(key, None)
    else:
        data[key] = value
    if not data:
        p = path or state_path()
        if p.exists():
            p.unlink()
        return
    write_state(data, path)


# --- Access token ---


def get_access_token(path: Path | None = None) -> str | None:
    token = str(read_state(path).get("access_token", "")).strip()
    return token or None


def set_access_token(token: str, path: Path | None = None) -> None:
    _update("access_token", token.strip() or None, path)


def clear_access_token(path: Path | None = None) -> None:
    _update("access_token", None, path)


# --- Fork name ---


def get_fork_name(path: Path | None = None) -> str | None:
    name = str(read_state(path).get("fork_name", "")).strip()
    return name or None


def set_fork_name(name: str | None, path: Path | None = None) -> None:
    """Store the fork's full name; an empty name clears it."""
    _update("fork_name", (name or "").strip() or None, path)


# --- Edit mode ---


def is_edit_mode(path: Path | None = None) -> bool:
    return read_state(path).get("edit_mode") is True


def set_edit_mode(enabled: bool, path: Path | None = None) -> None:
    _update("edit_mode", True if enabled else None, path)
