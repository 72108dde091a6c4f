from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = "wsl_exec.json"


def config_path() -> str:
    return os.getenv("WSL_EXEC_CONFIG") or DEFAULT_CONFIG_PATH


@lru_cache(maxsize=1)
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    load_dotenv()
    p = Path(path or config_path())
    if not p.exists():
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _get(cfg: Dict[str, Any], *path: str, default: Any = None) -> Any:
    cur: Any = cfg
    for k in path:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def _optional_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        n = float(value)
    except Exception:
        return None
    if n != n or n <= 0:
        return None
    return n


def wsl_executable() -> str:
    # An empty string means "no WSL hop": the shell is launched directly.
    env = os.getenv("WSL_EXEC_EXECUTABLE")
    if env is not None:
        return env.strip()
    cfg = load_config()
    return str(_get(cfg, "wsl", "executable", default="wsl.exe") or "").strip()


def wsl_shell() -> str:
    env = os.getenv("WSL_EXEC_SHELL")
    if env:
        return env.strip()
    cfg = load_config()
    return str(_get(cfg, "wsl", "shell", default="bash") or "bash")


def default_timeout_ms() -> Optional[int]:
    cfg = load_config()
    n = _optional_number(_get(cfg, "wsl", "default_timeout_ms", default=None))
    return int(n) if n is not None else None


def confirmation_ttl_s() -> Optional[float]:
    cfg = load_config()
    return _optional_number(_get(cfg, "confirmations", "ttl_s", default=None))


def server_host() -> str:
    cfg = load_config()
    return str(_get(cfg, "server", "host", default="127.0.0.1"))


def server_port() -> int:
    cfg = load_config()
    try:
        return int(_get(cfg, "server", "port", default=3337))
    except Exception:
        return 3337


def log_level() -> str:
    cfg = load_config()
    v = _get(cfg, "logs", "level", default="INFO")
    return str(v or "INFO").upper()
