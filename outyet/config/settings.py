"""Unified config: server listen address, poll period/timeout, version and change URL.

Defaults: loaded from config.yaml.example next to this module (single source of truth, no code-level defaults).
"""

import math
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

_EXAMPLE_PATH = Path(__file__).resolve().parent / "config.yaml.example"
_DEFAULT_CONFIG_PATH = "config/config.yaml"

# Lazy-loaded example config (single source of truth for defaults)
_EXAMPLE_CONFIG: Optional[Dict[str, Any]] = None

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def _load_example_config() -> Dict[str, Any]:
    """Load config.yaml.example as defaults. No code-level defaults."""
    global _EXAMPLE_CONFIG
    if _EXAMPLE_CONFIG is None:
        with open(_EXAMPLE_PATH, encoding="utf-8") as f:
            _EXAMPLE_CONFIG = yaml.safe_load(f) or {}
    return _EXAMPLE_CONFIG


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base. Override values take precedence."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _merged_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Merge config with example so missing keys come from config file."""
    return _deep_merge(_load_example_config(), cfg)


def read_config(config_path: Optional[str] = None) -> Tuple[dict, str]:
    """Load YAML config (path, else $OUTYET_CONFIG, else ./config/config.yaml). Returns (config, resolved_path).

    Falls back to the packaged config.yaml.example when the file does not exist.
    """
    config_path = config_path or os.environ.get("OUTYET_CONFIG", _DEFAULT_CONFIG_PATH)
    if not Path(config_path).exists():
        config_path = str(_EXAMPLE_PATH)
    config_path = str(Path(config_path).resolve())
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    return config, config_path


def parse_duration(value: Union[str, int, float]) -> float:
    """Seconds from a number or a duration string ("250ms", "5s", "1m30s", "2h").

    A bare number (or numeric string) is seconds. Raises ValueError on anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"invalid duration: {value!r}")
        return float(value)
    s = str(value).strip()
    if not s:
        raise ValueError("invalid duration: empty string")
    sign = 1.0
    if s[0] in "+-":
        sign = -1.0 if s[0] == "-" else 1.0
        s = s[1:]
    try:
        seconds = float(s)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ValueError(f"invalid duration: {value!r}")
        return sign * seconds
    total = 0.0
    pos = 0
    for m in _DURATION_PART.finditer(s):
        if m.start() != pos:
            raise ValueError(f"invalid duration: {value!r}")
        total += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()
    if pos != len(s) or pos == 0:
        raise ValueError(f"invalid duration: {value!r}")
    return sign * total


def parse_listen_address(addr: str) -> Tuple[str, int]:
    """Split "host:port" or ":port" into (host, port). Empty host means all interfaces."""
    host, sep, port = str(addr).strip().rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address: {addr!r} (expected host:port or :port)")
    return (host.strip("[]") or "0.0.0.0"), int(port)


def change_url(version: str, base_change_url: str) -> str:
    """URL of the go<version> tag in the change log, e.g. .../go/+/go1.9.0."""
    version = (version or "").strip()
    if not version:
        raise ValueError("version must be a non-empty string")
    return f"{base_change_url}go{version}"


def get_server_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return server config (host, port). Missing values from config.yaml.example."""
    merged = _merged_config(config or {})
    server = merged.get("server") or {}
    return {
        "host": server.get("host"),
        "port": int(server.get("port")),
    }


def get_poll_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Return poll config as a flat dict for PollTarget / HttpProber.

    Keys: version, url (change URL for version), period and timeout (seconds, float).
    Missing values from the packaged config.yaml.example.
    """
    merged = _merged_config(config or {})
    poll = merged.get("poll") or {}
    version = str(merged.get("version") or "")
    return {
        "version": version,
        "url": change_url(version, poll.get("base_change_url") or ""),
        "period": parse_duration(poll.get("period")),
        "timeout": parse_duration(poll.get("timeout")),
    }
