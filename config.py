"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

MODE_DIRECT = "direct"
MODE_PROXY = "proxy"
ANALYZER_MODES = (MODE_DIRECT, MODE_PROXY)

DEFAULT_PROXY_URL = "http://localhost:8787"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_REQUEST_TIMEOUT_S = 120.0
DEFAULT_LOG_LEVEL = "INFO"
API_KEY_ENV = "GEMINI_API_KEY"


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "woofwhisper" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_api_key(self) -> str:
        data = self._read_all()
        return str(data.get("api_key", "")) or os.getenv(API_KEY_ENV, "")

    def set_api_key(self, key: str) -> None:
        data = self._read_all()
        data["api_key"] = key
        self._write_all(data)

    def get_mode(self) -> str:
        data = self._read_all()
        mode = data.get("mode", MODE_DIRECT)
        if mode not in ANALYZER_MODES:
            logger.warning("Unknown analyzer mode %r in config, using %s", mode, MODE_DIRECT)
            return MODE_DIRECT
        return mode

    def set_mode(self, mode: str) -> None:
        if mode not in ANALYZER_MODES:
            raise ValueError(f"unknown analyzer mode: {mode!r}")
        data = self._read_all()
        data["mode"] = mode
        self._write_all(data)

    def get_proxy_url(self) -> str:
        data = self._read_all()
        return str(data.get("proxy_url", DEFAULT_PROXY_URL))

    def set_proxy_url(self, url: str) -> None:
        data = self._read_all()
        data["proxy_url"] = url.strip()
        self._write_all(data)

    def get_model(self) -> str:
        data = self._read_all()
        return str(data.get("model", DEFAULT_MODEL))

    def get_request_timeout_s(self) -> float:
        data = self._read_all()
        try:
            return float(data.get("request_timeout_s", DEFAULT_REQUEST_TIMEOUT_S))
        except (TypeError, ValueError):
            return DEFAULT_REQUEST_TIMEOUT_S

    def get_history_path(self) -> Path:
        data = self._read_all()
        value = data.get("history_path")
        if value:
            return Path(str(value)).expanduser()
        return self._path.parent / "history.json"

    def get_log_level(self) -> str:
        data = self._read_all()
        return str(data.get("log_level", DEFAULT_LOG_LEVEL)).upper()

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
