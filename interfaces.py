"""Protocol interfaces used by AppController."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Protocol

from models import AnalysisResult, HistoryItem, MediaBlob, ShareResult


class Recorder(Protocol):
    def start(self, on_tick: Optional[Callable[[int], None]] = None) -> None: ...

    def stop(self) -> MediaBlob | None: ...

    def close(self) -> None: ...


class Analyzer(Protocol):
    def analyze(self, blob: MediaBlob) -> AnalysisResult: ...


class HistoryStore(Protocol):
    @property
    def items(self) -> list[HistoryItem]: ...

    def load(self) -> list[HistoryItem]: ...

    def append(self, result: AnalysisResult) -> HistoryItem: ...

    def get(self, item_id: str) -> HistoryItem | None: ...


class ShareService(Protocol):
    def share_text(self, text: str) -> ShareResult: ...


class ConfigStore(Protocol):
    def get_api_key(self) -> str: ...

    def set_api_key(self, key: str) -> None: ...

    def get_mode(self) -> str: ...

    def set_mode(self, mode: str) -> None: ...

    def get_proxy_url(self) -> str: ...

    def set_proxy_url(self, url: str) -> None: ...

    def get_model(self) -> str: ...

    def get_request_timeout_s(self) -> float: ...

    def get_history_path(self) -> Path: ...

    def get_log_level(self) -> str: ...
