"""Shared error codes, user-facing messages and exceptions."""

from __future__ import annotations

# Codes surfaced to the user.
PERMISSION_DENIED = "PERMISSION_DENIED"
FILE_TOO_LARGE = "FILE_TOO_LARGE"
ANALYSIS_FAILED = "ANALYSIS_FAILED"
SHARE_FAILED = "SHARE_FAILED"

# Inference failure causes; logged, then collapsed to ANALYSIS_FAILED.
AUTH_FAILED = "AUTH_FAILED"
NETWORK_ERROR = "NETWORK_ERROR"
EMPTY_RESPONSE = "EMPTY_RESPONSE"
MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
PROXY_ERROR = "PROXY_ERROR"
MODEL_ERROR = "MODEL_ERROR"
MODEL_UNAVAILABLE = "MODEL_UNAVAILABLE"

ERROR_MESSAGES = {
    PERMISSION_DENIED: "Доступ к микрофону запрещен",
    FILE_TOO_LARGE: "Файл слишком большой (максимум 4.5 МБ)",
    ANALYSIS_FAILED: "Мы не смогли понять этот лай. Попробуйте еще раз?",
    SHARE_FAILED: "Не удалось скопировать перевод",
}


class WoofWhisperError(Exception):
    """Base exception carrying one of the codes above."""

    def __init__(self, code: str, message: str = "") -> None:
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, code)
        super().__init__(f"{code}: {self.message}")


class MicrophonePermissionError(WoofWhisperError):
    def __init__(self, message: str = "") -> None:
        super().__init__(PERMISSION_DENIED, message)


class FileTooLargeError(WoofWhisperError):
    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(FILE_TOO_LARGE, f"{size} bytes exceeds limit of {limit} bytes")


class AnalysisError(WoofWhisperError):
    pass
