"""Clipboard share service for analysis results."""

from __future__ import annotations

import logging

from errors import SHARE_FAILED
from models import ShareResult

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore

logger = logging.getLogger(__name__)


class ClipboardShareService:
    def share_text(self, text: str) -> ShareResult:
        if not text.strip():
            return ShareResult(success=False, reason="empty text")
        if pyperclip is None:
            return ShareResult(success=False, reason="clipboard dependency missing")
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            logger.warning("Clipboard copy failed: %s", exc)
            return ShareResult(success=False, reason=f"{SHARE_FAILED}: {exc}")
        return ShareResult(success=True, reason="ok")
