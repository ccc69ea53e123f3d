from __future__ import annotations

from unittest.mock import MagicMock

import share
from share import ClipboardShareService


def test_share_returns_failure_when_dependency_missing(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(share, "pyperclip", None)

    result = ClipboardShareService().share_text("hello")

    assert result.success is False


def test_share_returns_failure_on_empty_text() -> None:
    result = ClipboardShareService().share_text("   ")

    assert result.success is False
    assert result.reason == "empty text"


def test_share_copies_text(monkeypatch) -> None:  # noqa: ANN001
    fake_clip = MagicMock()
    monkeypatch.setattr(share, "pyperclip", fake_clip)

    result = ClipboardShareService().share_text("Гав")

    assert result.success is True
    fake_clip.copy.assert_called_once_with("Гав")


def test_share_reports_clipboard_error(monkeypatch) -> None:  # noqa: ANN001
    class FakeClipboardError(Exception):
        pass

    fake_clip = MagicMock()
    fake_clip.PyperclipException = FakeClipboardError
    fake_clip.copy.side_effect = FakeClipboardError("no clipboard mechanism")
    monkeypatch.setattr(share, "pyperclip", fake_clip)

    result = ClipboardShareService().share_text("Гав")

    assert result.success is False
    assert "no clipboard mechanism" in result.reason
