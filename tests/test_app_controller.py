from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from app_controller import AppController
from errors import (
    ANALYSIS_FAILED,
    AUTH_FAILED,
    EMPTY_RESPONSE,
    ERROR_MESSAGES,
    FILE_TOO_LARGE,
    PERMISSION_DENIED,
    PROXY_ERROR,
    AnalysisError,
    MicrophonePermissionError,
)
from history_store import JsonHistoryStore
from models import (
    AnalysisResult,
    HistoryScreen,
    MediaBlob,
    RecordingScreen,
    ResultScreen,
    ShareResult,
    StressLevel,
    ViewState,
)
from presentation import stress_badge


def _result(level: str = "Medium", translation: str = "Дай мне пространство") -> AnalysisResult:
    return AnalysisResult.from_dict(
        {
            "observations": {"sound": "Низкое рычание", "body": "Уши прижаты"},
            "emotionalSpectrum": {"dominantEmotion": "Frustration", "stressLevel": level},
            "translation": translation,
            "recommendations": {"do": "Отойдите", "dont": "Не трогайте"},
        }
    )


class FakeRecorder:
    def __init__(self, deny: bool = False) -> None:
        self.deny = deny
        self.started = False
        self.stopped = False
        self.closed = False
        self.on_tick: Optional[Callable[[int], None]] = None
        self.chunks: list[bytes] = []

    def start(self, on_tick: Optional[Callable[[int], None]] = None) -> None:
        if self.deny:
            raise MicrophonePermissionError("denied")
        self.started = True
        self.on_tick = on_tick

    def stop(self) -> MediaBlob | None:
        if not self.started:
            return None
        self.started = False
        self.stopped = True
        return MediaBlob(data=b"".join(self.chunks), mime_type="audio/wav")

    def close(self) -> None:
        self.started = False
        self.closed = True


class FakeAnalyzer:
    def __init__(self, result: AnalysisResult | None = None, error: Exception | None = None) -> None:
        self.result = result or _result()
        self.error = error
        self.calls: list[MediaBlob] = []

    def analyze(self, blob: MediaBlob) -> AnalysisResult:
        self.calls.append(blob)
        if self.error is not None:
            raise self.error
        return self.result


class FakeShareService:
    def __init__(self, success: bool = True) -> None:
        self.success = success
        self.calls: list[str] = []

    def share_text(self, text: str) -> ShareResult:
        self.calls.append(text)
        return ShareResult(success=self.success, reason="ok" if self.success else "no clipboard")


def _make_controller(
    tmp_path: Path,
    recorder: FakeRecorder | None = None,
    analyzer: FakeAnalyzer | None = None,
    share: FakeShareService | None = None,
    errors: list | None = None,
    transitions: list | None = None,
) -> tuple[AppController, JsonHistoryStore]:
    history = JsonHistoryStore(tmp_path / "history.json")
    history.load()
    controller = AppController(
        recorder=recorder or FakeRecorder(),
        analyzer=analyzer or FakeAnalyzer(),
        history=history,
        share_service=share,
        on_state_change=(lambda f, t: transitions.append((f, t))) if transitions is not None else None,
        on_error=(lambda c, m: errors.append((c, m))) if errors is not None else None,
    )
    return controller, history


def test_record_stop_shows_result_and_saves_history(tmp_path: Path) -> None:
    recorder = FakeRecorder()
    analyzer = FakeAnalyzer()
    transitions: list[tuple[ViewState, ViewState]] = []
    controller, history = _make_controller(tmp_path, recorder, analyzer, transitions=transitions)

    controller.start_recording()
    assert controller.state == ViewState.RECORDING
    assert recorder.on_tick is not None
    for second in (1, 2, 3):
        recorder.on_tick(second)
    assert controller.screen == RecordingScreen(elapsed_s=3)

    recorder.chunks = [b"one", b"two", b"three"]
    controller.stop_recording()

    assert analyzer.calls == [MediaBlob(data=b"onetwothree", mime_type="audio/wav")]
    assert controller.state == ViewState.RESULT
    screen = controller.screen
    assert isinstance(screen, ResultScreen)
    assert screen.result.translation == "Дай мне пространство"
    assert stress_badge(screen.result.emotional_spectrum.stress_level) == "Стресс: Средний"
    assert len(history.items) == 1
    assert transitions == [
        (ViewState.HOME, ViewState.RECORDING),
        (ViewState.RECORDING, ViewState.ANALYZING),
        (ViewState.ANALYZING, ViewState.RESULT),
    ]


def test_tick_callback_is_relayed(tmp_path: Path) -> None:
    recorder = FakeRecorder()
    ticks: list[int] = []
    history = JsonHistoryStore(tmp_path / "history.json")
    controller = AppController(
        recorder=recorder,
        analyzer=FakeAnalyzer(),
        history=history,
        on_tick=ticks.append,
    )

    controller.start_recording()
    recorder.on_tick(1)
    recorder.on_tick(2)

    assert ticks == [1, 2]


def test_permission_denied_stays_home(tmp_path: Path) -> None:
    errors: list[tuple[str, str]] = []
    transitions: list = []
    controller, _ = _make_controller(
        tmp_path, recorder=FakeRecorder(deny=True), errors=errors, transitions=transitions
    )

    controller.start_recording()

    assert controller.state == ViewState.HOME
    assert transitions == []
    assert errors == [(PERMISSION_DENIED, ERROR_MESSAGES[PERMISSION_DENIED])]


def test_inference_failures_return_home_and_keep_history(tmp_path: Path) -> None:
    for code in (AUTH_FAILED, PROXY_ERROR, EMPTY_RESPONSE):
        errors: list[tuple[str, str]] = []
        analyzer = FakeAnalyzer(error=AnalysisError(code, "boom"))
        controller, history = _make_controller(tmp_path / code, analyzer=analyzer, errors=errors)

        controller.start_recording()
        controller.stop_recording()

        assert controller.state == ViewState.HOME
        assert history.items == []
        assert not (tmp_path / code / "history.json").exists()
        assert errors == [(ANALYSIS_FAILED, ERROR_MESSAGES[ANALYSIS_FAILED])]


def test_unexpected_analyzer_error_returns_home(tmp_path: Path) -> None:
    errors: list[tuple[str, str]] = []
    transitions: list[tuple[ViewState, ViewState]] = []
    analyzer = FakeAnalyzer(error=RuntimeError("invalid proxy url"))
    controller, history = _make_controller(
        tmp_path, analyzer=analyzer, errors=errors, transitions=transitions
    )

    controller.start_recording()
    controller.stop_recording()

    assert controller.state == ViewState.HOME
    assert transitions[-1] == (ViewState.ANALYZING, ViewState.HOME)
    assert history.items == []
    assert errors == [(ANALYSIS_FAILED, ERROR_MESSAGES[ANALYSIS_FAILED])]


def test_select_valid_file_analyzes_with_declared_mime(tmp_path: Path) -> None:
    media = tmp_path / "bark.mp4"
    media.write_bytes(b"\x00" * 1024)
    analyzer = FakeAnalyzer()
    controller, history = _make_controller(tmp_path, analyzer=analyzer)

    controller.select_file(media)

    assert analyzer.calls[0].mime_type == "video/mp4"
    assert analyzer.calls[0].data == b"\x00" * 1024
    assert controller.state == ViewState.RESULT
    assert len(history.items) == 1


def test_oversized_file_rejected_without_network_call(tmp_path: Path) -> None:
    media = tmp_path / "walk.mp4"
    with media.open("wb") as fh:
        fh.truncate(8 * 1000 * 1000)
    analyzer = FakeAnalyzer()
    errors: list[tuple[str, str]] = []
    transitions: list = []
    controller, history = _make_controller(
        tmp_path, analyzer=analyzer, errors=errors, transitions=transitions
    )

    controller.select_file(media)

    assert analyzer.calls == []
    assert transitions == []
    assert controller.state == ViewState.HOME
    assert history.items == []
    assert errors == [(FILE_TOO_LARGE, ERROR_MESSAGES[FILE_TOO_LARGE])]


def test_history_navigation_opens_stored_item_without_reanalysis(tmp_path: Path) -> None:
    analyzer = FakeAnalyzer()
    controller, history = _make_controller(tmp_path, analyzer=analyzer)
    older = history.append(_result(level="Low", translation="Давай играть"))
    newer = history.append(_result(level="Critical", translation="Уходи"))

    controller.open_history()
    screen = controller.screen
    assert isinstance(screen, HistoryScreen)
    assert [item.id for item in screen.items] == [newer.id, older.id]

    controller.open_history_item(older.id)

    assert controller.state == ViewState.RESULT
    assert controller.screen.result.translation == "Давай играть"
    assert controller.screen.result.emotional_spectrum.stress_level == StressLevel.LOW
    assert analyzer.calls == []
    assert len(history.items) == 2

    controller.dismiss_result()
    assert controller.state == ViewState.HOME


def test_history_back_and_unknown_item(tmp_path: Path) -> None:
    controller, _ = _make_controller(tmp_path)

    controller.open_history()
    controller.open_history_item("missing")
    assert controller.state == ViewState.HISTORY

    controller.close_history()
    assert controller.state == ViewState.HOME


def test_triggers_outside_their_state_are_ignored(tmp_path: Path) -> None:
    recorder = FakeRecorder()
    analyzer = FakeAnalyzer()
    controller, _ = _make_controller(tmp_path, recorder, analyzer)

    controller.stop_recording()
    controller.dismiss_result()
    controller.close_history()
    controller.open_history_item("x")
    assert controller.state == ViewState.HOME

    controller.start_recording()
    controller.start_recording()  # should be no-op
    controller.open_history()
    controller.select_file(tmp_path / "nothing.wav")
    assert controller.state == ViewState.RECORDING
    assert analyzer.calls == []


def test_share_result_copies_summary(tmp_path: Path) -> None:
    share = FakeShareService()
    controller, _ = _make_controller(tmp_path, share=share)

    assert controller.share_result().success is False

    controller.start_recording()
    controller.stop_recording()
    result = controller.share_result()

    assert result.success is True
    assert len(share.calls) == 1
    assert "Дай мне пространство" in share.calls[0]
    assert "Стресс: Средний" in share.calls[0]


def test_shutdown_releases_microphone_while_recording(tmp_path: Path) -> None:
    recorder = FakeRecorder()
    controller, _ = _make_controller(tmp_path, recorder)

    controller.start_recording()
    controller.shutdown()

    assert recorder.closed is True
    assert controller.state == ViewState.HOME
