"""State-machine based screen orchestration."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from errors import (
    ANALYSIS_FAILED,
    ERROR_MESSAGES,
    PERMISSION_DENIED,
    SHARE_FAILED,
    AnalysisError,
    FileTooLargeError,
    MicrophonePermissionError,
)
from interfaces import Analyzer, HistoryStore, Recorder, ShareService
from models import (
    AnalyzingScreen,
    HistoryScreen,
    HomeScreen,
    MediaBlob,
    RecordingScreen,
    ResultScreen,
    Screen,
    ShareResult,
    ViewState,
)
from presentation import share_text
from recorder import MAX_UPLOAD_BYTES, load_media_file

logger = logging.getLogger(__name__)

StateCallback = Callable[[ViewState, ViewState], None]
TickCallback = Callable[[int], None]
ErrorCallback = Callable[[str, str], None]


class AppController:
    """Owns the current screen and drives every transition between screens.

    Triggers that do not apply to the current screen are ignored. The lock
    is never held across the inference call; while a request is in flight
    the screen stays on Analyzing and every other trigger is a no-op.
    """

    def __init__(
        self,
        recorder: Recorder,
        analyzer: Analyzer,
        history: HistoryStore,
        share_service: Optional[ShareService] = None,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
        on_state_change: Optional[StateCallback] = None,
        on_tick: Optional[TickCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._recorder = recorder
        self._analyzer = analyzer
        self._history = history
        self._share_service = share_service
        self._max_upload_bytes = max_upload_bytes
        self._on_state_change = on_state_change
        self._on_tick = on_tick
        self._on_error = on_error

        self._lock = threading.RLock()
        self._screen: Screen = HomeScreen()

    @property
    def state(self) -> ViewState:
        return self._screen.kind

    @property
    def screen(self) -> Screen:
        return self._screen

    def replace_analyzer(self, analyzer: Analyzer) -> None:
        with self._lock:
            self._analyzer = analyzer

    # ------------------------------------------------------------------
    # Home
    # ------------------------------------------------------------------

    def start_recording(self) -> None:
        with self._lock:
            if self.state != ViewState.HOME:
                return
            try:
                self._recorder.start(self._handle_tick)
            except MicrophonePermissionError as exc:
                logger.warning("Recording not started: %s", exc)
                self._emit_error(PERMISSION_DENIED)
                return
            self._transition(RecordingScreen(elapsed_s=0))

    def select_file(self, path: str | Path) -> None:
        with self._lock:
            if self.state != ViewState.HOME:
                return
            try:
                blob = load_media_file(path, max_bytes=self._max_upload_bytes)
            except FileTooLargeError as exc:
                logger.info("Rejected upload %s: %s", path, exc)
                self._emit_error(exc.code)
                return
            except OSError as exc:
                logger.warning("Could not read %s: %s", path, exc)
                self._emit_error(ANALYSIS_FAILED)
                return
            self._transition(AnalyzingScreen())
        self._run_analysis(blob)

    def open_history(self) -> None:
        with self._lock:
            if self.state != ViewState.HOME:
                return
            self._transition(HistoryScreen(items=tuple(self._history.items)))

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def stop_recording(self) -> None:
        with self._lock:
            if self.state != ViewState.RECORDING:
                return
            self._transition(AnalyzingScreen())
        try:
            blob = self._recorder.stop()
        except Exception as exc:
            self._finish_with_error(f"recorder stop failed: {exc}")
            return
        if blob is None:
            self._finish_with_error("recorder returned no audio")
            return
        self._run_analysis(blob)

    # ------------------------------------------------------------------
    # Result / History
    # ------------------------------------------------------------------

    def dismiss_result(self) -> None:
        with self._lock:
            if self.state != ViewState.RESULT:
                return
            self._transition(HomeScreen())

    def open_history_item(self, item_id: str) -> None:
        with self._lock:
            if self.state != ViewState.HISTORY:
                return
            item = self._history.get(item_id)
            if item is None:
                logger.warning("History item %s not found", item_id)
                return
            self._transition(ResultScreen(result=item.result))

    def close_history(self) -> None:
        with self._lock:
            if self.state != ViewState.HISTORY:
                return
            self._transition(HomeScreen())

    def share_result(self) -> ShareResult:
        with self._lock:
            screen = self._screen
            if not isinstance(screen, ResultScreen):
                return ShareResult(success=False, reason="no result to share")
            if self._share_service is None:
                return ShareResult(success=False, reason="sharing is not available")
            result = self._share_service.share_text(share_text(screen.result))
            if not result.success:
                self._emit_error(SHARE_FAILED)
            return result

    def shutdown(self) -> None:
        """Release the microphone on every exit path."""
        with self._lock:
            if self.state == ViewState.RECORDING:
                self._transition(HomeScreen())
        self._recorder.close()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run_analysis(self, blob: MediaBlob) -> None:
        try:
            result = self._analyzer.analyze(blob)
        except AnalysisError as exc:
            self._finish_with_error(f"{exc.code}: {exc.message}")
            return
        except Exception as exc:
            logger.exception("Unexpected analyzer failure")
            self._finish_with_error(f"{type(exc).__name__}: {exc}")
            return

        with self._lock:
            if self.state != ViewState.ANALYZING:
                return
            try:
                item = self._history.append(result)
            except OSError as exc:
                logger.error("Could not save analysis to history: %s", exc)
            else:
                logger.info("Analysis %s stored (stress=%s)", item.id, result.emotional_spectrum.stress_level.value)
            self._transition(ResultScreen(result=result))

    def _finish_with_error(self, reason: str) -> None:
        logger.error("Analysis failed: %s", reason)
        with self._lock:
            if self.state != ViewState.ANALYZING:
                return
            self._transition(HomeScreen())
            self._emit_error(ANALYSIS_FAILED)

    def _handle_tick(self, elapsed_s: int) -> None:
        with self._lock:
            if self.state != ViewState.RECORDING:
                return
            self._screen = RecordingScreen(elapsed_s=elapsed_s)
        if self._on_tick:
            self._on_tick(elapsed_s)

    def _emit_error(self, code: str) -> None:
        if self._on_error:
            self._on_error(code, ERROR_MESSAGES[code])

    def _transition(self, to_screen: Screen) -> None:
        from_state = self.state
        self._screen = to_screen
        logger.debug("Screen %s -> %s", from_state.value, to_screen.kind.value)
        if self._on_state_change and from_state != to_screen.kind:
            self._on_state_change(from_state, to_screen.kind)
