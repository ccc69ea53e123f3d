"""Application entrypoint."""

from __future__ import annotations

import logging
import sys
import threading

import presentation as text
from analyzer import create_analyzer
from app_controller import AppController
from config import ANALYZER_MODES, JsonConfigStore
from history_store import JsonHistoryStore
from models import ViewState
from recorder import SoundDeviceRecorder
from screens import AnalyzingPage, HistoryPage, HomePage, RecordingPage, ResultPage, ScreenStack
from share import ClipboardShareService

try:
    from PySide6.QtCore import QObject, Signal
    from PySide6.QtGui import QAction
    from PySide6.QtWidgets import QApplication, QFileDialog, QInputDialog, QMainWindow, QMessageBox
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)


class UIBridge(QObject):
    state_signal = Signal(str, str)  # from_state, to_state
    tick_signal = Signal(int)
    error_signal = Signal(str)


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.config_store = JsonConfigStore()
        logging.basicConfig(
            level=self.config_store.get_log_level(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        self.ui = UIBridge()
        self.ui.state_signal.connect(self._on_state_change_ui)
        self.ui.tick_signal.connect(self._on_tick_ui)
        self.ui.error_signal.connect(self._on_error_ui)

        self.history = JsonHistoryStore(self.config_store.get_history_path())
        self.history.load()
        self.controller = AppController(
            recorder=SoundDeviceRecorder(),
            analyzer=create_analyzer(self.config_store),
            history=self.history,
            share_service=ClipboardShareService(),
            on_state_change=self._on_state_change,
            on_tick=self._on_tick,
            on_error=self._on_error,
        )

        self.stack = ScreenStack(
            home=HomePage(
                on_listen=self.controller.start_recording,
                on_video=lambda: self._pick_file(text.VIDEO_FILE_FILTER),
                on_audio=lambda: self._pick_file(text.AUDIO_FILE_FILTER),
                on_history=self.controller.open_history,
            ),
            recording=RecordingPage(on_stop=self._on_stop),
            analyzing=AnalyzingPage(),
            result=ResultPage(on_new=self.controller.dismiss_result, on_share=self._on_share),
            history=HistoryPage(
                on_back=self.controller.close_history,
                on_open=self.controller.open_history_item,
            ),
        )

        self.window = QMainWindow()
        self.window.setWindowTitle(text.APP_TITLE)
        self.window.setCentralWidget(self.stack)
        self.window.resize(400, 800)
        self._setup_menu()
        self.stack.show_screen(self.controller.screen)
        self.app.aboutToQuit.connect(self.controller.shutdown)

    def _setup_menu(self) -> None:
        menu = self.window.menuBar().addMenu("Settings")

        api_action = QAction("Set API Key", menu)
        api_action.triggered.connect(self._set_api_key)
        menu.addAction(api_action)

        mode_action = QAction("Analyzer Mode", menu)
        mode_action.triggered.connect(self._set_mode)
        menu.addAction(mode_action)

        proxy_action = QAction("Proxy URL", menu)
        proxy_action.triggered.connect(self._set_proxy_url)
        menu.addAction(proxy_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

    def _set_api_key(self) -> None:
        value, ok = QInputDialog.getText(self.window, "API Key", "Gemini API Key")
        if not ok:
            return
        self.config_store.set_api_key(value)
        self._apply_analyzer()
        QMessageBox.information(self.window, "Saved", "API Key saved and applied.")

    def _set_mode(self) -> None:
        modes = list(ANALYZER_MODES)
        current = modes.index(self.config_store.get_mode()) if self.config_store.get_mode() in modes else 0
        value, ok = QInputDialog.getItem(self.window, "Analyzer Mode", "Mode", modes, current, False)
        if not ok:
            return
        self.config_store.set_mode(value)
        self._apply_analyzer()

    def _set_proxy_url(self) -> None:
        value, ok = QInputDialog.getText(
            self.window, "Proxy URL", "Proxy base URL", text=self.config_store.get_proxy_url()
        )
        if not ok or not value:
            return
        self.config_store.set_proxy_url(value)
        self._apply_analyzer()

    def _apply_analyzer(self) -> None:
        # Hot-swap analyzer with the new settings
        self.controller.replace_analyzer(create_analyzer(self.config_store))

    # ------------------------------------------------------------------
    # Callbacks (may run on worker threads → emit signals for UI thread)
    # ------------------------------------------------------------------

    def _on_state_change(self, from_state: ViewState, to_state: ViewState) -> None:
        self.ui.state_signal.emit(from_state.value, to_state.value)

    def _on_tick(self, elapsed_s: int) -> None:
        self.ui.tick_signal.emit(elapsed_s)

    def _on_error(self, code: str, message: str) -> None:
        logger.info("User-facing error %s", code)
        self.ui.error_signal.emit(message)

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_state_change_ui(self, from_state: str, to_state: str) -> None:
        self.stack.show_screen(self.controller.screen)

    def _on_tick_ui(self, elapsed_s: int) -> None:
        self.stack.recording.set_elapsed(elapsed_s)

    def _on_error_ui(self, message: str) -> None:
        QMessageBox.warning(self.window, text.APP_TITLE, message)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def _on_stop(self) -> None:
        # Inference blocks until the model answers; keep it off the Qt thread
        threading.Thread(target=self.controller.stop_recording, daemon=True).start()

    def _pick_file(self, file_filter: str) -> None:
        path, _ = QFileDialog.getOpenFileName(self.window, text.APP_TITLE, "", file_filter)
        if not path:
            return
        threading.Thread(target=self.controller.select_file, args=(path,), daemon=True).start()

    def _on_share(self) -> None:
        result = self.controller.share_result()
        if result.success:
            self.window.statusBar().showMessage(text.SHARED_NOTICE, 2000)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        self.window.show()
        return self.app.exec()

    def quit(self) -> None:
        self.controller.shutdown()
        self.app.quit()


def main() -> int:
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
