"""Qt pages for each screen and the stack that switches between them."""

from __future__ import annotations

from typing import Callable

import presentation as text
from models import (
    AnalyzingScreen,
    HistoryItem,
    HistoryScreen,
    HomeScreen,
    RecordingScreen,
    ResultScreen,
    Screen,
    ViewState,
)

try:
    from PySide6.QtCore import QPointF, Qt, QTimer
    from PySide6.QtGui import QColor, QPainter, QPainterPath, QPen
    from PySide6.QtWidgets import (
        QHBoxLayout,
        QLabel,
        QListWidget,
        QListWidgetItem,
        QProgressBar,
        QPushButton,
        QStackedWidget,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    QPointF = None  # type: ignore
    Qt = None  # type: ignore
    QTimer = None  # type: ignore
    QColor = None  # type: ignore
    QPainter = None  # type: ignore
    QPainterPath = None  # type: ignore
    QPen = None  # type: ignore
    QHBoxLayout = object  # type: ignore
    QLabel = object  # type: ignore
    QListWidget = object  # type: ignore
    QListWidgetItem = object  # type: ignore
    QProgressBar = object  # type: ignore
    QPushButton = object  # type: ignore
    QStackedWidget = object  # type: ignore
    QVBoxLayout = object  # type: ignore
    QWidget = object  # type: ignore

Action = Callable[[], None]

TERRACOTTA = "#E07A5F"
CHARCOAL = "#3D405B"
SAGE = "#81B29A"
CREAM = "#F4F1DE"

_TITLE_STYLE = f"color: {TERRACOTTA}; font-size: 32px; font-weight: bold;"
_HEADING_STYLE = f"color: {CHARCOAL}; font-size: 22px; font-weight: bold;"
_MUTED_STYLE = f"color: {CHARCOAL}; font-size: 14px;"
_PRIMARY_BUTTON = (
    f"background: {TERRACOTTA}; color: {CREAM}; font-size: 20px; font-weight: bold;"
    "padding: 18px; border-radius: 24px;"
)
_SECONDARY_BUTTON = (
    f"background: white; color: {SAGE}; font-size: 15px; font-weight: bold;"
    "padding: 10px 18px; border-radius: 14px;"
)
_CARD_STYLE = "background: white; border-radius: 18px; padding: 14px;"


def _label(value: str, style: str, wrap: bool = True) -> QLabel:
    label = QLabel(value)
    label.setWordWrap(wrap)
    label.setStyleSheet(style)
    return label


def _button(value: str, style: str, on_click: Action) -> QPushButton:
    button = QPushButton(value)
    button.setStyleSheet(style)
    button.clicked.connect(on_click)
    return button


class Mascot(QWidget):
    """Dog face drawn on a 200x200 grid; ears and eyes move with the mood."""

    FRAME_MS = 60

    def __init__(self, mood: str = text.MOOD_HAPPY, size: int = 160) -> None:
        super().__init__()
        self.setFixedSize(size, size)
        self._mood = mood
        self._phase = 0.0
        self._timer = QTimer(self)
        self._timer.setInterval(self.FRAME_MS)
        self._timer.timeout.connect(self._advance)

    @property
    def mood(self) -> str:
        return self._mood

    def set_mood(self, mood: str) -> None:
        self._mood = mood
        self._phase = 0.0
        if self.isVisible():
            self._sync_timer()
        self.update()

    def showEvent(self, event) -> None:  # noqa: ANN001
        super().showEvent(event)
        self._sync_timer()

    def hideEvent(self, event) -> None:  # noqa: ANN001
        self._timer.stop()
        super().hideEvent(event)

    def _sync_timer(self) -> None:
        if self._mood == text.MOOD_HAPPY:
            self._timer.stop()
        elif not self._timer.isActive():
            self._timer.start()

    def _advance(self) -> None:
        self._phase += text.WAVE_PHASE_STEP
        self.update()

    def paintEvent(self, event) -> None:  # noqa: ANN001
        ear_tilt, eye_offset = text.mascot_motion(self._mood, self._phase)
        side = min(self.width(), self.height())
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.translate((self.width() - side) / 2, (self.height() - side) / 2)
        painter.scale(side / 200, side / 200)
        painter.setPen(Qt.NoPen)

        painter.setBrush(QColor(TERRACOTTA))
        painter.drawEllipse(QPointF(100, 100), 60, 60)

        painter.setBrush(QColor(CHARCOAL))
        self._draw_ear(painter, (50, 70), (30, 50, 30, 110, 55, 100), -ear_tilt)
        self._draw_ear(painter, (150, 70), (170, 50, 170, 110, 145, 100), ear_tilt)

        painter.setBrush(QColor(CREAM))
        painter.drawEllipse(QPointF(100, 115), 25, 18)
        painter.setBrush(QColor(CHARCOAL))
        painter.drawEllipse(QPointF(100, 110), 8, 8)

        for x in (80, 120):
            painter.setBrush(QColor(CHARCOAL))
            painter.drawEllipse(QPointF(x, 90 + eye_offset), 6, 6)
            painter.setBrush(QColor("white"))
            painter.drawEllipse(QPointF(x + 2, 88 + eye_offset), 2, 2)

        if self._mood == text.MOOD_HAPPY:
            smile = QPainterPath(QPointF(90, 125))
            smile.quadTo(100, 135, 110, 125)
            pen = QPen(QColor(CHARCOAL))
            pen.setWidth(3)
            pen.setCapStyle(Qt.RoundCap)
            painter.setPen(pen)
            painter.setBrush(Qt.NoBrush)
            painter.drawPath(smile)
        elif self._mood == text.MOOD_LISTENING:
            painter.setBrush(QColor(CHARCOAL))
            painter.drawEllipse(QPointF(100, 128), 5, 5)
        painter.end()

    @staticmethod
    def _draw_ear(painter: QPainter, anchor: tuple, curve: tuple, tilt: float) -> None:
        ear = QPainterPath(QPointF(*anchor))
        ear.cubicTo(*curve)
        painter.save()
        painter.translate(*anchor)
        painter.rotate(tilt)
        painter.translate(-anchor[0], -anchor[1])
        painter.drawPath(ear)
        painter.restore()


class Waveform(QWidget):
    """Animated wave shown while the microphone is open."""

    FRAME_MS = 16

    def __init__(self) -> None:
        super().__init__()
        self.setMinimumHeight(100)
        self._phase = 0.0
        self._timer = QTimer(self)
        self._timer.setInterval(self.FRAME_MS)
        self._timer.timeout.connect(self._advance)

    @property
    def running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        self._phase = 0.0
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def showEvent(self, event) -> None:  # noqa: ANN001
        super().showEvent(event)
        self.start()

    def hideEvent(self, event) -> None:  # noqa: ANN001
        self.stop()
        super().hideEvent(event)

    def _advance(self) -> None:
        self._phase += text.WAVE_PHASE_STEP
        self.update()

    def paintEvent(self, event) -> None:  # noqa: ANN001
        points = text.waveform_points(self.width(), self.height(), self._phase)
        if not points:
            return
        wave = QPainterPath(QPointF(0, self.height() / 2))
        for x, y in points:
            wave.lineTo(x, y)
        pen = QPen(QColor(TERRACOTTA))
        pen.setWidth(4)
        pen.setCapStyle(Qt.RoundCap)
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setPen(pen)
        painter.drawPath(wave)
        painter.end()


def _centered(widget: QWidget) -> QHBoxLayout:
    row = QHBoxLayout()
    row.addStretch(1)
    row.addWidget(widget)
    row.addStretch(1)
    return row


class HomePage(QWidget):
    def __init__(self, on_listen: Action, on_video: Action, on_audio: Action, on_history: Action) -> None:
        super().__init__()
        layout = QVBoxLayout()
        layout.addStretch(1)
        layout.addLayout(_centered(Mascot(text.mascot_mood(ViewState.HOME), size=180)))
        title = _label(text.APP_TITLE, _TITLE_STYLE)
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)
        tagline = _label(text.TAGLINE, _MUTED_STYLE)
        tagline.setAlignment(Qt.AlignCenter)
        layout.addWidget(tagline)
        layout.addSpacing(24)
        layout.addWidget(_button(f"🎙️ {text.LISTEN_LABEL}", _PRIMARY_BUTTON, on_listen))

        pickers = QHBoxLayout()
        pickers.addWidget(_button(f"🎬 {text.VIDEO_LABEL}", _SECONDARY_BUTTON, on_video))
        pickers.addWidget(_button(f"⬆️ {text.AUDIO_LABEL}", _SECONDARY_BUTTON, on_audio))
        layout.addLayout(pickers)
        layout.addStretch(1)
        layout.addWidget(_button(f"🕘 {text.HISTORY_LINK_LABEL}", "border: none; color: gray;", on_history))
        self.setLayout(layout)


class RecordingPage(QWidget):
    def __init__(self, on_stop: Action) -> None:
        super().__init__()
        layout = QVBoxLayout()
        layout.addStretch(1)
        layout.addLayout(_centered(Mascot(text.mascot_mood(ViewState.RECORDING), size=150)))
        layout.addWidget(_label(text.RECORDING_TITLE, _HEADING_STYLE))
        self.waveform = Waveform()
        layout.addWidget(self.waveform)
        self._elapsed = _label(text.format_elapsed(0), f"color: {TERRACOTTA}; font-size: 40px;")
        self._elapsed.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._elapsed)
        layout.addWidget(_button("■", "background: #ef4444; color: white; font-size: 28px;", on_stop))
        layout.addWidget(_label(text.RECORDING_HINT, _MUTED_STYLE))
        layout.addStretch(1)
        self.setLayout(layout)

    def set_elapsed(self, seconds: int) -> None:
        self._elapsed.setText(text.format_elapsed(seconds))


class AnalyzingPage(QWidget):
    def __init__(self) -> None:
        super().__init__()
        layout = QVBoxLayout()
        layout.addStretch(1)
        layout.addLayout(_centered(Mascot(text.mascot_mood(ViewState.ANALYZING), size=180)))
        layout.addWidget(_label(text.ANALYZING_TITLE, _TITLE_STYLE))
        layout.addWidget(_label(text.ANALYZING_HINT, f"color: {SAGE}; font-size: 15px;"))
        progress = QProgressBar()
        progress.setRange(0, 0)  # indeterminate
        progress.setTextVisible(False)
        layout.addWidget(progress)
        layout.addStretch(1)
        self.setLayout(layout)


class ResultPage(QWidget):
    def __init__(self, on_new: Action, on_share: Action) -> None:
        super().__init__()
        layout = QVBoxLayout()
        layout.addWidget(_label(text.RESULT_TITLE, _HEADING_STYLE))
        self._translation = _label("", f"{_CARD_STYLE} color: {CHARCOAL}; font-size: 22px; font-weight: bold;")
        layout.addWidget(self._translation)

        header = QHBoxLayout()
        header.addWidget(_label(text.SPECTRUM_TITLE, f"color: {SAGE}; font-size: 12px; font-weight: bold;"))
        self._badge = _label("", "", wrap=False)
        header.addWidget(self._badge)
        layout.addLayout(header)

        self._emotion = _label("", f"color: {CHARCOAL}; font-size: 20px; font-weight: bold;")
        layout.addWidget(self._emotion)
        self._observations = _label("", _MUTED_STYLE)
        layout.addWidget(self._observations)

        layout.addWidget(_label(f"✓ {text.DO_TITLE}", f"color: {SAGE}; font-weight: bold;"))
        self._do = _label("", _MUTED_STYLE)
        layout.addWidget(self._do)
        layout.addWidget(_label(f"✕ {text.DONT_TITLE}", "color: #f87171; font-weight: bold;"))
        self._dont = _label("", _MUTED_STYLE)
        layout.addWidget(self._dont)
        layout.addStretch(1)

        actions = QHBoxLayout()
        actions.addWidget(_button(f"↺ {text.NEW_LABEL}", _PRIMARY_BUTTON, on_new))
        actions.addWidget(_button(text.SHARE_LABEL, _SECONDARY_BUTTON, on_share))
        layout.addLayout(actions)
        self.setLayout(layout)

    def show_result(self, screen: ResultScreen) -> None:
        result = screen.result
        spectrum = result.emotional_spectrum
        color, background = text.STRESS_COLORS[spectrum.stress_level]
        self._translation.setText(text.quoted(result.translation))
        self._badge.setText(text.stress_badge(spectrum.stress_level))
        self._badge.setStyleSheet(
            f"color: {color}; background: {background}; border-radius: 10px;"
            "padding: 4px 10px; font-size: 12px; font-weight: bold;"
        )
        self._emotion.setText(f"{text.emoji_for_emotion(spectrum.dominant_emotion)}  {spectrum.dominant_emotion}")
        self._observations.setText(text.observations_text(result))
        self._do.setText(result.recommendations.do)
        self._dont.setText(result.recommendations.dont)


class HistoryPage(QWidget):
    def __init__(self, on_back: Action, on_open: Callable[[str], None]) -> None:
        super().__init__()
        self._on_open = on_open
        layout = QVBoxLayout()
        header = QHBoxLayout()
        header.addWidget(_button("‹", "border: none; font-size: 24px;", on_back))
        header.addWidget(_label(text.HISTORY_TITLE, _HEADING_STYLE))
        header.addStretch(1)
        layout.addLayout(header)
        self._empty = _label(text.HISTORY_EMPTY, "color: gray; font-size: 15px;")
        self._empty.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._empty)
        self._list = QListWidget()
        self._list.itemClicked.connect(self._item_clicked)
        layout.addWidget(self._list)
        self.setLayout(layout)

    def show_items(self, screen: HistoryScreen) -> None:
        self._list.clear()
        for item in screen.items:
            self._list.addItem(self._make_row(item))
        self._empty.setVisible(not screen.items)
        self._list.setVisible(bool(screen.items))

    def _make_row(self, item: HistoryItem) -> QListWidgetItem:
        row = QListWidgetItem(text.history_row_text(item))
        row.setData(Qt.UserRole, item.id)
        return row

    def _item_clicked(self, row: QListWidgetItem) -> None:
        self._on_open(str(row.data(Qt.UserRole)))


class ScreenStack(QStackedWidget):
    """Shows the page for the controller's current screen."""

    def __init__(
        self,
        home: HomePage,
        recording: RecordingPage,
        analyzing: AnalyzingPage,
        result: ResultPage,
        history: HistoryPage,
    ) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.recording = recording
        self.result = result
        self.history = history
        for page in (home, recording, analyzing, result, history):
            self.addWidget(page)
        self._pages = {
            HomeScreen: home,
            RecordingScreen: recording,
            AnalyzingScreen: analyzing,
            ResultScreen: result,
            HistoryScreen: history,
        }

    def show_screen(self, screen: Screen) -> None:
        page = self._pages.get(type(screen))
        if page is None:
            raise TypeError(f"no page for screen {screen!r}")
        if isinstance(screen, RecordingScreen):
            self.recording.set_elapsed(screen.elapsed_s)
        elif isinstance(screen, ResultScreen):
            self.result.show_result(screen)
        elif isinstance(screen, HistoryScreen):
            self.history.show_items(screen)
        self.setCurrentWidget(page)
