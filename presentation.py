"""Text, labels and colours shown by the screens.

Kept free of Qt so the wording can be checked without a display.
"""

from __future__ import annotations

import math
from datetime import datetime

from models import AnalysisResult, HistoryItem, StressLevel, ViewState

APP_TITLE = "WoofWhisper"
TAGLINE = "Что пытается сказать ваша собака?"
LISTEN_LABEL = "Слушать"
VIDEO_LABEL = "Видео"
AUDIO_LABEL = "Аудио"
HISTORY_LINK_LABEL = "История переводов"
RECORDING_TITLE = "Слушаю..."
RECORDING_HINT = "Нажмите квадрат, чтобы остановить"
ANALYZING_TITLE = "Анализирую..."
ANALYZING_HINT = "Расшифровка виляний хвостом и лая"
RESULT_TITLE = "Перевод"
SPECTRUM_TITLE = "Эмоциональное состояние"
DO_TITLE = "Что делать"
DONT_TITLE = "Чего не делать"
NEW_LABEL = "Новый"
SHARE_LABEL = "Поделиться"
SHARED_NOTICE = "Перевод скопирован"
HISTORY_TITLE = "История"
HISTORY_EMPTY = "Переводов пока нет."

VIDEO_FILE_FILTER = "Видео (*.mp4 *.mov *.webm *.avi *.mkv)"
AUDIO_FILE_FILTER = "Аудио (*.wav *.mp3 *.m4a *.ogg *.webm *.aac *.flac)"

STRESS_LABELS = {
    StressLevel.LOW: "Низкий",
    StressLevel.MEDIUM: "Средний",
    StressLevel.CRITICAL: "Высокий",
}

# (text, background) per stress level.
STRESS_COLORS = {
    StressLevel.LOW: ("#15803d", "#dcfce7"),
    StressLevel.MEDIUM: ("#a16207", "#fef9c3"),
    StressLevel.CRITICAL: ("#b91c1c", "#fee2e2"),
}

_EMOJI_RULES = (
    (("happy", "play", "радость", "игр", "счаст"), "🎾"),
    (("anger", "guard", "злость", "агресс", "защит", "рык"), "🛡️"),
    (("fear", "nervous", "страх", "нерв", "тревог", "испуг"), "🌩️"),
    (("sad", "грусть", "печаль", "тоск"), "🌧️"),
)
DEFAULT_EMOJI = "🐕"

MOOD_HAPPY = "happy"
MOOD_LISTENING = "listening"
MOOD_CONFUSED = "confused"

MASCOT_MOODS = {
    ViewState.HOME: MOOD_HAPPY,
    ViewState.RECORDING: MOOD_LISTENING,
    ViewState.ANALYZING: MOOD_CONFUSED,
}

# Phase advance per animation frame.
WAVE_PHASE_STEP = 0.2


def stress_badge(level: StressLevel) -> str:
    return f"Стресс: {STRESS_LABELS[level]}"


def emoji_for_emotion(emotion: str) -> str:
    lowered = emotion.lower()
    for keywords, emoji in _EMOJI_RULES:
        if any(keyword in lowered for keyword in keywords):
            return emoji
    return DEFAULT_EMOJI


def format_elapsed(seconds: int) -> str:
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes:02d}:{secs:02d}"


def format_history_date(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%d.%m.%Y")


def quoted(text: str) -> str:
    return f"“{text}”"


def observations_text(result: AnalysisResult) -> str:
    return f"{result.observations.sound} {result.observations.body}"


def history_row_text(item: HistoryItem) -> str:
    spectrum = item.result.emotional_spectrum
    return (
        f"{emoji_for_emotion(spectrum.dominant_emotion)}  {spectrum.dominant_emotion}"
        f"    {format_history_date(item.timestamp)}\n{quoted(item.result.translation)}"
    )


def share_text(result: AnalysisResult) -> str:
    """Plain-text summary placed on the clipboard by the Share button."""
    spectrum = result.emotional_spectrum
    return "\n".join(
        [
            f"{APP_TITLE}: {quoted(result.translation)}",
            f"{emoji_for_emotion(spectrum.dominant_emotion)} {spectrum.dominant_emotion}"
            f" · {stress_badge(spectrum.stress_level)}",
            f"{DO_TITLE}: {result.recommendations.do}",
            f"{DONT_TITLE}: {result.recommendations.dont}",
        ]
    )


def mascot_mood(state: ViewState) -> str:
    return MASCOT_MOODS.get(state, MOOD_HAPPY)


def mascot_motion(mood: str, phase: float) -> tuple[float, float]:
    """Return ``(ear_tilt_degrees, eye_offset_px)`` for one animation frame.

    Ears wiggle while listening and eyes bob while confused; a happy
    mascot stays still. Offsets are in the mascot's 200x200 drawing units.
    """
    if mood == MOOD_LISTENING:
        return 10.0 * abs(math.sin(phase)), 0.0
    if mood == MOOD_CONFUSED:
        return 0.0, -2.0 * abs(math.sin(phase / 2))
    return 0.0, 0.0


def waveform_points(width: int, height: int, phase: float) -> list[tuple[float, float]]:
    """Sample the recording wave: two sines whose amplitude breathes with ``phase``.

    Amplitudes are tuned for a 100 px tall strip and scaled to ``height``.
    """
    mid = height / 2
    scale = height / 100
    points = []
    for x in range(max(width, 0)):
        y = (
            mid
            + math.sin(x * 0.05 + phase) * 20 * math.sin(phase * 0.5) * scale
            + math.sin(x * 0.02 + phase * 2) * 10 * scale
        )
        points.append((float(x), y))
    return points
