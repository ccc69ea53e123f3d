from __future__ import annotations

from datetime import datetime

import pytest

from models import AnalysisResult, HistoryItem, StressLevel, ViewState
from presentation import (
    DEFAULT_EMOJI,
    MOOD_CONFUSED,
    MOOD_HAPPY,
    MOOD_LISTENING,
    emoji_for_emotion,
    format_elapsed,
    format_history_date,
    history_row_text,
    mascot_mood,
    mascot_motion,
    share_text,
    stress_badge,
    waveform_points,
)


def _result() -> AnalysisResult:
    return AnalysisResult.from_dict(
        {
            "observations": {"sound": "Высокий лай", "body": "Хвост виляет"},
            "emotionalSpectrum": {"dominantEmotion": "Игривость", "stressLevel": "Low"},
            "translation": "Брось мячик!",
            "recommendations": {"do": "Поиграйте", "dont": "Не игнорируйте"},
        }
    )


@pytest.mark.parametrize(
    ("level", "badge"),
    [
        (StressLevel.LOW, "Стресс: Низкий"),
        (StressLevel.MEDIUM, "Стресс: Средний"),
        (StressLevel.CRITICAL, "Стресс: Высокий"),
    ],
)
def test_stress_badge(level: StressLevel, badge: str) -> None:
    assert stress_badge(level) == badge


@pytest.mark.parametrize(
    ("emotion", "emoji"),
    [
        ("Play", "🎾"),
        ("Радость", "🎾"),
        ("Guarding", "🛡️"),
        ("Агрессия", "🛡️"),
        ("Fear", "🌩️"),
        ("Тревога", "🌩️"),
        ("Sadness", "🌧️"),
        ("Тоска", "🌧️"),
        ("Frustration", DEFAULT_EMOJI),
    ],
)
def test_emoji_for_emotion(emotion: str, emoji: str) -> None:
    assert emoji_for_emotion(emotion) == emoji


def test_format_elapsed() -> None:
    assert format_elapsed(0) == "00:00"
    assert format_elapsed(3) == "00:03"
    assert format_elapsed(125) == "02:05"


def test_history_row_and_date() -> None:
    timestamp = int(datetime(2026, 3, 8, 12, 0).timestamp() * 1000)
    item = HistoryItem(id="a1", timestamp=timestamp, result=_result())

    assert format_history_date(timestamp) == "08.03.2026"
    row = history_row_text(item)
    assert "Игривость" in row
    assert "08.03.2026" in row
    assert "Брось мячик!" in row


def test_share_text_summarises_result() -> None:
    summary = share_text(_result())

    assert summary.splitlines()[0] == "WoofWhisper: “Брось мячик!”"
    assert "Стресс: Низкий" in summary
    assert "Что делать: Поиграйте" in summary
    assert "Чего не делать: Не игнорируйте" in summary


@pytest.mark.parametrize(
    ("state", "mood"),
    [
        (ViewState.HOME, MOOD_HAPPY),
        (ViewState.RECORDING, MOOD_LISTENING),
        (ViewState.ANALYZING, MOOD_CONFUSED),
        (ViewState.RESULT, MOOD_HAPPY),
    ],
)
def test_mascot_mood_per_screen(state: ViewState, mood: str) -> None:
    assert mascot_mood(state) == mood


def test_mascot_motion_depends_on_mood() -> None:
    assert mascot_motion(MOOD_HAPPY, 1.3) == (0.0, 0.0)

    ear_tilt, eye_offset = mascot_motion(MOOD_LISTENING, 1.3)
    assert 0.0 < ear_tilt <= 10.0
    assert eye_offset == 0.0

    ear_tilt, eye_offset = mascot_motion(MOOD_CONFUSED, 1.3)
    assert ear_tilt == 0.0
    assert -2.0 <= eye_offset < 0.0


def test_waveform_points_span_width_and_stay_in_bounds() -> None:
    points = waveform_points(300, 100, 2.0)

    assert len(points) == 300
    assert points[0][0] == 0.0
    assert points[-1][0] == 299.0
    assert all(20.0 <= y <= 80.0 for _, y in points)


def test_waveform_moves_with_phase() -> None:
    still = waveform_points(50, 100, 0.0)
    moved = waveform_points(50, 100, 0.2)

    assert still != moved
    assert waveform_points(0, 100, 1.0) == []
