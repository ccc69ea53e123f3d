"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class ViewState(str, Enum):
    HOME = "HOME"
    RECORDING = "RECORDING"
    ANALYZING = "ANALYZING"
    RESULT = "RESULT"
    HISTORY = "HISTORY"


class StressLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    CRITICAL = "Critical"


DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass
class MediaBlob:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class Observations:
    sound: str
    body: str


@dataclass(frozen=True)
class EmotionalSpectrum:
    dominant_emotion: str
    stress_level: StressLevel


@dataclass(frozen=True)
class Recommendations:
    do: str
    dont: str


def _require_text(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"field {key!r} must be a non-empty string")
    return value


def _require_object(data: dict, key: str) -> dict:
    value = data.get(key)
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} must be an object")
    return value


@dataclass(frozen=True)
class AnalysisResult:
    """Structured interpretation returned by the model.

    Serialised with the camelCase keys of the response schema so the same
    dict shape travels over the wire and into the history file.
    """

    observations: Observations
    emotional_spectrum: EmotionalSpectrum
    translation: str
    recommendations: Recommendations

    @classmethod
    def from_dict(cls, data: Any) -> "AnalysisResult":
        if not isinstance(data, dict):
            raise ValueError("analysis result must be an object")
        observations = _require_object(data, "observations")
        spectrum = _require_object(data, "emotionalSpectrum")
        recommendations = _require_object(data, "recommendations")
        raw_level = spectrum.get("stressLevel")
        try:
            level = StressLevel(raw_level)
        except ValueError:
            raise ValueError(f"unknown stress level: {raw_level!r}") from None
        return cls(
            observations=Observations(
                sound=_require_text(observations, "sound"),
                body=_require_text(observations, "body"),
            ),
            emotional_spectrum=EmotionalSpectrum(
                dominant_emotion=_require_text(spectrum, "dominantEmotion"),
                stress_level=level,
            ),
            translation=_require_text(data, "translation"),
            recommendations=Recommendations(
                do=_require_text(recommendations, "do"),
                dont=_require_text(recommendations, "dont"),
            ),
        )

    def to_dict(self) -> dict:
        return {
            "observations": {
                "sound": self.observations.sound,
                "body": self.observations.body,
            },
            "emotionalSpectrum": {
                "dominantEmotion": self.emotional_spectrum.dominant_emotion,
                "stressLevel": self.emotional_spectrum.stress_level.value,
            },
            "translation": self.translation,
            "recommendations": {
                "do": self.recommendations.do,
                "dont": self.recommendations.dont,
            },
        }


@dataclass(frozen=True)
class HistoryItem:
    id: str
    timestamp: int
    result: AnalysisResult

    @classmethod
    def from_dict(cls, data: Any) -> "HistoryItem":
        if not isinstance(data, dict):
            raise ValueError("history item must be an object")
        item_id = _require_text(data, "id")
        timestamp = data.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise ValueError("field 'timestamp' must be an integer")
        return cls(id=item_id, timestamp=timestamp, result=AnalysisResult.from_dict(data))

    def to_dict(self) -> dict:
        data = self.result.to_dict()
        data["id"] = self.id
        data["timestamp"] = self.timestamp
        return data


@dataclass
class ShareResult:
    success: bool
    reason: str


# Screens: one variant per view state. Payload lives on the variant, so a
# result screen without a result cannot be built.


@dataclass(frozen=True)
class HomeScreen:
    kind: ClassVar[ViewState] = ViewState.HOME


@dataclass(frozen=True)
class RecordingScreen:
    kind: ClassVar[ViewState] = ViewState.RECORDING
    elapsed_s: int = 0


@dataclass(frozen=True)
class AnalyzingScreen:
    kind: ClassVar[ViewState] = ViewState.ANALYZING


@dataclass(frozen=True)
class ResultScreen:
    kind: ClassVar[ViewState] = ViewState.RESULT
    result: AnalysisResult


@dataclass(frozen=True)
class HistoryScreen:
    kind: ClassVar[ViewState] = ViewState.HISTORY
    items: tuple[HistoryItem, ...] = field(default_factory=tuple)


Screen = Union[HomeScreen, RecordingScreen, AnalyzingScreen, ResultScreen, HistoryScreen]
