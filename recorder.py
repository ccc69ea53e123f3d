"""Microphone recorder adapter and media file loading."""

from __future__ import annotations

import io
import logging
import mimetypes
import threading
import wave
from pathlib import Path
from typing import Any, Callable, Optional

from errors import FileTooLargeError, MicrophonePermissionError
from models import DEFAULT_MIME_TYPE, MediaBlob

try:
    import numpy as np
except Exception:  # pragma: no cover
    np = None  # type: ignore

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = int(4.5 * 1024 * 1024)
RECORDING_MIME_TYPE = "audio/wav"

TickCallback = Callable[[int], None]


def _pcm_to_wav(
    pcm: bytes,
    sample_rate: int = 16000,
    channels: int = 1,
    sample_width: int = 2,
) -> bytes:
    """Wrap raw PCM bytes in a WAV container."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sample_width)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return buf.getvalue()


def load_media_file(path: str | Path, max_bytes: int = MAX_UPLOAD_BYTES) -> MediaBlob:
    """Read a user-selected audio/video file.

    The size is checked on disk before anything is read, so oversized files
    never reach memory or the network.
    """
    path = Path(path)
    size = path.stat().st_size
    if size > max_bytes:
        raise FileTooLargeError(size=size, limit=max_bytes)
    mime_type, _ = mimetypes.guess_type(path.name)
    return MediaBlob(data=path.read_bytes(), mime_type=mime_type or DEFAULT_MIME_TYPE)


class _Ticker:
    """Calls ``on_tick`` with the elapsed whole seconds until cancelled."""

    def __init__(self, on_tick: TickCallback, interval_s: float) -> None:
        self._on_tick = on_tick
        self._interval_s = interval_s
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._cancelled.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=0.5)

    def _run(self) -> None:
        elapsed = 0
        while not self._cancelled.wait(self._interval_s):
            elapsed += 1
            self._on_tick(elapsed)


class SoundDeviceRecorder:
    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        chunk_ms: int = 100,
        tick_interval_s: float = 1.0,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.chunk_ms = chunk_ms
        self.tick_interval_s = tick_interval_s
        self._stream: Any = None
        self._ticker: Optional[_Ticker] = None
        self._running = False
        self._lock = threading.Lock()
        self._chunks: list[bytes] = []

    @property
    def is_recording(self) -> bool:
        return self._running

    def start(self, on_tick: Optional[TickCallback] = None) -> None:
        with self._lock:
            if self._running:
                return
            if sd is None:
                raise RuntimeError("sounddevice is not installed")
            self._chunks = []
            blocksize = int(self.sample_rate * (self.chunk_ms / 1000.0))
            stream = None
            try:
                stream = sd.InputStream(
                    samplerate=self.sample_rate,
                    channels=self.channels,
                    dtype="int16",
                    blocksize=blocksize,
                    callback=self._on_audio,
                )
                self._running = True
                stream.start()
            except (sd.PortAudioError, OSError) as exc:
                self._running = False
                if stream is not None:
                    stream.close()
                logger.warning("Microphone unavailable: %s", exc)
                raise MicrophonePermissionError(str(exc)) from exc
            self._stream = stream
            if on_tick is not None:
                self._ticker = _Ticker(on_tick, self.tick_interval_s)
                self._ticker.start()
            logger.info("Recording started (%d Hz, %d ch)", self.sample_rate, self.channels)

    def stop(self) -> MediaBlob | None:
        with self._lock:
            if not self._running:
                return None
            self._release()
            pcm = b"".join(self._chunks)
            self._chunks = []
        logger.info("Recording stopped, %d bytes of PCM captured", len(pcm))
        wav = _pcm_to_wav(pcm, self.sample_rate, self.channels)
        return MediaBlob(data=wav, mime_type=RECORDING_MIME_TYPE)

    def close(self) -> None:
        with self._lock:
            self._release()
            self._chunks = []

    def _release(self) -> None:
        self._running = False
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        if self._stream is not None:
            try:
                self._stream.stop()
            finally:
                self._stream.close()
                self._stream = None

    def _on_audio(self, indata: Any, frames: int, time_info: Any, status: Any) -> None:
        if not self._running:
            return
        if np is None:
            return
        self._chunks.append(np.asarray(indata, dtype=np.int16).tobytes())
