import threading
import math
import struct
import winsound

from .config import SAMPLE_RATE, CHIME_VOLUME


def _wrap_wav_header(pcm_data: bytes, sample_rate: int) -> bytes:
    data_size = len(pcm_data)
    riff_size = 36 + data_size
    header = struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        riff_size,
        b"WAVE",
        b"fmt ",
        16,
        1,
        1,
        sample_rate,
        sample_rate * 2,
        2,
        16,
        b"data",
        data_size,
    )
    return header + pcm_data


def render_notes(notes: list[float], note_sec: float, volume: float = CHIME_VOLUME) -> bytes:
    volume = max(0.0, min(1.0, float(volume)))
    max_amp = int(32767 * volume)
    n_samples = max(1, int(SAMPLE_RATE * note_sec))

    frames = bytearray()
    for freq in notes:
        for i in range(n_samples):
            t = i / SAMPLE_RATE
            envelope = 1.0 - (i / n_samples)
            frames += struct.pack("<h", int(max_amp * envelope * math.sin(2.0 * math.pi * freq * t)))

    return _wrap_wav_header(frames, SAMPLE_RATE)


def _play_async(notes: list[float], note_sec: float) -> None:
    def _play():
        winsound.PlaySound(render_notes(notes, note_sec), winsound.SND_MEMORY)

    threading.Thread(target=_play, daemon=True).start()


def play_session_complete() -> None:
    _play_async([523.25, 659.25, 784.00], 0.16)


def play_level_up() -> None:
    _play_async([523.25, 659.25, 784.00, 1046.50, 784.00, 1046.50], 0.12)
