"""Raw PCM (as returned by the speech endpoint) to a playable WAV container."""

from __future__ import annotations

import base64
import binascii
import io
import wave

from promptforge.common.errors import ValidationError

SAMPLE_RATE = 24000
NUM_CHANNELS = 1
SAMPLE_WIDTH = 2  # 16-bit signed little-endian


def decode_pcm(base64_audio: str) -> bytes:
    try:
        return base64.b64decode(base64_audio, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Audio payload is not valid base64: {e}") from e


def pcm_to_wav(
    base64_audio: str,
    sample_rate: int = SAMPLE_RATE,
    channels: int = NUM_CHANNELS,
    sample_width: int = SAMPLE_WIDTH,
) -> bytes:
    pcm = decode_pcm(base64_audio)
    frame_size = channels * sample_width
    if len(pcm) % frame_size:
        # Drop a trailing partial frame
        pcm = pcm[: len(pcm) - len(pcm) % frame_size]

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buffer.getvalue()
