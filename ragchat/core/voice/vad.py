"""
Energy-based voice activity detection.

Reproduces an analyser-node byte frequency reading: Blackman-windowed FFT
of the newest samples, magnitudes in dB mapped onto 0..255 over a
-100..-30 dB range, averaged across fft_size/2 bins.

Dependencies: numpy
System role: Manual speech onset/offset signal for live sessions
"""

import numpy as np

MIN_DECIBELS = -100.0
MAX_DECIBELS = -30.0


class EnergyVoiceActivityDetector:
    """Average frequency-domain energy compared against a fixed threshold."""

    def __init__(self, fft_size: int = 256, threshold: float = 5.0) -> None:
        if fft_size <= 0 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two, got {fft_size}")
        self.fft_size = fft_size
        self.threshold = threshold
        self._window = np.blackman(fft_size)

    @property
    def bin_count(self) -> int:
        return self.fft_size // 2

    def byte_frequency_data(self, samples: np.ndarray) -> np.ndarray:
        """
        Convert time-domain samples to byte-scaled frequency magnitudes.

        Args:
            samples: Float samples in [-1, 1]; the newest fft_size are used,
                zero-padded at the front when fewer are given

        Returns:
            np.ndarray: uint8 array of length fft_size/2
        """
        frame = np.zeros(self.fft_size, dtype=np.float64)
        tail = np.asarray(samples, dtype=np.float64)[-self.fft_size:]
        if tail.size:
            frame[-tail.size:] = tail

        spectrum = np.fft.rfft(frame * self._window)[: self.bin_count]
        magnitude = np.abs(spectrum) / self.fft_size
        with np.errstate(divide="ignore"):
            decibels = 20.0 * np.log10(magnitude)

        scaled = 255.0 * (decibels - MIN_DECIBELS) / (MAX_DECIBELS - MIN_DECIBELS)
        scaled = np.nan_to_num(scaled, nan=0.0, neginf=0.0, posinf=255.0)
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def level(self, samples: np.ndarray) -> float:
        """Average byte magnitude across all bins."""
        return float(self.byte_frequency_data(samples).mean())

    def is_speech(self, samples: np.ndarray) -> bool:
        return self.level(samples) > self.threshold
