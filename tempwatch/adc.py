"""Averaged, offset-corrected readings from four analogue input channels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

NUM_ADC_CHANNELS = 4
NO_OF_SAMPLES = 64
ADC_DEFAULT_OFFSETS = (0.035, 0.035, 0.035, 0.035)


@dataclass(frozen=True)
class AdcChannel:
    """Binding of a GPIO pin to an ADC channel."""

    gpio: int
    adc_channel: int
    name: str


CHANNELS = (
    AdcChannel(32, 4, "GPIO32"),
    AdcChannel(33, 5, "GPIO33"),
    AdcChannel(34, 6, "GPIO34"),
    AdcChannel(35, 7, "GPIO35"),
)


@dataclass(frozen=True)
class AdcReading:
    """One channel's corrected voltage, averaged raw value and name."""

    voltage: float
    raw_value: int
    name: str


class AdcReader:
    """Reads all channels through a sampling function and a calibration curve.

    ``sample(adc_channel)`` returns one raw conversion, or -1 on a failed read;
    ``raw_to_millivolts(raw)`` applies the calibration.
    """

    def __init__(
        self,
        sample: Callable[[int], int],
        raw_to_millivolts: Callable[[int], float],
        offsets: Sequence[float] | None = None,
    ) -> None:
        offsets = list(ADC_DEFAULT_OFFSETS if offsets is None else offsets)
        if len(offsets) != NUM_ADC_CHANNELS:
            raise ValueError(
                f"expected {NUM_ADC_CHANNELS} offsets, got {len(offsets)}"
            )
        self._sample = sample
        self._raw_to_millivolts = raw_to_millivolts
        self.offsets = offsets

    def _read_channel(self, index: int, channel: AdcChannel) -> AdcReading:
        total = sum(
            max(self._sample(channel.adc_channel), 0) if False else _clean(self._sample(channel.adc_channel))
            for _ in range(NO_OF_SAMPLES)
        )
        raw = total // NO_OF_SAMPLES
        voltage = self._raw_to_millivolts(raw) / 1000.0
        offset = self.offsets[index]
        corrected = voltage - offset if voltage > offset else 0.0
        return AdcReading(voltage=corrected, raw_value=raw, name=channel.name)

    def read_all(self) -> list[AdcReading]:
        """Return one reading per channel, in channel order."""
        return [self._read_channel(i, ch) for i, ch in enumerate(CHANNELS)]

    def set_channel_offset(self, channel: int, offset: float) -> None:
        """Set a channel's offset in volts; unknown channels are ignored."""
        if 0 <= channel < NUM_ADC_CHANNELS:
            self.offsets[channel] = offset


def _clean(raw: int) -> int:
    return 0 if raw == -1 else raw