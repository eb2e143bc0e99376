"""Sensor readings, per-system temperature state and hysteresis transitions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

TEMP_MIN = 30.0
TEMP_MAX = 140.0
VOLTAGE_MAX = 3.0

SENSOR_IDS = (
    "00000000-0000-4000-8000-000000000001",
    "00000000-0000-4000-8000-000000000002",
    "00000000-0000-4000-8000-000000000003",
    "00000000-0000-4000-8000-000000000004",
)


class SystemState(Enum):
    """Operating state of a monitored system."""

    NORMAL = "normal"
    PREVENTIVE = "preventive"
    EMERGENCY = "emergency"


@dataclass
class HysteresisConfig:
    """Thresholds (in degrees) and the band applied around them."""

    preventive_threshold: float = 85.0
    emergency_threshold: float = 110.0
    hysteresis_range: float = 5.0


@dataclass(frozen=True)
class SensorReading:
    """A named voltage sample from one sensor."""

    name: str
    voltage: float


@dataclass
class SystemRecord:
    """Latest measurements and state of one monitored system."""

    name: str
    voltage: float = 0.0
    temperature: float = 0.0
    previous_state: SystemState = SystemState.NORMAL
    current_state: SystemState = SystemState.NORMAL

    def update_state(self, hysteresis: HysteresisConfig) -> None:
        """Advance the state machine by one step using the current temperature."""
        self.previous_state = self.current_state
        temp = self.temperature
        band = hysteresis.hysteresis_range
        state = self.current_state
        if state is SystemState.NORMAL:
            if temp > hysteresis.preventive_threshold + band:
                self.current_state = SystemState.PREVENTIVE
        elif state is SystemState.PREVENTIVE:
            if temp > hysteresis.emergency_threshold + band:
                self.current_state = SystemState.EMERGENCY
            elif temp < hysteresis.preventive_threshold - band:
                self.current_state = SystemState.NORMAL
        elif state is SystemState.EMERGENCY:
            if temp < hysteresis.emergency_threshold - band:
                self.current_state = SystemState.PREVENTIVE


@dataclass
class SystemCollection:
    """The monitored systems together with their shared hysteresis settings."""

    systems: list[SystemRecord]
    hysteresis: HysteresisConfig = field(default_factory=HysteresisConfig)

    def update_states(self) -> None:
        """Step every system's state machine."""
        for system in self.systems:
            system.update_state(self.hysteresis)

    def process_readings(self, readings: Iterable[SensorReading]) -> None:
        """Store rounded voltages and temperatures, then update states.

        Readings are matched to systems by position.
        """
        readings = list(readings)
        if len(readings) != len(self.systems):
            raise ValueError(
                f"expected {len(self.systems)} readings, got {len(readings)}"
            )
        for system, reading in zip(self.systems, readings):
            voltage = round2(reading.voltage)
            system.voltage = voltage
            system.temperature = round2(voltage_to_temperature(voltage))
        self.update_states()

    def describe(self) -> str:
        """Return a human-readable summary of every system's state."""
        lines = [
            f"=== System states (hysteresis: \u00b1{self.hysteresis.hysteresis_range:.1f}\u00b0C) ==="
        ]
        for system in self.systems:
            lines.append(f"[{system.name}]")
            lines.append(
                f"  Temp: {system.temperature:.1f}\u00b0C | Voltage: {system.voltage:.1f}V"
            )
            lines.append(
                f"  State: {system.previous_state.name} -> {system.current_state.name}"
            )
            lines.append("----------------------------------")
        return "\n".join(lines) + "\n"


def voltage_to_temperature(voltage: float) -> float:
    """Map a sensor voltage (clamped to 0..3 V) linearly onto 30..140 degrees."""
    voltage = min(max(voltage, 0.0), VOLTAGE_MAX)
    return TEMP_MIN + (voltage / VOLTAGE_MAX) * (TEMP_MAX - TEMP_MIN)


def round2(value: float) -> float:
    """Round to two decimals, halves away from zero."""
    scaled = math.floor(abs(value) * 100 + 0.5)
    return math.copysign(scaled / 100, value)


def default_collection() -> SystemCollection:
    """Build the four standard systems with the default hysteresis."""
    return SystemCollection(
        systems=[SystemRecord(name) for name in SENSOR_IDS],
        hysteresis=HysteresisConfig(),
    )