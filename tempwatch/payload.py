"""JSON payloads describing the monitored systems."""

from __future__ import annotations

import json

from .states import SystemCollection, SystemRecord


def _number(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def _system_entry(system: SystemRecord, with_status: bool) -> dict:
    entry = {
        "id_sensors": system.name,
        "voltage": _number(system.voltage),
        "temperature": _number(system.temperature),
    }
    if with_status:
        entry["status"] = system.current_state.value
    return entry


def _dump(entries: list[dict]) -> str:
    return json.dumps({"data": entries}, indent="\t")


def systems_to_json(collection: SystemCollection) -> str:
    """Serialise every system's name, voltage and temperature."""
    return _dump([_system_entry(s, False) for s in collection.systems])


def changed_systems_to_json(collection: SystemCollection) -> str | None:
    """Serialise only systems whose state just changed, or return None."""
    changed = [
        _system_entry(s, True)
        for s in collection.systems
        if s.previous_state is not s.current_state
    ]
    if not changed:
        return None
    return _dump(changed)