# tempwatch

tempwatch watches four analog temperature channels. Each channel's state moves
between `normal`, `preventive` and `emergency` using thresholds with
hysteresis. The package posts the readings and the state changes to an HTTP
endpoint as JSON.

## Modules

### `tempwatch.adc`

`AdcReader(sample, raw_to_millivolts, offsets=None)` reads the four channels
`GPIO32` to `GPIO35`, which map to ADC channels 4 to 7.

- `sample(adc_channel)` returns one raw conversion. A value of `-1` means a
  failed read and counts as 0.
- `raw_to_millivolts(raw)` applies the calibration.

For each channel, the reader takes 64 samples. It averages them by integer
division, converts the average to volts and subtracts the channel's offset. The
result never drops below zero.

- `read_all()` returns one `AdcReading(voltage, raw_value, name)` per channel.
- `set_channel_offset(channel, offset)` replaces the offset for channels 0–3.
  It ignores any other channel index.
- Every offset defaults to 0.035 V.
- Passing a number of offsets other than four raises `ValueError`.

### `tempwatch.states`

Conversion and rounding:

- `voltage_to_temperature(voltage)` clamps the voltage to 0–3 V and maps it
  linearly onto 30–140 °C.
- `round2(value)` rounds to two decimals, with halves rounded away from zero.

`HysteresisConfig` defaults to these settings:

- a preventive threshold of 85 °C
- an emergency threshold of 110 °C
- a band of ±5 °C

`SystemRecord.update_state(hysteresis)` moves the state forward one step:

- `normal` goes to `preventive` above 90 °C.
- `preventive` goes to `emergency` above 115 °C, and falls back to `normal`
  below 80 °C.
- `emergency` falls back to `preventive` below 105 °C.

`SystemCollection` holds a list of `SystemRecord`s and one shared
`HysteresisConfig`:

- `process_readings(readings)` takes one `SensorReading(name, voltage)` per
  system, matched by position. It stores the rounded voltage and temperature,
  then updates every state. A wrong number of readings raises `ValueError`.
- `update_states()` steps every system.
- `describe()` returns a text summary of every system: its temperature, its
  voltage and its previous and current state.

`default_collection()` builds four systems with placeholder identifiers and the
default hysteresis.

### `tempwatch.payload`

Both functions return text that looks like `{"data": [...]}`, indented with
tabs. Each entry has `id_sensors`, `voltage` and `temperature`.

- `systems_to_json(collection)` reports every system.
- `changed_systems_to_json(collection)` reports only the systems whose previous
  and current state differ. Each entry also has a `status` field. The function
  returns `None` when nothing changed.

### `tempwatch.http_post`

`send_json_post(url, json_data, timeout=10.0)` posts the body with
`Content-Type: application/json`. It returns `(status, body)`:

- Any HTTP status, including error statuses, counts as a completed request.
- At most 1024 bytes of the response are read.
- Transport failures and invalid URLs raise `PostError`.
- `None` arguments raise `ValueError`.

### `tempwatch.app`

`Monitor(reader, collection=None, url=..., connected=True)` connects the parts
above. `connected` is a bool or a callable that returns one. The monitor has
these methods:

- `sense_once()` reads all channels and puts the readings on a bounded queue of
  100 batches. When the queue is full, the readings are dropped.
- `control_once(timeout=None)` processes one queued batch. It returns `False`
  if no batch arrived in time.
- `send_periodic_once()` posts the full snapshot when connected.
- `verify_changes_once()` posts the changed systems when there are any and the
  monitor is connected.
- `run(stop)` runs the four loops on threads until the `threading.Event` is
  set. Sensing and change checks happen every 0.1 s, and the full snapshot is
  sent every 30 s.

## Usage

```python
from tempwatch.states import SensorReading, default_collection
from tempwatch.payload import systems_to_json, changed_systems_to_json

collection = default_collection()
voltages = [1.0, 2.5, 2.9, 0.4]
collection.process_readings(
    SensorReading(system.name, volts)
    for system, volts in zip(collection.systems, voltages)
)
print(collection.describe())
print(systems_to_json(collection))
print(changed_systems_to_json(collection))
```

## Command line

```
tempwatch --help
tempwatch --raw 1000 2000 3000 4000 --duration 5 --offline
```

The command accepts these options:

- `--url`: the server endpoint. The default is `http://localhost:3000/api/data`.
- `--raw`: four simulated raw ADC values. They are constant for the whole run.
- `--duration`: the number of seconds to run before stopping.
- `--offline`: never contact the server.

When the run ends, the command prints the summary from `describe()`.

## What it does not do

- There is no hardware access. Sampling and calibration are functions you pass
  to `AdcReader`. The command simulates constant raw values with a linear
  0–4095 → 0–3600 mV calibration.
- There is no network management, such as joining a wireless network. The
  monitor's `connected` flag or callable stands in for that.
- There is no persistent storage.

## Tests

```
pip install -e ".[test]"
pytest
```