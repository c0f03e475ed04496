# skysense

Pure-Python signal processing for flight instruments such as variometers and
altimeters. The package works on raw sensor values and byte strings, so it can
run on recorded data or sit behind whatever bus code you supply.

## Installation

```
pip install skysense
```

To run the test suite, install with the `test` extra (`pip install skysense[test]`)
and run `pytest`.

## Modules

- `skysense.ringbuf`: `RingBuffer(size=20)` is a fixed-size float buffer that
  starts out filled with zeros. `add_sample` overwrites the oldest entry.
  `average_oldest(n)` and `average_newest(n)` average a window. If `n` is
  larger than the buffer, the window wraps round. A non-positive `n` raises
  `ValueError`.
- `skysense.kalman`: `KalmanFilter4D` tracks altitude `z`, climb rate `v`,
  acceleration `a` and accelerometer bias `b`. Call `predict(dt)`, then
  `update(zm, am)`, which returns the updated `(z, v)`. The `covariance`
  property gives the full 4x4 state covariance.
- `skysense.imu`: `MahonyAHRS` is a Mahony attitude filter with
  `update_6dof` and `update_9dof`. Gyro rates are in rad/s. `quaternion()`
  returns the current estimate. The module also has
  `quaternion_to_yaw_pitch_roll`, which returns degrees, and
  `gravity_compensated_accel`, which takes milli-g and returns cm/s²
  with gravity removed.
- `skysense.gps`: handles u-blox UBX NAV-PVT packets.
  - `NavPvt.from_bytes` decodes the 94 bytes that follow the header. The
    `checksum_ok` property checks the carried checksum.
  - `NavPvtStreamParser.feed(data)` scans a raw byte stream and returns the
    packets it completes.
  - Helper functions: `ubx_checksum`, `haversine_distance_m`, `bearing_deg`,
    and `local_date_time(nav, utc_offset_mins)`, which returns
    `(year, month, day, hour, minute)`.
  - Receiver configuration messages are kept as byte constants, such as
    `CFG_PRT` and `CONFIG_115200_SEQUENCE`.
- `skysense.madc`: `average_samples` gives the truncated integer mean of ADC
  readings. `battery_voltage` maps an averaged reading to a supply voltage
  using a two-point calibration.
- `skysense.bmp388`: `parse_calibration` turns the 21 calibration bytes into
  `CalibrationData`. `parse_sensor_data` splits the 6 data bytes into raw
  pressure and temperature. `Bmp388Compensator.compensate` returns
  `CompensatedData` for the chosen `SensorComponent`; components that are not
  chosen read as zero. `pa_to_altitude_cm` converts pascal to altitude with
  the standard-atmosphere formula.
- `skysense.ms5611`: `crc4` and `verify_prom` check the 16-byte PROM.
  `MS5611Calibration.from_prom` reads the coefficients and raises
  `ValueError` on a CRC mismatch. `MS5611` has these methods:
  - `calculate_temperature(d2)` returns hundredths of a degree.
  - `calculate_pressure(d1)` returns pascal. It raises `RuntimeError` if
    no temperature has been calculated yet.
  - `celsius()` returns the last temperature in whole degrees.
  - `average(samples)` takes `(d2, d1)` pairs and returns `(celsius, pascal)`.

## Example

```python
from skysense.kalman import KalmanFilter4D
from skysense.ringbuf import RingBuffer

kf = KalmanFilter4D(
    a_variance=100.0, k_adapt=0.0, z_initial=0.0, v_initial=0.0, a_initial=0.0,
    z_meas_variance=200.0, a_meas_variance=50.0, accel_bias_variance=0.005,
)
climb = RingBuffer(20)
for zm, am in [(0.0, 0.0), (1.0, 5.0), (2.5, 4.0)]:
    kf.predict(0.002)
    z, v = kf.update(zm, am)
    climb.add_sample(v)
print(climb.average_newest(3))
```

## What it does not do

- skysense does not talk to hardware. It has no SPI, I²C or UART access, no
  chip reset or register configuration, and no protocol or baud-rate
  detection for the GPS receiver. You read the bytes yourself and pass them in.
- It does not decode raw gyroscope, accelerometer or magnetometer registers.
- It does not compute calibration for gyroscope, accelerometer or
  magnetometer sensors.
- It does not store flight logs or calibration values.