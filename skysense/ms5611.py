"""MS5611 barometer: PROM checking, calibration and pressure/temperature maths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

SAMPLE_PERIOD_MS = 10

CMD_RESET = 0x1E
CMD_CONVERT_D1 = 0x40
CMD_CONVERT_D2 = 0x50
CMD_ADC_READ = 0x00
CMD_ADC_4096 = 0x08
CMD_PROM_READ = 0xA0

PROM_SIZE = 16


def _div_trunc(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _round_cx100(value_cx100: int) -> int:
    """Hundredths of a degree to whole degrees, half away from zero."""
    if value_cx100 >= 0:
        return _div_trunc(value_cx100 + 50, 100)
    return _div_trunc(value_cx100 - 50, 100)


def _check_prom(prom: Sequence[int]) -> list[int]:
    data = [int(b) & 0xFF for b in prom]
    if len(data) != PROM_SIZE:
        raise ValueError(f"PROM must be {PROM_SIZE} bytes, got {len(data)}")
    return data


def crc4(prom: Sequence[int]) -> int:
    """4-bit CRC over the 16 PROM bytes, with the CRC byte itself taken as zero."""
    data = _check_prom(prom)
    data[15] = 0
    remainder = 0
    for byte in data:
        remainder ^= byte
        for _ in range(8):
            if remainder & 0x8000:
                remainder = ((remainder << 1) ^ 0x3000) & 0xFFFF
            else:
                remainder = (remainder << 1) & 0xFFFF
    return (remainder >> 12) & 0x0F


def verify_prom(prom: Sequence[int]) -> bool:
    """True if the CRC stored in the last PROM byte matches the contents."""
    data = _check_prom(prom)
    return crc4(data) == data[15] & 0x0F


@dataclass(frozen=True)
class MS5611Calibration:
    """The six factory calibration coefficients C1..C6."""

    coefficients: tuple[int, int, int, int, int, int]

    @classmethod
    def from_prom(cls, prom: Sequence[int]) -> "MS5611Calibration":
        """Read the coefficients from PROM bytes, checking the CRC first."""
        data = _check_prom(prom)
        if not verify_prom(data):
            raise ValueError("PROM CRC mismatch")
        coeffs = tuple(
            (data[2 + 2 * i] << 8) | data[3 + 2 * i] for i in range(6)
        )
        return cls(coefficients=coeffs)  # type: ignore[arg-type]

    @property
    def tref(self) -> int:
        return self.coefficients[4] << 8

    @property
    def off_t1(self) -> int:
        return self.coefficients[1] << 16

    @property
    def sens_t1(self) -> int:
        return self.coefficients[0] << 15


class MS5611:
    """Converts raw D1 (pressure) and D2 (temperature) readings.

    Temperature must be calculated before pressure, since pressure compensation
    depends on the temperature difference it leaves behind.
    """

    def __init__(self, calibration: MS5611Calibration) -> None:
        self.calibration = calibration
        self._dt: int | None = None
        self.temperature_cx100 = 0
        self._celsius = 0

    def calculate_temperature(self, d2: int) -> int:
        """Compute temperature from a raw D2 reading; returns hundredths of a degree."""
        cal = self.calibration
        self._dt = int(d2) - cal.tref
        self.temperature_cx100 = 2000 + ((self._dt * cal.coefficients[5]) >> 23)
        self._celsius = _round_cx100(self.temperature_cx100)
        return self.temperature_cx100

    def calculate_pressure(self, d1: int) -> float:
        """Compute pressure in pascal from a raw D1 reading."""
        if self._dt is None:
            raise RuntimeError("temperature must be calculated before pressure")
        cal = self.calibration
        dt = self._dt
        offset = cal.off_t1 + ((cal.coefficients[3] * dt) >> 7)
        sens = cal.sens_t1 + ((cal.coefficients[2] * dt) >> 8)
        temp = self.temperature_cx100
        if temp < 2000:
            t2 = (dt * dt) >> 31
            offset2 = _div_trunc(5 * (temp - 2000) * (temp - 2000), 2)
            sens2 = _div_trunc(offset2, 2)
        else:
            t2 = offset2 = sens2 = 0
        self.temperature_cx100 = temp - t2
        offset -= offset2
        sens -= sens2
        return (float(int(d1) * sens) / 2097152.0 - float(offset)) / 32768.0

    def celsius(self) -> int:
        """Last calculated temperature rounded to whole degrees Celsius."""
        return self._celsius

    def average(self, samples: Iterable[tuple[int, int]]) -> tuple[int, float]:
        """Average a series of ``(d2, d1)`` readings.

        Returns ``(celsius, pascal)``; the averaged temperature also becomes the
        current :meth:`celsius` value.
        """
        pressure_total = 0.0
        temp_total = 0
        count = 0
        for d2, d1 in samples:
            self.calculate_temperature(d2)
            pressure_total += self.calculate_pressure(d1)
            temp_total += self.temperature_cx100
            count += 1
        if count == 0:
            raise ValueError("at least one sample is required")
        self._celsius = _round_cx100(_div_trunc(temp_total, count))
        pascal = (pressure_total + count // 2) / count
        return self._celsius, pascal