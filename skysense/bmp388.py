"""BMP388 barometer: calibration parsing, compensation and altitude conversion."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

CHIP_ID = 0x50
SPI_READ = 0x80

REG_CHIP_ID = 0x00
REG_DATA = 0x04
REG_PWR_CTRL = 0x1B
REG_OSR = 0x1C
REG_ODR = 0x1D
REG_CONFIG = 0x1F
REG_CALIB_DATA = 0x31
REG_CMD = 0x7E

SOFT_RESET = 0xB6

LEN_CALIB_DATA = 21
LEN_P_T_DATA = 6

MIN_TEMP = -40.0
MAX_TEMP = 85.0
MIN_PRES = 30000.0
MAX_PRES = 125000.0

_CALIB_STRUCT = struct.Struct("<HHbhhbbHHbbhbb")


class SensorComponent(IntEnum):
    """Which compensated readings are wanted."""

    PRESS = 1
    TEMP = 2
    PRESS_TEMP = 3


@dataclass(frozen=True)
class CalibrationData:
    """Trim coefficients scaled to floating point, as used by compensation."""

    par_t1: float = 0.0
    par_t2: float = 0.0
    par_t3: float = 0.0
    par_p1: float = 0.0
    par_p2: float = 0.0
    par_p3: float = 0.0
    par_p4: float = 0.0
    par_p5: float = 0.0
    par_p6: float = 0.0
    par_p7: float = 0.0
    par_p8: float = 0.0
    par_p9: float = 0.0
    par_p10: float = 0.0
    par_p11: float = 0.0


@dataclass(frozen=True)
class CompensatedData:
    """Compensated temperature in degrees Celsius and pressure in pascal."""

    temperature: float
    pressure: float


def parse_calibration(reg_data: bytes) -> CalibrationData:
    """Decode the 21 calibration register bytes into scaled coefficients."""
    if len(reg_data) != LEN_CALIB_DATA:
        raise ValueError(
            f"calibration data must be {LEN_CALIB_DATA} bytes, got {len(reg_data)}"
        )
    (t1, t2, t3, p1, p2, p3, p4, p5, p6, p7, p8, p9, p10, p11) = _CALIB_STRUCT.unpack(
        bytes(reg_data)
    )
    return CalibrationData(
        par_t1=t1 / 2.0**-8,
        par_t2=t2 / 2.0**30,
        par_t3=t3 / 2.0**48,
        par_p1=(p1 - 16384) / 2.0**20,
        par_p2=(p2 - 16384) / 2.0**29,
        par_p3=p3 / 2.0**32,
        par_p4=p4 / 2.0**37,
        par_p5=p5 / 2.0**-3,
        par_p6=p6 / 2.0**6,
        par_p7=p7 / 2.0**8,
        par_p8=p8 / 2.0**15,
        par_p9=p9 / 2.0**48,
        par_p10=p10 / 2.0**48,
        par_p11=p11 / 2.0**65,
    )


def parse_sensor_data(reg_data: bytes) -> tuple[int, int]:
    """Split the six data register bytes into raw ``(pressure, temperature)``."""
    if len(reg_data) != LEN_P_T_DATA:
        raise ValueError(f"sensor data must be {LEN_P_T_DATA} bytes, got {len(reg_data)}")
    data = bytes(reg_data)
    return int.from_bytes(data[0:3], "little"), int.from_bytes(data[3:6], "little")


class Bmp388Compensator:
    """Turns raw readings into temperature and pressure using calibration data.

    The linearised temperature from the last temperature compensation is kept,
    since pressure compensation depends on it.
    """

    def __init__(self, calibration: CalibrationData) -> None:
        self.calibration = calibration
        self.t_lin = 0.0

    def compensate(
        self,
        uncomp_pressure: int,
        uncomp_temperature: int,
        components: int = SensorComponent.PRESS_TEMP,
    ) -> CompensatedData:
        """Compensate the selected components; unselected ones read as zero."""
        if components == SensorComponent.PRESS_TEMP:
            temperature = self._compensate_temperature(uncomp_temperature)
            pressure = self._compensate_pressure(uncomp_pressure)
        elif components == SensorComponent.PRESS:
            # temperature must still be compensated first for t_lin
            self._compensate_temperature(uncomp_temperature)
            temperature = 0.0
            pressure = self._compensate_pressure(uncomp_pressure)
        elif components == SensorComponent.TEMP:
            temperature = self._compensate_temperature(uncomp_temperature)
            pressure = 0.0
        else:
            temperature = 0.0
            pressure = 0.0
        return CompensatedData(temperature=temperature, pressure=pressure)

    def _compensate_temperature(self, uncomp_temperature: int) -> float:
        cal = self.calibration
        partial1 = uncomp_temperature - cal.par_t1
        partial2 = partial1 * cal.par_t2
        t_lin = partial2 + partial1 * partial1 * cal.par_t3
        self.t_lin = min(max(t_lin, MIN_TEMP), MAX_TEMP)
        return self.t_lin

    def _compensate_pressure(self, uncomp_pressure: int) -> float:
        cal = self.calibration
        tlin = self.t_lin
        tlin2 = tlin * tlin
        tlin3 = tlin2 * tlin
        pres = float(uncomp_pressure)
        pres2 = pres * pres
        pres3 = pres2 * pres

        out1 = cal.par_p5 + cal.par_p6 * tlin + cal.par_p7 * tlin2 + cal.par_p8 * tlin3
        out2 = pres * (cal.par_p1 + cal.par_p2 * tlin + cal.par_p3 * tlin2 + cal.par_p4 * tlin3)
        out3 = pres2 * (cal.par_p9 + cal.par_p10 * tlin) + pres3 * cal.par_p11
        comp = out1 + out2 + out3
        return min(max(comp, MIN_PRES), MAX_PRES)


def pa_to_altitude_cm(pa: float) -> float:
    """Standard-atmosphere altitude in centimetres for a pressure in pascal."""
    return 4430769.396 * (1.0 - (pa / 101325.0) ** 0.190284)