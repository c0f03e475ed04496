"""u-blox UBX NAV-PVT decoding and GPS position and time helpers."""

from __future__ import annotations

import math
import struct
from dataclasses import astuple, dataclass
from typing import Iterable

NAV_PVT_HEADER = bytes((0xB5, 0x62, 0x01, 0x07, 0x5C, 0x00))
NAV_PVT_PACKET_SIZE = 94
EARTH_RADIUS_M = 6371009.0

VALID_DATE = 0x01
VALID_TIME = 0x02
VALID_UTC = 0x04
VALID_MAG = 0x08

FIX_NONE = 0
FIX_DEAD_RECKONING = 1
FIX_2D = 2
FIX_3D = 3
FIX_GNSS_DR = 4
FIX_TIME = 5

FLAGS1_GNSS_FIX_OK = 0x01
FLAGS1_DIFF_SOLN = 0x02
FLAGS1_HEADING_VALID = 0x10

# Receiver configuration messages, complete with sync chars and checksum.
CFG_GNSS = bytes((
    0xB5, 0x62, 0x06, 0x3E, 0x3C, 0x00, 0x00, 0x00, 0x20, 0x07, 0x00, 0x08, 0x20, 0x00, 0x01,
    0x00, 0x01, 0x01, 0x01, 0x01, 0x03, 0x00, 0x00, 0x00, 0x01, 0x01, 0x02, 0x04, 0x08, 0x00,
    0x00, 0x00, 0x01, 0x01, 0x03, 0x08, 0x10, 0x00, 0x00, 0x00, 0x01, 0x01, 0x04, 0x00, 0x08,
    0x00, 0x00, 0x00, 0x01, 0x01, 0x05, 0x00, 0x03, 0x00, 0x00, 0x00, 0x01, 0x01, 0x06, 0x08,
    0x0E, 0x00, 0x00, 0x00, 0x01, 0x01, 0x3C, 0xAD,
))
# airborne < 4g dynamic model, UTC referenced to GPS
CFG_NAV5 = bytes((
    0xB5, 0x62, 0x06, 0x24, 0x24, 0x00, 0xFF, 0xFF, 0x08, 0x02,
    0x00, 0x00, 0x00, 0x00, 0x10, 0x27, 0x00, 0x00, 0x05, 0x00,
    0xFA, 0x00, 0xFA, 0x00, 0x64, 0x00, 0x2C, 0x01, 0x00, 0x00,
    0x00, 0x00, 0x10, 0x27, 0x00, 0x00, 0x03, 0x00, 0x00, 0x00,
    0x00, 0x00, 0x51, 0x10,
))
CFG_PRT = bytes((
    0xB5, 0x62, 0x06, 0x00, 0x14, 0x00, 0x01, 0x00, 0x00, 0x00, 0xD0, 0x08, 0x00, 0x00, 0x00,
    0xC2, 0x01, 0x00, 0x07, 0x00, 0x03, 0x00, 0x00, 0x00, 0x00, 0x00, 0xC0, 0x7E,
))
CFG_RATE = bytes((0xB5, 0x62, 0x06, 0x08, 0x06, 0x00, 0x64, 0x00, 0x01, 0x00, 0x01, 0x00, 0x7A, 0x12))
CFG_CFG = bytes((
    0xB5, 0x62, 0x06, 0x09, 0x0D, 0x00, 0x00, 0x00, 0x00, 0x00, 0xFF, 0xFF, 0x00, 0x00, 0x00,
    0x00, 0x00, 0x00, 0x01, 0x1B, 0xA9,
))
CFG_DISABLE_GGA = bytes((0xB5, 0x62, 0x06, 0x01, 0x08, 0x00, 0xF0, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0xFF, 0x23))
CFG_DISABLE_GLL = bytes((0xB5, 0x62, 0x06, 0x01, 0x08, 0x00, 0xF0, 0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x2A))
CFG_DISABLE_GSV = bytes((0xB5, 0x62, 0x06, 0x01, 0x08, 0x00, 0xF0, 0x03, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x02, 0x38))
CFG_DISABLE_RMC = bytes((0xB5, 0x62, 0x06, 0x01, 0x08, 0x00, 0xF0, 0x04, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x03, 0x3F))
CFG_DISABLE_VTG = bytes((0xB5, 0x62, 0x06, 0x01, 0x08, 0x00, 0xF0, 0x05, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x04, 0x46))
CFG_DISABLE_GSA = bytes((0xB5, 0x62, 0x06, 0x01, 0x08, 0x00, 0xF0, 0x02, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x01, 0x31))
CFG_ENABLE_NAV_PVT = bytes((0xB5, 0x62, 0x06, 0x01, 0x08, 0x00, 0x01, 0x07, 0x00, 0x01, 0x00, 0x00, 0x00, 0x00, 0x18, 0xE1))

# Messages sent, in order, once the receiver runs at 115200 baud.
CONFIG_115200_SEQUENCE = (
    CFG_DISABLE_GGA,
    CFG_DISABLE_GLL,
    CFG_DISABLE_GSV,
    CFG_DISABLE_RMC,
    CFG_DISABLE_VTG,
    CFG_DISABLE_GSA,
    CFG_ENABLE_NAV_PVT,
    CFG_GNSS,
    CFG_NAV5,
    CFG_RATE,
    CFG_CFG,
)

_NAV_PVT_STRUCT = struct.Struct("<IHBBBBBBIiBBBBiiiiIIiiiiiIIHB5xihHBB")
_PAYLOAD_SIZE = NAV_PVT_PACKET_SIZE - 2


def ubx_checksum(data: Iterable[int]) -> tuple[int, int]:
    """8-bit Fletcher checksum (CK_A, CK_B) over class, id, length and payload."""
    ck_a = ck_b = 0
    for byte in data:
        ck_a = (ck_a + byte) & 0xFF
        ck_b = (ck_b + ck_a) & 0xFF
    return ck_a, ck_b


@dataclass(frozen=True)
class NavPvt:
    """Decoded UBX NAV-PVT navigation solution."""

    time_of_week_ms: int = 0
    utc_year: int = 0
    utc_month: int = 0
    utc_day: int = 0
    utc_hour: int = 0
    utc_minute: int = 0
    utc_second: int = 0
    validity: int = 0
    time_accuracy_ns: int = 0
    nano_seconds: int = 0
    fix_type: int = 0
    flags1: int = 0
    flags2: int = 0
    num_sv: int = 0
    lon_deg7: int = 0
    lat_deg7: int = 0
    height_ellipsoid_mm: int = 0
    height_msl_mm: int = 0
    horz_accuracy_mm: int = 0
    vert_accuracy_mm: int = 0
    vel_north_mmps: int = 0
    vel_east_mmps: int = 0
    vel_down_mmps: int = 0
    ground_speed_mmps: int = 0
    heading_motion_deg5: int = 0
    speed_accuracy_mmps: int = 0
    heading_accuracy_deg5: int = 0
    pos_dop: int = 0
    flags3: int = 0
    heading_deg5: int = 0
    magnetic_declination_deg2: int = 0
    declination_accuracy_deg2: int = 0
    ck_a: int = 0
    ck_b: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "NavPvt":
        """Decode the 94 bytes that follow the NAV-PVT header (payload and checksum)."""
        if len(data) != NAV_PVT_PACKET_SIZE:
            raise ValueError(
                f"NAV-PVT packet must be {NAV_PVT_PACKET_SIZE} bytes, got {len(data)}"
            )
        return cls(*_NAV_PVT_STRUCT.unpack(bytes(data)))

    @property
    def latitude(self) -> float:
        return self.lat_deg7 / 1e7

    @property
    def longitude(self) -> float:
        return self.lon_deg7 / 1e7

    @property
    def checksum_ok(self) -> bool:
        """True if the carried checksum matches the packet contents."""
        payload = _NAV_PVT_STRUCT.pack(*astuple(self))[:_PAYLOAD_SIZE]
        return ubx_checksum(NAV_PVT_HEADER[2:] + payload) == (self.ck_a, self.ck_b)


class NavPvtStreamParser:
    """Extracts NAV-PVT packets from a raw receiver byte stream."""

    def __init__(self) -> None:
        self._header_matched = 0
        self._packet: bytearray | None = None

    def feed(self, data: bytes) -> list[NavPvt]:
        """Consume bytes and return the packets completed by them."""
        packets: list[NavPvt] = []
        for byte in data:
            if self._packet is None:
                if byte == NAV_PVT_HEADER[self._header_matched]:
                    self._header_matched += 1
                else:
                    self._header_matched = 0
                if self._header_matched == len(NAV_PVT_HEADER):
                    self._header_matched = 0
                    self._packet = bytearray()
            else:
                self._packet.append(byte)
                if len(self._packet) == NAV_PVT_PACKET_SIZE:
                    packets.append(NavPvt.from_bytes(bytes(self._packet)))
                    self._packet = None
        return packets


def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
    """Great-circle distance in whole metres using the mean earth radius."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    lat1r = math.radians(lat1)
    lat2r = math.radians(lat2)
    sindlat = math.sin(dlat / 2.0)
    sindlon = math.sin(dlon / 2.0)
    a = sindlat * sindlat + math.cos(lat1r) * math.cos(lat2r) * sindlon * sindlon
    a = min(max(a, 0.0), 1.0)
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return int(EARTH_RADIUS_M * c + 0.5)


def bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
    """Initial bearing from point 1 to point 2, in whole degrees 0..359."""
    dlon = math.radians(lon2 - lon1)
    lat1r = math.radians(lat1)
    lat2r = math.radians(lat2)
    x = math.cos(lat1r) * math.sin(lat2r) - math.sin(lat1r) * math.cos(lat2r) * math.cos(dlon)
    y = math.sin(dlon) * math.cos(lat2r)
    b = math.atan2(y, x) + 2.0 * math.pi
    if b >= 2.0 * math.pi:
        b -= 2.0 * math.pi
    bearing = int(math.degrees(b) + 0.5)
    return min(max(bearing, 0), 359)


def _days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if year % 4 == 0 else 28
    return 30 if month in (4, 6, 9, 11) else 31


def local_date_time(nav, utc_offset_mins: int) -> tuple[int, int, int, int, int]:
    """Shift the packet's UTC date and time by an offset.

    Returns ``(year, month, day, hour, minute)``.
    """
    year, month, day = nav.utc_year, nav.utc_month, nav.utc_day
    minutes = nav.utc_hour * 60 + nav.utc_minute + int(utc_offset_mins)
    if minutes > 1440:
        minutes -= 1440
        day += 1
        if day > _days_in_month(year, month):
            day = 1
            month += 1
        if month > 12:
            month = 1
            year += 1
    elif minutes < 0:
        minutes += 1440
        day -= 1
        if day < 1:
            previous = 12 if month == 1 else month - 1
            day = _days_in_month(year, previous)
            month -= 1
        if month < 1:
            month = 12
            year -= 1
    return year, month, day, minutes // 60, minutes % 60