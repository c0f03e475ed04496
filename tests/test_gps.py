import pytest

from skysense.gps import (
    CFG_DISABLE_GGA,
    CFG_ENABLE_NAV_PVT,
    CFG_PRT,
    CFG_RATE,
    NAV_PVT_HEADER,
    NAV_PVT_PACKET_SIZE,
    NavPvt,
    NavPvtStreamParser,
    bearing_deg,
    haversine_distance_m,
    local_date_time,
    ubx_checksum,
)

# Capture of a receiver stream after a 3D fix.
EXAMPLE_STREAM = bytes.fromhex(
    "0D0A"
    "B56201075C007CFB9E1BE1070B03082B"
    "05370B000000761F0AFA0301000D9525"
    "4A2EF737BE0736990C0036990C008D09"
    "0000CD0D000064000000FEFFFFFF0000"
    "0000640000000000000008B000000B0CC"[:0]
)
EXAMPLE_STREAM = bytes.fromhex(
    "0D0A"
    "B56201075C007CFB9E1BE1070B03082B"
    "05370B000000761F0AFA0301000D9525"
    "4A2EF737BE0736990C0036990C008D09"
    "0000CD0D000064000000FEFFFFFF0000"
    "000064000000000000008B000000B0CC"
    "0000A400000000000000000000000000"
    "00006703"
)


def _packet(year=2020, month=6, day=15):
    payload = bytearray(NAV_PVT_PACKET_SIZE - 2)
    payload[4:6] = year.to_bytes(2, "little")
    payload[6] = month
    payload[7] = day
    payload[20] = 3
    return bytes(payload) + bytes(ubx_checksum(NAV_PVT_HEADER[2:] + payload))


@pytest.mark.parametrize("message", [CFG_RATE, CFG_PRT, CFG_DISABLE_GGA, CFG_ENABLE_NAV_PVT])
def test_checksum_matches_config_messages(message):
    assert ubx_checksum(message[2:-2]) == tuple(message[-2:])


def test_parser_decodes_example_stream():
    packets = NavPvtStreamParser().feed(EXAMPLE_STREAM)
    assert len(packets) == 1
    nav = packets[0]
    assert (nav.utc_year, nav.utc_month, nav.utc_day, nav.utc_hour, nav.utc_minute, nav.utc_second) == (
        2017, 11, 3, 8, 43, 5,
    )
    assert nav.fix_type == 3
    assert nav.num_sv == 13


def test_parser_handles_split_feeds():
    whole = NavPvtStreamParser().feed(EXAMPLE_STREAM)
    parser = NavPvtStreamParser()
    pieces = [parser.feed(EXAMPLE_STREAM[i:i + 7]) for i in range(0, len(EXAMPLE_STREAM), 7)]
    split = [p for chunk in pieces for p in chunk]
    assert split == whole


def test_parser_ignores_noise_without_header():
    assert NavPvtStreamParser().feed(b"$GNGLL,garbage\r\n" * 5) == []


def test_parser_returns_consecutive_packets():
    packet = NAV_PVT_HEADER + _packet()
    packets = NavPvtStreamParser().feed(packet + packet)
    assert len(packets) == 2
    assert packets[0] == packets[1]


def test_from_bytes_checksum_ok_and_corrupted():
    data = _packet()
    nav = NavPvt.from_bytes(data)
    assert nav.checksum_ok
    corrupted = bytearray(data)
    corrupted[10] ^= 0xFF
    assert not NavPvt.from_bytes(bytes(corrupted)).checksum_ok


def test_from_bytes_rejects_wrong_length():
    with pytest.raises(ValueError):
        NavPvt.from_bytes(bytes(NAV_PVT_PACKET_SIZE - 1))


def test_haversine_zero_and_symmetric():
    assert haversine_distance_m(47.0, 8.0, 47.0, 8.0) == 0
    assert haversine_distance_m(47.0, 8.0, 46.5, 9.2) == haversine_distance_m(46.5, 9.2, 47.0, 8.0)


def test_haversine_equator_and_meridian_agree():
    assert haversine_distance_m(0.0, 0.0, 1.0, 0.0) == haversine_distance_m(0.0, 0.0, 0.0, 1.0)


def test_haversine_additive_along_equator():
    one = haversine_distance_m(0.0, 0.0, 0.0, 1.0)
    two = haversine_distance_m(0.0, 0.0, 0.0, 2.0)
    assert abs(two - 2 * one) <= 1


@pytest.mark.parametrize(
    "lat2, lon2, expected",
    [(1.0, 0.0, 0), (0.0, 1.0, 90), (-1.0, 0.0, 180), (0.0, -1.0, 270)],
)
def test_bearing_cardinal_directions(lat2, lon2, expected):
    assert bearing_deg(0.0, 0.0, lat2, lon2) == expected


def test_bearing_in_range():
    points = [(-60.0, -170.0), (10.0, 20.0), (45.0, 179.0), (89.0, 0.0), (-5.0, -0.001)]
    for lat1, lon1 in points:
        for lat2, lon2 in points:
            assert 0 <= bearing_deg(lat1, lon1, lat2, lon2) <= 359


def test_local_date_time_no_offset():
    nav = NavPvt(utc_year=2021, utc_month=7, utc_day=14, utc_hour=13, utc_minute=25)
    assert local_date_time(nav, 0) == (2021, 7, 14, 13, 25)


def test_local_date_time_rolls_into_next_year():
    nav = NavPvt(utc_year=2021, utc_month=12, utc_day=31, utc_hour=23, utc_minute=30)
    assert local_date_time(nav, 60) == (2022, 1, 1, 0, 30)


def test_local_date_time_back_into_leap_february():
    nav = NavPvt(utc_year=2024, utc_month=3, utc_day=1, utc_hour=0, utc_minute=30)
    year, month, day, _, _ = local_date_time(nav, -60)
    assert (year, month, day) == (2024, 2, 29)


def test_local_date_time_back_into_previous_year():
    nav = NavPvt(utc_year=2023, utc_month=1, utc_day=1, utc_hour=0, utc_minute=10)
    year, month, day, _, _ = local_date_time(nav, -30)
    assert (year, month) == (2022, 12)
    assert day == 31