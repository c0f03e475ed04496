import math

import pytest

from skysense.imu import MahonyAHRS, gravity_compensated_accel, quaternion_to_yaw_pitch_roll


def axis_quaternion(axis, degrees):
    half = math.radians(degrees) / 2.0
    s = math.sin(half)
    x, y, z = axis
    return (math.cos(half), x * s, y * s, z * s)


def norm(q):
    return math.sqrt(sum(c * c for c in q))


def test_starts_at_identity():
    assert MahonyAHRS().quaternion() == (1.0, 0.0, 0.0, 0.0)


def test_at_rest_stays_level():
    ahrs = MahonyAHRS()
    for _ in range(100):
        ahrs.update_6dof(True, 0.01, 0.0, 0.0, 0.0, 0.0, 0.0, 1000.0)
    assert ahrs.quaternion() == pytest.approx((1.0, 0.0, 0.0, 0.0), abs=1e-9)


def test_gyro_integration_yaw():
    ahrs = MahonyAHRS()
    for _ in range(1000):
        ahrs.update_6dof(False, 0.001, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0)
    yaw, pitch, roll = quaternion_to_yaw_pitch_roll(*ahrs.quaternion())
    assert yaw == pytest.approx(math.degrees(1.0), abs=0.05)
    assert pitch == pytest.approx(0.0, abs=1e-6)
    assert roll == pytest.approx(0.0, abs=1e-6)


def test_quaternion_stays_normalised():
    ahrs = MahonyAHRS()
    for i in range(200):
        ahrs.update_9dof(True, True, 0.01, 0.3, -0.2, 0.1, 10.0, 20.0, 990.0, 300.0, 50.0, -400.0)
    assert norm(ahrs.quaternion()) == pytest.approx(1.0)


def test_accel_feedback_levels_tilted_attitude():
    ahrs = MahonyAHRS()
    ahrs.q0, ahrs.q1, ahrs.q2, ahrs.q3 = axis_quaternion((1.0, 0.0, 0.0), 20.0)
    for _ in range(2000):
        ahrs.update_6dof(True, 0.01, 0.0, 0.0, 0.0, 0.0, 0.0, 1000.0)
    _, pitch, roll = quaternion_to_yaw_pitch_roll(*ahrs.quaternion())
    assert abs(roll) < 0.5
    assert abs(pitch) < 0.5


def test_integral_feedback_also_converges():
    ahrs = MahonyAHRS(two_kp=10.0, two_ki=1.0)
    ahrs.q0, ahrs.q1, ahrs.q2, ahrs.q3 = axis_quaternion((0.0, 1.0, 0.0), 15.0)
    for _ in range(3000):
        ahrs.update_6dof(True, 0.01, 0.0, 0.0, 0.0, 0.0, 0.0, 1000.0)
    _, pitch, _ = quaternion_to_yaw_pitch_roll(*ahrs.quaternion())
    assert abs(pitch) < 0.5


def test_magnetometer_corrects_yaw():
    ahrs = MahonyAHRS()
    ahrs.q0, ahrs.q1, ahrs.q2, ahrs.q3 = axis_quaternion((0.0, 0.0, 1.0), 30.0)
    for _ in range(3000):
        ahrs.update_9dof(True, True, 0.01, 0.0, 0.0, 0.0, 0.0, 0.0, 1000.0, 1.0, 0.0, 0.0)
    yaw, _, _ = quaternion_to_yaw_pitch_roll(*ahrs.quaternion())
    assert abs(yaw) < 1.0


def test_9dof_without_mag_matches_6dof():
    a, b = MahonyAHRS(), MahonyAHRS()
    for _ in range(50):
        a.update_9dof(True, False, 0.01, 0.2, 0.1, -0.3, 100.0, -50.0, 950.0, 9.0, 9.0, 9.0)
        b.update_6dof(True, 0.01, 0.2, 0.1, -0.3, 100.0, -50.0, 950.0)
    assert a.quaternion() == b.quaternion()


def test_identity_angles():
    assert quaternion_to_yaw_pitch_roll(1.0, 0.0, 0.0, 0.0) == pytest.approx((0.0, 0.0, 0.0))


@pytest.mark.parametrize(
    "axis,index",
    [((0.0, 0.0, 1.0), 0), ((0.0, 1.0, 0.0), 1), ((1.0, 0.0, 0.0), 2)],
)
def test_single_axis_rotation(axis, index):
    angles = quaternion_to_yaw_pitch_roll(*axis_quaternion(axis, 30.0))
    assert angles[index] == pytest.approx(30.0)
    others = [a for i, a in enumerate(angles) if i != index]
    assert others == pytest.approx([0.0, 0.0], abs=1e-9)


def test_angles_ignore_quaternion_scale():
    q = axis_quaternion((0.0, 0.0, 1.0), 45.0)
    scaled = tuple(3.0 * c for c in q)
    assert quaternion_to_yaw_pitch_roll(*scaled) == pytest.approx(quaternion_to_yaw_pitch_roll(*q))


def test_gravity_removed_when_level():
    assert gravity_compensated_accel(0.0, 0.0, 1000.0, 1.0, 0.0, 0.0, 0.0) == pytest.approx(0.0)


def test_gravity_removed_when_inverted():
    q = axis_quaternion((1.0, 0.0, 0.0), 180.0)
    assert gravity_compensated_accel(0.0, 0.0, -1000.0, *q) == pytest.approx(0.0, abs=1e-9)


def test_one_extra_g_in_cm_per_s2():
    assert gravity_compensated_accel(0.0, 0.0, 2000.0, 1.0, 0.0, 0.0, 0.0) == pytest.approx(980.7)