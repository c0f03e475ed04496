"""Mahony AHRS attitude filter and quaternion helpers."""

from __future__ import annotations

import math

Quaternion = tuple[float, float, float, float]


class MahonyAHRS:
    """Quaternion attitude estimate driven by gyro, accelerometer and magnetometer.

    Gyro rates are in radians per second. ``two_kp`` and ``two_ki`` are twice the
    proportional and integral feedback gains.
    """

    def __init__(self, two_kp: float = 10.0, two_ki: float = 0.0) -> None:
        self.two_kp = two_kp
        self.two_ki = two_ki
        self.q0, self.q1, self.q2, self.q3 = 1.0, 0.0, 0.0, 0.0
        self._ifb = [0.0, 0.0, 0.0]

    def quaternion(self) -> Quaternion:
        """Current attitude quaternion (q0 scalar first)."""
        return (self.q0, self.q1, self.q2, self.q3)

    def update_9dof(self, use_accel, use_mag, dt, gx, gy, gz, ax, ay, az, mx, my, mz) -> None:
        """Advance the estimate using gyro, accelerometer and magnetometer data."""
        if not use_mag:
            self.update_6dof(use_accel, dt, gx, gy, gz, ax, ay, az)
            return

        if use_accel:
            ax, ay, az = _normalise(ax, ay, az)
            mx, my, mz = _normalise(mx, my, mz)
            q0, q1, q2, q3 = self.quaternion()
            q0q0, q0q1, q0q2, q0q3 = q0 * q0, q0 * q1, q0 * q2, q0 * q3
            q1q1, q1q2, q1q3 = q1 * q1, q1 * q2, q1 * q3
            q2q2, q2q3, q3q3 = q2 * q2, q2 * q3, q3 * q3

            # reference direction of the earth's magnetic field
            hx = 2.0 * (mx * (0.5 - q2q2 - q3q3) + my * (q1q2 - q0q3) + mz * (q1q3 + q0q2))
            hy = 2.0 * (mx * (q1q2 + q0q3) + my * (0.5 - q1q1 - q3q3) + mz * (q2q3 - q0q1))
            bx = math.sqrt(hx * hx + hy * hy)
            bz = 2.0 * (mx * (q1q3 - q0q2) + my * (q2q3 + q0q1) + mz * (0.5 - q1q1 - q2q2))

            halfvx = q1q3 - q0q2
            halfvy = q0q1 + q2q3
            halfvz = q0q0 - 0.5 + q3q3
            halfwx = bx * (0.5 - q2q2 - q3q3) + bz * (q1q3 - q0q2)
            halfwy = bx * (q1q2 - q0q3) + bz * (q0q1 + q2q3)
            halfwz = bx * (q0q2 + q1q3) + bz * (0.5 - q1q1 - q2q2)

            error = (
                (ay * halfvz - az * halfvy) + (my * halfwz - mz * halfwy),
                (az * halfvx - ax * halfvz) + (mz * halfwx - mx * halfwz),
                (ax * halfvy - ay * halfvx) + (mx * halfwy - my * halfwx),
            )
            gx, gy, gz = self._apply_feedback(dt, (gx, gy, gz), error)

        self._integrate(dt, gx, gy, gz)

    def update_6dof(self, use_accel, dt, gx, gy, gz, ax, ay, az) -> None:
        """Advance the estimate using gyro and (optionally) accelerometer data."""
        if use_accel:
            ax, ay, az = _normalise(ax, ay, az)
            q0, q1, q2, q3 = self.quaternion()
            halfvx = q1 * q3 - q0 * q2
            halfvy = q0 * q1 + q2 * q3
            halfvz = q0 * q0 - 0.5 + q3 * q3
            error = (
                ay * halfvz - az * halfvy,
                az * halfvx - ax * halfvz,
                ax * halfvy - ay * halfvx,
            )
            gx, gy, gz = self._apply_feedback(dt, (gx, gy, gz), error)

        self._integrate(dt, gx, gy, gz)

    def _apply_feedback(self, dt, gyro, error):
        if self.two_ki > 0.0:
            self._ifb = [fb + self.two_ki * e * dt for fb, e in zip(self._ifb, error)]
            gyro = tuple(g + fb for g, fb in zip(gyro, self._ifb))
        else:
            self._ifb = [0.0, 0.0, 0.0]
        return tuple(g + self.two_kp * e for g, e in zip(gyro, error))

    def _integrate(self, dt, gx, gy, gz) -> None:
        half_dt = 0.5 * dt
        gx, gy, gz = gx * half_dt, gy * half_dt, gz * half_dt
        qa, qb, qc, qd = self.quaternion()
        q0 = qa + (-qb * gx - qc * gy - qd * gz)
        q1 = qb + (qa * gx + qc * gz - qd * gy)
        q2 = qc + (qa * gy - qb * gz + qd * gx)
        q3 = qd + (qa * gz + qb * gy - qc * gx)
        self.q0, self.q1, self.q2, self.q3 = _normalise(q0, q1, q2, q3)


def _normalise(*components: float) -> tuple[float, ...]:
    inv_norm = 1.0 / math.sqrt(sum(c * c for c in components))
    return tuple(c * inv_norm for c in components)


def quaternion_to_yaw_pitch_roll(q0, q1, q2, q3) -> tuple[float, float, float]:
    """Convert a quaternion to (yaw, pitch, roll) in degrees."""
    q0, q1, q2, q3 = _normalise(q0, q1, q2, q3)
    yaw = math.degrees(math.atan2(2.0 * (q1 * q2 + q0 * q3), q0 * q0 + q1 * q1 - q2 * q2 - q3 * q3))
    sin_pitch = max(-1.0, min(1.0, 2.0 * (q1 * q3 - q0 * q2)))
    pitch = math.degrees(-math.asin(sin_pitch))
    roll = math.degrees(math.atan2(2.0 * (q0 * q1 + q2 * q3), q0 * q0 - q1 * q1 - q2 * q2 + q3 * q3))
    return yaw, pitch, roll


def gravity_compensated_accel(ax, ay, az, q0, q1, q2, q3) -> float:
    """Earth-frame vertical acceleration in cm/s^2 with gravity removed.

    ``ax``, ``ay``, ``az`` are in milli-g.
    """
    acc = (
        2.0 * (q1 * q3 - q0 * q2) * ax
        + 2.0 * (q0 * q1 + q2 * q3) * ay
        + (q0 * q0 - q1 * q1 - q2 * q2 + q3 * q3) * az
        - 1000.0
    )
    return acc * 0.9807