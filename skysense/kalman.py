"""Four-state Kalman filter fusing altitude and vertical acceleration."""

from __future__ import annotations


class KalmanFilter4D:
    """Tracks altitude z, climb rate v, acceleration a and acceleration bias b.

    Measurements are altitude and gravity-compensated vertical acceleration.
    ``k_adapt`` injects extra uncertainty in high-acceleration situations so the
    filter responds faster.
    """

    def __init__(
        self,
        a_variance: float,
        k_adapt: float,
        z_initial: float,
        v_initial: float,
        a_initial: float,
        z_meas_variance: float,
        a_meas_variance: float,
        accel_bias_variance: float,
    ) -> None:
        self.accel_variance = a_variance
        self.k_adapt = k_adapt
        self.z_meas_variance = z_meas_variance
        self.a_meas_variance = a_meas_variance
        self._base_bias_variance = accel_bias_variance
        self.bias_variance = accel_bias_variance

        self.z = z_initial
        self.v = v_initial
        self.a = a_initial
        self.b = 0.0

        # upper triangle of the symmetric state covariance
        self._zz, self._zv, self._za, self._zb = 1500.0, 0.0, 0.0, 0.0
        self._vv, self._va, self._vb = 1500.0, 0.0, 0.0
        self._aa, self._ab = 100000.0, 0.0
        self._bb = 1500.0

    @property
    def covariance(self) -> tuple[tuple[float, ...], ...]:
        """The full 4x4 state covariance, rows in z, v, a, b order."""
        return (
            (self._zz, self._zv, self._za, self._zb),
            (self._zv, self._vv, self._va, self._vb),
            (self._za, self._va, self._aa, self._ab),
            (self._zb, self._vb, self._ab, self._bb),
        )

    def predict(self, dt: float) -> None:
        """Propagate state and covariance forward by ``dt`` seconds."""
        accel_true = self.a - self.b
        self.z = self.z + self.v * dt + accel_true * dt * dt * 0.5
        self.v = self.v + accel_true * dt

        dt2 = dt * dt
        dt3 = dt2 * dt
        dt4 = dt2 * dt2
        dt2div2 = dt2 * 0.5
        dt3div2 = dt3 * 0.5
        dt4div2 = dt4 * 0.5
        dt4div4 = dt4 * 0.25

        zz, zv, za, zb = self._zz, self._zv, self._za, self._zb
        vv, va, vb = self._vv, self._va, self._vb
        aa, ab, bb = self._aa, self._ab, self._bb

        self._zz = (
            zz + 2.0 * zv * dt + (za - zb) * dt2 + vv * dt2div2 + (va - vb) * dt3
            + (aa + bb) * dt4div4 - ab * dt4div2
        )
        self._zv = (
            zv + dt * (za - zb + vv) + 3.0 * dt2div2 * (va - vb) - ab * dt3
            + (aa + bb) * dt3div2
        )
        self._za = za + va * dt + (aa - ab) * dt2div2
        self._zb = zb + vb * dt + (ab - bb) * dt2div2
        self._vv = vv + 2.0 * dt * (va - vb) + dt2 * (aa - 2.0 * ab + bb)
        self._va = va + dt * (aa - ab)
        self._vb = vb + dt * (ab - bb)
        self._aa = aa + self.accel_variance
        self._bb = bb + self.bias_variance

    def update(self, zm: float, am: float) -> tuple[float, float]:
        """Correct the estimate with measured altitude and acceleration.

        Returns the updated ``(z, v)``.
        """
        z_err = zm - self.z
        a_err = am - self.a

        zz, zv, za, zb = self._zz, self._zv, self._za, self._zb
        vv, va, vb = self._vv, self._va, self._vb
        aa, ab, bb = self._aa, self._ab, self._bb

        accel_ext = abs(am - self.b)
        s00 = zz + self.z_meas_variance
        s01 = za
        s10 = s01
        s11 = aa + self.a_meas_variance + self.k_adapt * accel_ext * accel_ext

        # only let the bias estimate move freely when acceleration is low
        self.bias_variance = self._base_bias_variance / (1.0 + accel_ext)

        sdetinv = 1.0 / (s00 * s11 - s10 * s01)
        sinv00 = sdetinv * s11
        sinv01 = -sdetinv * s10
        sinv10 = sinv01
        sinv11 = sdetinv * s00

        k00 = zz * sinv00 + za * sinv10
        k01 = zz * sinv01 + za * sinv11
        k10 = zv * sinv00 + va * sinv10
        k11 = zv * sinv01 + va * sinv11
        k20 = za * sinv00 + aa * sinv10
        k21 = za * sinv01 + aa * sinv11
        k30 = zb * sinv00 + ab * sinv10
        k31 = zb * sinv01 + ab * sinv11

        self.z += k00 * z_err + k01 * a_err
        self.v += k10 * z_err + k11 * a_err
        self.a += k20 * z_err + k21 * a_err
        self.b += k30 * z_err + k31 * a_err

        tmp = 1.0 - k00
        self._zz = tmp * zz - k01 * za
        self._zv = tmp * zv - k01 * va
        self._za = tmp * za - k01 * aa
        self._zb = tmp * zb - k01 * ab
        self._vv = -k10 * zv + vv - k11 * va
        self._va = -k10 * za + va - k11 * aa
        self._vb = -k10 * zb + vb - k11 * ab
        self._aa = -k20 * za + (1.0 - k21) * aa
        self._ab = -k20 * zb + (1.0 - k21) * ab
        self._bb = -k30 * zb - k31 * ab + bb

        return self.z, self.v