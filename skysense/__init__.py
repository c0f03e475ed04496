"""Sensor processing for flight instruments: barometric altitude, attitude, filtering and GPS."""

__version__ = "0.1.0"
__all__ = ["bmp388", "gps", "imu", "kalman", "madc", "ms5611", "ringbuf"]