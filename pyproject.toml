[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "skysense"
version = "0.1.0"
description = "Sensor processing for flight instruments: barometric altitude, attitude fusion, Kalman filtering and GPS packet decoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["variometer", "kalman", "ahrs", "barometer", "gps", "ubx", "altimeter", "ms5611", "bmp388"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["skysense"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
