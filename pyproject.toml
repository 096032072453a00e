[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pcalexpander"
version = "1.0.0"
description = "Driver for the PCAL9555 / PCAL95555 16-bit I2C GPIO expander over a pluggable bus interface"
requires-python = ">=3.10"
dependencies = []
keywords = ["pcal9555", "pcal95555", "i2c", "gpio", "io-expander", "driver"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware :: Hardware Drivers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pcalexpander"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
