[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "badgemagic"
version = "0.1.0"
description = "Model of an 11x44 LED name badge: bitmap animations, data-flash layout, button handling and BLE control protocols"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "led",
    "badge",
    "bitmap",
    "animation",
    "ble",
    "gatt",
    "eeprom",
    "embedded",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["badgemagic"]

[tool.hatch.build.targets.sdist]
include = ["badgemagic", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
