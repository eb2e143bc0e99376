[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tempwatch"
version = "0.1.0"
description = "Four-channel temperature monitor with hysteresis state tracking and JSON reporting over HTTP"
requires-python = ">=3.10"
dependencies = []
keywords = ["temperature", "monitoring", "hysteresis", "adc", "telemetry"]
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
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tempwatch = "tempwatch.app:main"

[tool.hatch.build.targets.wheel]
packages = ["tempwatch"]

[tool.pytest.ini_options]
addopts = "-ra"
