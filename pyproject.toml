[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sasluice"
version = "0.1.0"
description = "Small TCP services that collect, translate, screen and publish telemetry as JSON"
requires-python = ">=3.10"
dependencies = []
keywords = ["telemetry", "tcp", "json", "pipeline", "screening", "http"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sasluice-bridge = "sasluice.bridge:main"
sasluice-collector = "sasluice.collector:main"
sasluice-weather = "sasluice.weather:main"
sasluice-sluice = "sasluice.quantum_sluice:main"
sasluice-core = "sasluice.core:main"
sasluice-harvester = "sasluice.harvester:main"

[tool.hatch.build.targets.wheel]
packages = ["sasluice"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
