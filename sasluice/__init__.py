"""TCP services and tools that collect, translate, screen and publish telemetry as JSON."""

__version__ = "0.1.0"
__all__ = ["bridge", "collector", "weather", "quantum_sluice", "core", "harvester"]