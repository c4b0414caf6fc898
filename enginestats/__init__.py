"""EngineStats - smoothed hardware telemetry sampler."""

__version__ = "1.0.0"
