"""Device-linking service: devices, history, recordings, live streams and access tokens."""

__all__ = ["manager", "models"]