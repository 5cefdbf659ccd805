"""Infrastructure layer: persistence backends and service implementations."""
