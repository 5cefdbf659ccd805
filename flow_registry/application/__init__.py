"""Application layer: DTOs, ports (interfaces), validation services, and use cases."""
