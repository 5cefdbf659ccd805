"""Infrastructure implementations of application service interfaces."""

from flow_registry.infrastructure.services.link_service import LinkService

__all__ = ["LinkService"]
