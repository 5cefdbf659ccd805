"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from flow_registry.infrastructure.
"""

from flow_registry.application.interfaces.repositories import IFlowRepository
from flow_registry.application.interfaces.services import ILinkService

__all__ = [
    "IFlowRepository",
    "ILinkService",
]
