"""Small shared helpers (UTC datetimes, ID generation)."""

from flow_registry.shared.utils.datetime import ensure_utc, utc_now
from flow_registry.shared.utils.generators import generate_cuid

__all__ = ["ensure_utc", "generate_cuid", "utc_now"]
