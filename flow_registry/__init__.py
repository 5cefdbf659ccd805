"""Flow registry: named flows with an append-only, server-versioned snapshot history."""
