"""Domain model, ports and use cases; no HTTP or configuration code."""
