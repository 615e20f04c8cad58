"""Store adapters for rides and rider profiles."""
