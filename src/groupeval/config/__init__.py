"""Central configuration: constants and experiment options."""
