"""Cache layer - path derivation, staleness and atomic writes."""
