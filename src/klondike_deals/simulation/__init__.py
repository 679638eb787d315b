"""Move rules and the heuristic solver."""
