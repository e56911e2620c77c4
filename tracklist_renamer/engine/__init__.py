"""Heuristic naming engine: normalization, filename parsing and matching."""
