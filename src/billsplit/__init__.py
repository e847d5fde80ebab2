"""Bill splitting: per-participant allocation of items, tax and tip in minor units."""
