"""Cards, states and deck handling."""
