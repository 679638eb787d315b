"""Deal generation strategies and pipeline."""
