"""Adapters layer - translation between the outside world and the engine."""
