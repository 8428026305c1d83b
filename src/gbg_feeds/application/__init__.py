"""Application layer - publishing use cases."""
