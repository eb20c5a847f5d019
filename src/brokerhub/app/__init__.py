"""Application layer: configuration, logging, metrics, wiring."""
