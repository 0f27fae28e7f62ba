"""Configuration, logging, client lifecycle and connectivity probes."""
