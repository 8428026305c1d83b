"""Poll Göteborg public APIs and publish normalized records to a key-value store."""

__version__ = "0.1.0"
