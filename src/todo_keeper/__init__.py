"""Console to-do list manager with a locally persisted task store."""

__version__ = "0.1.0"
