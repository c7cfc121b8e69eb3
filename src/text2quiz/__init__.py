"""Text2Quiz document ingestion package."""

__version__ = "0.1.0"
