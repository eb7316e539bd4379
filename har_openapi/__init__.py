"""Generate OpenAPI documents from captured HTTP traffic (HAR files)."""

__version__ = "0.1.0"
