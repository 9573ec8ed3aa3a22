"""Request and response schemas for the local API."""
