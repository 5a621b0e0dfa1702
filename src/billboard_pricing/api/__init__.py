"""API subpackage - FastAPI surface over the pricing service."""
