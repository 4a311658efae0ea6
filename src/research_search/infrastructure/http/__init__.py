"""Outbound HTTP plumbing."""

from .base_client import BaseAPIClient

__all__ = ["BaseAPIClient"]
