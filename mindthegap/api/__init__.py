"""Household/donations backend API."""

from mindthegap.api.app import create_app, create_storage

__all__ = ["create_app", "create_storage"]
