"""Authentication utilities for Azure Blob Storage."""

from .credentials import authenticate, build_account_sas

__all__ = [
    "authenticate",
    "build_account_sas",
]
