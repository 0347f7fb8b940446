"""Async client for the rent management REST backend."""

from .client import TRANSPORT_FAILURE, RentApiClient, RentApiError
from .dto import ApiResponse, SendDocumentRequest

__all__ = [
    "RentApiClient",
    "RentApiError",
    "ApiResponse",
    "SendDocumentRequest",
    "TRANSPORT_FAILURE",
]
