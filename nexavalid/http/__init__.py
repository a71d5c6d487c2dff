"""
NexaValid HTTP Package
======================

JSON request helper for feeding remote data into the validator.
"""

from nexavalid.http.client import RequestError, ResponseDecodeError, make_request

__all__ = [
    "make_request",
    "RequestError",
    "ResponseDecodeError",
]
