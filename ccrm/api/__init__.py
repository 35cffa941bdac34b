"""
API module exposing the registries and services over REST.
"""

from .rest_api import CCRMRestAPI

__all__ = [
    "CCRMRestAPI",
]
