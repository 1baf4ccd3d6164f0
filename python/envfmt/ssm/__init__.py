"""
envfmt/ssm/__init__.py

Parameter Store access: the client boundary, paginated retrieval, and the
throttled writer.
"""

from envfmt.ssm.client import BotoParameterStoreClient, ParameterStoreClient
from envfmt.ssm.fetch import fetch_all, fetch_page
from envfmt.ssm.writer import ThrottledWriter

__all__ = [
    "ParameterStoreClient",
    "BotoParameterStoreClient",
    "fetch_all",
    "fetch_page",
    "ThrottledWriter",
]
