"""
Upstream clients for the rescue dogs API and image CDN.
"""

from rescuedogs_mcp.client.api import RescueDogsClient
from rescuedogs_mcp.client.base import HttpClient, RequestDescriptor
from rescuedogs_mcp.client.classifier import classify_exception, classify_status
from rescuedogs_mcp.client.images import ImageClient, build_transform_url

__all__ = [
    "HttpClient",
    "RequestDescriptor",
    "RescueDogsClient",
    "ImageClient",
    "build_transform_url",
    "classify_status",
    "classify_exception",
]
