"""
Gallery Proxy.

A caching proxy in front of the Cloudinary Admin API that serves a
paginated, presentation-ready listing of the images in one asset folder.

Usage:
    # Start server
    gallery-proxy serve

    # Precompute and cache every page
    gallery-proxy warm

    # Check configuration and cache status
    gallery-proxy info
"""

__version__ = "0.1.0"

from .server import create_app

__all__ = [
    "create_app",
]
