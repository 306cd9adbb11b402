"""Storage service clients and page sources.

This package contains the StorageClient interface, its HTTP implementation,
and the PageSource adapters the browser and bulk runs page through.
"""

from blobctl.remote.base import StorageClient
from blobctl.remote.http import HttpStorageClient
from blobctl.remote.sources import BlobPageSource, PageSource, UploadPageSource

__all__ = [
    "BlobPageSource",
    "HttpStorageClient",
    "PageSource",
    "StorageClient",
    "UploadPageSource",
]
