"""blobctl - Terminal admin console for content-addressable object stores."""

__version__ = "0.1.0"
