"""Bundled data files for blobctl."""
