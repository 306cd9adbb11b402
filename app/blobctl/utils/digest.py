"""Blob identifiers.

The service addresses blobs by their multihash digest, encoded base58btc
with the multibase prefix (``zQm...``). Operators usually have a shard CID
at hand instead, so both forms are accepted and reduced to the digest.
"""

from __future__ import annotations

from multiformats import CID, multibase, multihash


def parse_blob_id(value: str) -> str:
    """Return the base58btc digest named by a CID or a digest string.

    Args:
        value: A CID in any multibase (``bag...``, ``bafy...``, ``Qm...``) or
            a multibase-encoded multihash.

    Returns:
        The multihash encoded as base58btc, e.g. ``zQm...``.

    Raises:
        ValueError: If ``value`` is neither a CID nor a multihash.
    """
    text = value.strip()
    if not text:
        raise ValueError("Missing blob id")

    try:
        return multibase.encode(CID.decode(text).digest, "base58btc")
    except (KeyError, ValueError):
        pass

    try:
        raw = multibase.decode(text)
        multihash.unwrap(raw)
    except (KeyError, ValueError) as e:
        raise ValueError(f"Not a CID or multihash digest: {text}") from e
    return multibase.encode(raw, "base58btc")


def shard_digest(cid: str | None, digest: str | None = None) -> str | None:
    """Digest of a shard, derived from its CID when the listing omits it."""
    if digest:
        return digest
    if not cid:
        return None
    try:
        return parse_blob_id(cid)
    except ValueError:
        return None
