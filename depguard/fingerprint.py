"""Stable finding identities for cross-run deduplication."""

from __future__ import annotations

import hashlib
from typing import Optional

_DELIMITER = "|"


def fingerprint_for_dep(
    check_id: str,
    code: str,
    manifest_path: str,
    dependency_name: str,
    extra: Optional[str] = None,
) -> str:
    """Return the SHA-256 hex digest identifying a dependency finding.

    The digest covers the identity fields only, so editing a finding's message
    never changes its fingerprint. ``extra`` (a path or URL) is appended only
    when present.
    """
    parts = [check_id, code, manifest_path, dependency_name]
    if extra is not None:
        parts.append(extra)
    canonical = _DELIMITER.join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


__all__ = ["fingerprint_for_dep"]
