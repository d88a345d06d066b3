"""Engine-level exceptions.

Player mistakes are never exceptions; they come back as ``Invalid``
outcomes. These classes signal bugs in content or in the calling layer.
"""

from __future__ import annotations


class ContractViolation(ValueError):
    """A caller passed a structurally malformed candidate or identifier."""


class CatalogError(ValueError):
    """Error loading or validating catalog/content data."""
