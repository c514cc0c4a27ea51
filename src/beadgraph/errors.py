"""Exception types raised by beadgraph.

Layout itself is total over any item graph; these are only raised at the
edges of the package (configuration and record conversion).
"""

from __future__ import annotations


class BeadGraphError(Exception):
    """Base class for all beadgraph errors."""


class LayoutConfigError(BeadGraphError, ValueError):
    """A layout configuration value is out of range or unparsable."""


class InvalidItemError(BeadGraphError, ValueError):
    """A host record cannot be converted into an Item."""
