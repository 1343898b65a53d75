"""dustpan - find and safely remove reclaimable disk space.

Scans user directories for duplicate files, oversized files and
well-known junk locations, and removes selected items trash-first.
"""

__version__ = "0.3.0"
