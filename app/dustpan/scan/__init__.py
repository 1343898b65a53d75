"""Filesystem scanning.

Directory walking, size aggregation, duplicate detection and large
file location. Submodules are imported directly.
"""
