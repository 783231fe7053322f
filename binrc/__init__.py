"""binrc - pinned GitHub release binaries, cached on disk."""

__version__ = "0.3.0"
