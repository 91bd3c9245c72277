"""Lend read-only access to a value across threads, checked by a borrow count or a liveness flag."""

__version__ = "0.1.0"
__all__ = ["counting", "flag_based"]