"""
Library for deriving canary, baseline and stable variants of kubernetes
resources and removing stale variants from a cluster.
"""

__all__ = [
    "cleanup",
    "config",
    "exceptions",
    "fetch",
    "kubectl",
    "labels",
    "manifest",
    "variants",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
