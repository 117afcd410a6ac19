"""gittufviz package.

Read-only access to gittuf policy history and metadata stored in git
repositories, for the policy visualizer front end.
"""

__version__ = "0.1.0"

__all__ = [
    "config",
    "errors",
    "git",
    "metadata",
    "service",
    "mcp",
]
