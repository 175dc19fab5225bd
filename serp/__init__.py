"""
serp package
- Create and restore encrypted, checksummed, par2-protected bundles from directory trees.
"""
__all__ = ["cli", "codes", "config", "pipeline", "preflight", "tools", "util", "types"]
__version__ = "0.2.0"
