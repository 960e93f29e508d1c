"""
agentns - namespace dispatch for markup-driven state-machine interpreters
"""

from agentns.version import __version__

__all__ = ["__version__"]
