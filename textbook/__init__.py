"""
Intelligent textbook generator.

Turns a single topic into a complete MkDocs site by running a fixed sequence
of Claude-backed generation stages.
"""

__version__ = "0.1.0"
