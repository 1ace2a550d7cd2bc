"""
Lector - AI-assisted code review for local git changes.
"""

__version__ = "0.1.0"
