"""
Stride Agent - free-text and structured commands for the DevStride tracker.
"""

__version__ = "0.1.0"
