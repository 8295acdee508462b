"""
Document Generator Service
==========================
HTTP front end for the document compositor.

Features:
- Request sanitizing and validation
- PNG rendering offloaded to worker threads
- Fail-fast asset loading at startup
"""

__version__ = "1.0.0"
