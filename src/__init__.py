"""
DeckRender

Presentation conversion server: uploads in, one image per slide out.
"""

__version__ = "1.6.0"
__author__ = "DeckRender Team"
