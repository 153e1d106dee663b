"""
Folio Preview Service
MDX compile, live preview and publish rendering for portfolio content.
"""

__version__ = "0.1.0"
