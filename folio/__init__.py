"""Folio blog indexer.

This package scans the markdown posts of a blog, extracts their front matter,
sorts them newest first and generates the paginated listing pages and the post
index that the site's theme renders.

The main entry point is the CLI module, which provides commands for building
the index once, rebuilding on change, and inspecting or creating posts.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
