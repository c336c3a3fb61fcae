"""Folio content store.

This package reads the source tree of a static website (posts, pages) as a
collection of documents: a YAML front matter block followed by a markdown
body. It enumerates documents, reads their metadata and body, and checks the
front matter conventions the site renderer expects.

The main entry point is the CLI module, which provides commands for listing,
showing and validating documents and for starting a new one.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
