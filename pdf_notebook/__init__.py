"""PDF Notebook: ask questions about a PDF and get page-cited answers."""

__version__ = "1.0.0"
