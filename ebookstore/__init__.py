"""ebookstore: purchase-gated PDF bookstore with reading-progress tracking."""

__version__ = "0.1.0"
