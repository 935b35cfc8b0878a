"""PDF loading: rasterize pages and pull their text layer."""
from extraction.pdf_loader import load_document

__all__ = ["load_document"]
