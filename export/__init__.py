"""Report exporters for page alignment results (JSON and annotated PDF)."""
from export.json_exporter import build_payload, export_json
from export.pdf_exporter import export_pdf

__all__ = ["build_payload", "export_json", "export_pdf"]
