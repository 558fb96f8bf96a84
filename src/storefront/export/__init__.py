"""Export layer: static output generation.

Pre-renders the storefront's finite page set (home, not-found, one page
per listed product) to HTML files.
"""

from storefront.export.pages import PageDescriptor, enumerate_pages, url_to_file_path
from storefront.export.static import (
    ExportedFile,
    ExportResult,
    StaticExporter,
    run_export,
    write_html,
)

__all__ = [
    "ExportResult",
    "ExportedFile",
    "PageDescriptor",
    "StaticExporter",
    "enumerate_pages",
    "run_export",
    "url_to_file_path",
    "write_html",
]
