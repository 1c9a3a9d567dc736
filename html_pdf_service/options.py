"""
Request and render option models for HTML to PDF conversion.

Options arrive with the camelCase names clients already use for browser
print-to-PDF and are translated to Playwright's keyword arguments.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PaperFormat(str, Enum):
    """Paper formats understood by Chromium's PDF export."""
    A4 = "A4"
    A3 = "A3"
    A2 = "A2"
    A1 = "A1"
    A0 = "A0"
    LETTER = "Letter"
    LEGAL = "Legal"
    TABLOID = "Tabloid"
    LEDGER = "Ledger"


DEFAULT_MARGIN = {
    "top": "1cm",
    "right": "1cm",
    "bottom": "1cm",
    "left": "1cm",
}

DEFAULT_PDF_OPTIONS: Dict[str, Any] = {
    "format": PaperFormat.A4.value,
    "print_background": True,
    "margin": DEFAULT_MARGIN,
}

# Wire name -> Playwright page.pdf() keyword
_OPTION_NAMES = {
    "format": "format",
    "width": "width",
    "height": "height",
    "margin": "margin",
    "displayHeaderFooter": "display_header_footer",
    "headerTemplate": "header_template",
    "footerTemplate": "footer_template",
    "printBackground": "print_background",
    "landscape": "landscape",
    "pageRanges": "page_ranges",
    "scale": "scale",
}


class PDFMargin(BaseModel):
    """Page margins as CSS dimension strings (e.g. '1cm', '0.5in')."""
    model_config = ConfigDict(extra="ignore")

    top: Optional[str] = None
    right: Optional[str] = None
    bottom: Optional[str] = None
    left: Optional[str] = None


class PDFRenderOptions(BaseModel):
    """
    Optional page settings for a render.

    Every field is optional. Values are passed through to the browser,
    which is the only authority on what it accepts (e.g. scale 0.1-2).
    """
    model_config = ConfigDict(extra="ignore")

    format: Optional[str] = Field(None, description=", ".join(f.value for f in PaperFormat))
    width: Optional[str] = Field(None, description="CSS width (e.g., '210mm', '8.5in')")
    height: Optional[str] = Field(None, description="CSS height (e.g., '297mm', '11in')")
    margin: Optional[PDFMargin] = Field(None, description="Object with top, right, bottom, left margins")
    displayHeaderFooter: Optional[bool] = Field(None, description="Boolean to show header/footer")
    headerTemplate: Optional[str] = Field(None, description="HTML template for header")
    footerTemplate: Optional[str] = Field(None, description="HTML template for footer")
    printBackground: Optional[bool] = Field(None, description="Boolean to include background graphics")
    landscape: Optional[bool] = Field(None, description="Boolean for landscape orientation")
    pageRanges: Optional[str] = Field(None, description="String of page ranges (e.g., '1-3, 5')")
    scale: Optional[float] = Field(None, description="Number between 0.1 and 2")

    def to_pdf_kwargs(self) -> Dict[str, Any]:
        """Return only the fields the client set, keyed by Playwright name."""
        kwargs: Dict[str, Any] = {}
        for wire_name, value in self.model_dump(exclude_none=True).items():
            kwargs[_OPTION_NAMES[wire_name]] = value
        return kwargs


class RenderRequest(BaseModel):
    """Body of POST /html-to-pdf."""
    html: Optional[str] = Field(None, description="HTML content to render")
    options: Optional[PDFRenderOptions] = Field(None, description="PDF page settings")


def merge_pdf_options(options: Optional[PDFRenderOptions] = None) -> Dict[str, Any]:
    """
    Merge client options over the service defaults.

    The merge is shallow: a client margin replaces the default margin
    as a whole.
    """
    merged = dict(DEFAULT_PDF_OPTIONS)
    merged["margin"] = dict(DEFAULT_MARGIN)
    if options is not None:
        merged.update(options.to_pdf_kwargs())
    return merged


def available_options() -> Dict[str, str]:
    """Describe the accepted option fields for the usage hint."""
    return {
        name: field.description
        for name, field in PDFRenderOptions.model_fields.items()
    }


USAGE_HINT = 'POST /html-to-pdf with { "html": "<html>...</html>", "options": {...} }'
