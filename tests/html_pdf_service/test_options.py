"""
Unit tests for render option models and default merging.
"""

import pytest
from pydantic import ValidationError

from html_pdf_service.options import (
    DEFAULT_MARGIN,
    PaperFormat,
    PDFRenderOptions,
    RenderRequest,
    available_options,
    merge_pdf_options,
)


class TestMergePdfOptions:
    """Tests for merge_pdf_options()."""

    def test_defaults_when_no_options(self):
        merged = merge_pdf_options(None)

        assert merged == {
            "format": "A4",
            "print_background": True,
            "margin": {"top": "1cm", "right": "1cm", "bottom": "1cm", "left": "1cm"},
        }

    def test_client_fields_override_defaults(self):
        options = PDFRenderOptions(format="Legal", printBackground=False)

        merged = merge_pdf_options(options)

        assert merged["format"] == "Legal"
        assert merged["print_background"] is False

    def test_camel_case_fields_map_to_playwright_names(self):
        options = PDFRenderOptions.model_validate({
            "displayHeaderFooter": True,
            "headerTemplate": "<span class='title'></span>",
            "footerTemplate": "<span class='pageNumber'></span>",
            "pageRanges": "1-3, 5",
            "scale": 0.8,
            "width": "210mm",
            "height": "297mm",
        })

        merged = merge_pdf_options(options)

        assert merged["display_header_footer"] is True
        assert merged["header_template"] == "<span class='title'></span>"
        assert merged["footer_template"] == "<span class='pageNumber'></span>"
        assert merged["page_ranges"] == "1-3, 5"
        assert merged["scale"] == 0.8
        assert merged["width"] == "210mm"
        assert merged["height"] == "297mm"

    def test_client_margin_replaces_default_margin(self):
        options = PDFRenderOptions.model_validate({"margin": {"top": "0"}})

        merged = merge_pdf_options(options)

        assert merged["margin"] == {"top": "0"}

    def test_merge_does_not_mutate_defaults(self):
        merged = merge_pdf_options(None)
        merged["margin"]["top"] = "5cm"

        assert DEFAULT_MARGIN["top"] == "1cm"

    def test_unset_fields_are_not_sent(self):
        merged = merge_pdf_options(PDFRenderOptions(landscape=True))

        assert "scale" not in merged
        assert "page_ranges" not in merged


class TestPDFRenderOptions:
    """Tests for option parsing."""

    def test_unknown_keys_are_ignored(self):
        options = PDFRenderOptions.model_validate({"format": "A3", "preferCSSPageSize": True})

        assert options.to_pdf_kwargs() == {"format": "A3"}

    def test_values_not_range_checked(self):
        # The browser decides whether a scale is acceptable
        options = PDFRenderOptions(scale=5)

        assert options.to_pdf_kwargs() == {"scale": 5.0}

    def test_wrong_type_rejected(self):
        with pytest.raises(ValidationError):
            PDFRenderOptions.model_validate({"margin": "1cm"})


class TestRenderRequest:
    def test_html_optional_at_parse_time(self):
        request = RenderRequest.model_validate({})

        assert request.html is None
        assert request.options is None

    def test_parses_nested_options(self):
        request = RenderRequest.model_validate({
            "html": "<h1>Hi</h1>",
            "options": {"format": "Tabloid"},
        })

        assert request.options.format == "Tabloid"


class TestAvailableOptions:
    def test_lists_every_option(self):
        hint = available_options()

        assert set(hint) == {
            "format", "width", "height", "margin", "displayHeaderFooter",
            "headerTemplate", "footerTemplate", "printBackground", "landscape",
            "pageRanges", "scale",
        }

    def test_format_hint_lists_paper_formats(self):
        hint = available_options()["format"]

        for paper in PaperFormat:
            assert paper.value in hint
