"""
Block Extractor
===============
Reads a resume PDF with PyMuPDF (fitz) and produces the raw page structure
consumed by the layout reconstruction: positioned text fragments, one per
text item drawn by the page, and the y coordinates of horizontal rules.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import fitz  # PyMuPDF

from .errors import ExtractionError
from .models import RawFragment, RawPage, TextRun

logger = logging.getLogger(__name__)

# Span flag bit 4 marks a bold font
SPAN_BOLD_FLAG = 16


def is_bold_span(span: dict) -> bool:
    """Bold font flag, or a bold face named in the font."""
    if span.get("flags", 0) & SPAN_BOLD_FLAG:
        return True
    return "bold" in span.get("font", "").lower()


class BlockExtractor:
    """
    Handles PDF ingestion and low-level page extraction.

    Extracts:
        - Text items in content-stream order, one fragment each
        - Horizontal rules (wide and flat vector drawings)
    """

    def __init__(
        self,
        separator_min_aspect: float = 5.0,
        separator_max_height: float = 5.0,
    ):
        self.separator_min_aspect = separator_min_aspect
        self.separator_max_height = separator_max_height

    def _open(self, pdf_bytes: bytes) -> fitz.Document:
        try:
            return fitz.open(stream=pdf_bytes, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise ExtractionError(str(e)) from e

    def get_page_count(self, pdf_bytes: bytes) -> int:
        """Get total number of pages in the PDF."""
        with self._open(pdf_bytes) as doc:
            return doc.page_count

    def extract(self, pdf_bytes: bytes) -> list[RawPage]:
        """
        Extract the raw structure of every page.

        Args:
            pdf_bytes: Content of the PDF file.

        Returns:
            One RawPage per PDF page, in page order.

        Raises:
            ExtractionError: If PyMuPDF cannot read the document.
        """
        pages: list[RawPage] = []

        with self._open(pdf_bytes) as doc:
            total_pages = doc.page_count
            logger.info(f"Extracting {total_pages} pages")

            for page_idx in range(total_pages):
                try:
                    page = doc[page_idx]
                    raw_page = RawPage(
                        separators=self._extract_separators(page),
                        fragments=self._extract_fragments(page),
                    )
                except RuntimeError as e:
                    raise ExtractionError(
                        f"Page {page_idx + 1}: {e}"
                    ) from e

                logger.debug(
                    f"Page {page_idx + 1}: {len(raw_page.fragments)} fragments, "
                    f"{len(raw_page.separators)} separators"
                )
                pages.append(raw_page)

        return pages

    def _extract_fragments(self, page: fitz.Page) -> list[RawFragment]:
        """
        One fragment per text item, in content-stream order.

        The text trace keeps every text-showing span separate, so two items
        on one baseline (a "Page" / "1 of 2" header) stay two fragments.
        """
        fragments: list[RawFragment] = []

        for span in page.get_texttrace():
            text = "".join(chr(char[0]) for char in span["chars"] if char[0] > 0)
            if not text.strip():
                continue

            fragments.append(RawFragment(
                runs=[TextRun(text=quote(text, safe=""), bold=is_bold_span(span))],
                y=span["bbox"][1],
            ))

        return fragments

    def _extract_separators(self, page: fitz.Page) -> list[float]:
        """Top y of every horizontal rule, ascending."""
        ys = set()
        for path in page.get_drawings():
            rect = path["rect"]
            # A horizontal rule is much wider than it is tall
            if (
                rect.width > rect.height * self.separator_min_aspect
                and rect.height < self.separator_max_height
            ):
                ys.add(round(rect.y0, 2))
        return sorted(ys)
