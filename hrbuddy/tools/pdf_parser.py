"""
PDF parsing for resume text extraction.

Extracts text content from PDF files using pypdf.
"""

import logging
from io import BytesIO

from pypdf import PdfReader

logger = logging.getLogger(__name__)


def parse_pdf(pdf_content: bytes) -> str:
    """
    Extract text from a PDF file.

    Args:
        pdf_content: Raw bytes of the PDF file

    Returns:
        Extracted text from all pages; empty if the PDF cannot be read
    """
    try:
        reader = PdfReader(BytesIO(pdf_content))
        text_parts = []

        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)

        return "\n\n".join(text_parts)

    except Exception as e:
        logger.warning(f"Error parsing PDF: {e}")
        return ""


def parse_pdf_from_path(file_path: str) -> str:
    """Extract text from a PDF file path."""
    with open(file_path, "rb") as f:
        return parse_pdf(f.read())
