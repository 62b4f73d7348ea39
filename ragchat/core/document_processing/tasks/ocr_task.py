"""
OCR engine for image-only PDF pages.

Renders a page raster with pypdfium2 and recognizes it with Tesseract.

Dependencies: pypdfium2, pytesseract
System role: OCR fallback used by the parsing stage
"""

import logging

import pypdfium2 as pdfium
import pytesseract

from ragchat.core.exceptions import OcrError

logger = logging.getLogger(__name__)


class TesseractOcrEngine:
    """
    Page-level OCR over one open PDF.

    Holds the PDF open between pages; callers must call close() once the
    last page has been processed.
    """

    def __init__(self, file_path: str, scale: float = 2.0, language: str = "eng") -> None:
        """
        Open the PDF for rendering.

        Raises:
            OcrError: When PDFium cannot load the file
        """
        self._file_path = file_path
        self._scale = scale
        self._language = language
        try:
            self._pdf = pdfium.PdfDocument(file_path)
        except (pdfium.PdfiumError, OSError) as e:
            raise OcrError(f"OCR could not open PDF: {e}") from e
        logger.info(f"{__name__}:__init__ - OCR engine opened {file_path} (scale={scale})")

    def recognize(self, page_number: int) -> str:
        """
        Recognize text on a page.

        Args:
            page_number: 1-based page number

        Returns:
            str: Recognized text

        Raises:
            OcrError: When rendering or recognition fails
        """
        try:
            page = self._pdf[page_number - 1]
            try:
                image = page.render(scale=self._scale).to_pil()
            finally:
                page.close()
            return pytesseract.image_to_string(image, lang=self._language)
        except Exception as e:
            raise OcrError(f"OCR failed: {e}", page_number=page_number) from e

    def close(self) -> None:
        """Release the underlying PDF handle."""
        self._pdf.close()
