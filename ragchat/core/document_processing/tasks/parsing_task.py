"""
Document parsing task using LangChain PyPDFLoader.

Extracts per-page text from PDFs and recovers image-only pages with OCR.

Dependencies: langchain_community.document_loaders
System role: First stage of document ingestion pipeline
"""

import logging
from pathlib import Path
from typing import Callable, Protocol

from langchain_community.document_loaders import PyPDFLoader

from ragchat.core.exceptions import OcrError, ParsingError

from ..models import PageText
from .ocr_task import TesseractOcrEngine

logger = logging.getLogger(__name__)


class OcrEngine(Protocol):
    def recognize(self, page_number: int) -> str: ...

    def close(self) -> None: ...


OcrEngineFactory = Callable[[str], OcrEngine]


class ParsingTask:
    """Parse PDF documents into per-page text."""

    def __init__(
        self,
        ocr_min_text_length: int = 20,
        ocr_engine_factory: OcrEngineFactory | None = None,
        ocr_render_scale: float = 2.0,
        ocr_language: str = "eng",
    ) -> None:
        """
        Initialize parsing task.

        Args:
            ocr_min_text_length: Pages with less trimmed text go through OCR
            ocr_engine_factory: Builds an OCR engine for a file path
            ocr_render_scale: Raster scale for the default engine
            ocr_language: Tesseract language for the default engine
        """
        self._ocr_min_text_length = ocr_min_text_length
        self._ocr_engine_factory = ocr_engine_factory or (
            lambda path: TesseractOcrEngine(path, scale=ocr_render_scale, language=ocr_language)
        )

    def parse(self, file_path: str) -> list[PageText]:
        """
        Extract text for every page, OCR-ing image-only pages.

        The OCR engine is created on the first image-only page and closed
        after the last page. A failed OCR keeps the page's extracted text.

        Args:
            file_path: Path to PDF document

        Returns:
            list[PageText]: One entry per page, in page order

        Raises:
            ParsingError: When the file is missing, not a PDF, or unreadable
        """
        path = Path(file_path)
        if not path.exists():
            raise ParsingError(f"File not found: {file_path}", path.name)

        if path.suffix.lower() != ".pdf":
            raise ParsingError(
                f"Unsupported file format: {path.suffix}. Only PDF files are supported.",
                path.name,
            )

        try:
            documents = PyPDFLoader(file_path).load()
        except Exception as e:
            raise ParsingError(f"Failed to parse PDF: {e}", path.name) from e

        pages: list[PageText] = []
        ocr_engine: OcrEngine | None = None
        ocr_unavailable = False
        try:
            for index, document in enumerate(documents):
                page_number = int(document.metadata.get("page", index)) + 1
                text = document.page_content
                ocr_applied = False

                if len(text.strip()) < self._ocr_min_text_length and not ocr_unavailable:
                    logger.info(
                        f"{__name__}:parse - Page {page_number} appears to be an image, running OCR"
                    )
                    try:
                        if ocr_engine is None:
                            ocr_engine = self._ocr_engine_factory(file_path)
                        text = ocr_engine.recognize(page_number)
                        ocr_applied = True
                    except OcrError as e:
                        logger.error(
                            f"{__name__}:parse - OCR failed for page {page_number}",
                            exc_info=e,
                        )
                        # Engine never opened; remaining pages keep their extracted text
                        ocr_unavailable = ocr_engine is None

                pages.append(PageText(text=text, page_number=page_number, ocr_applied=ocr_applied))
        finally:
            if ocr_engine is not None:
                ocr_engine.close()

        return pages
