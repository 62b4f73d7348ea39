"""
Configuration settings for document processing pipeline.

Provides environment-based configuration for parsing, OCR, chunking and
upload validation.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    chunk_size: int = Field(default=500, description="Sliding window size in characters")
    chunk_overlap: int = Field(
        default=50,
        description="Characters shared by consecutive windows of the same page",
    )
    min_chunk_length: int = Field(
        default=50,
        description="Windows whose trimmed text is not longer than this are dropped",
    )

    # OCR settings
    ocr_min_text_length: int = Field(
        default=20,
        description="Pages with less extracted text are treated as image-only",
    )
    ocr_render_scale: float = Field(default=2.0, description="Raster scale for OCR rendering")
    ocr_language: str = Field(default="eng", description="Tesseract language code")

    # Upload validation
    max_file_size_bytes: int = Field(
        default=20 * 1024 * 1024,
        description="Largest accepted upload",
    )
    seconds_per_chunk_estimate: float = Field(
        default=0.2,
        description="Per-chunk embedding time used for the progress ETA",
    )


@lru_cache
def get_pipeline_settings() -> DocumentPipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        DocumentPipelineSettings: Singleton settings loaded from environment
    """
    return DocumentPipelineSettings()
