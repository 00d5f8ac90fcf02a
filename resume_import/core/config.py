"""
Runtime settings for the resume import pipeline.

Values can be overridden through environment variables prefixed with
RESUME_IMPORT_ (e.g. RESUME_IMPORT_PDF_MAX_BYTES) or a local .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


MB = 1024 * 1024


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RESUME_IMPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # File size gates (bytes)
    pdf_max_bytes: int = 10 * MB
    pdf_min_bytes: int = 1024
    docx_max_bytes: int = 10 * MB
    docx_min_bytes: int = 2048  # OOXML container overhead
    txt_max_bytes: int = 5 * MB
    txt_min_bytes: int = 10

    # Confidence
    low_confidence_threshold: float = 0.6

    # PDF line reconstruction (empirically tuned)
    pdf_line_tolerance: float = 3.0
    pdf_space_gap_ratio: float = 0.3

    # Heuristic scan windows
    personal_scan_lines: int = 10
    skills_fallback_threshold: int = 10

    # DOCX: try mammoth HTML extraction first, fall back to plain paragraphs
    docx_preserve_formatting: bool = False

    preview_chars: int = 500
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
