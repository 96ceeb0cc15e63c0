"""settings.py — Configuration from the environment and .env."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from archive.pages import MISSING_BLANK_FIRST_LINE, PARAGRAPH_HEURISTICS


@dataclass
class Settings:
    output_dir: Path = Path(".")
    heuristics: dict[str, str] = field(default_factory=lambda: dict(PARAGRAPH_HEURISTICS))


def _split_keys(value: str) -> list[str]:
    return [k.strip() for k in value.split(",") if k.strip()]


def load_settings() -> Settings:
    """
    Read RUNEPUB_* variables (after loading .env, if any).

    RUNEPUB_OUTPUT_DIR                 where the epub is written (default: .)
    RUNEPUB_MISSING_BLANK_FIRST_LINE   comma-separated title keys of books whose
                                       pages lack the blank first line
    """
    load_dotenv(find_dotenv(usecwd=True))
    settings = Settings()

    output_dir = os.getenv("RUNEPUB_OUTPUT_DIR", "").strip()
    if output_dir:
        settings.output_dir = Path(output_dir)

    for key in _split_keys(os.getenv("RUNEPUB_MISSING_BLANK_FIRST_LINE", "")):
        settings.heuristics[key] = MISSING_BLANK_FIRST_LINE

    return settings
