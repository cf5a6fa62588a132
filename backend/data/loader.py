"""Portfolio knowledge payload loader.

The payload is a free-form JSON document about the portfolio owner. It is
read from disk on every call so edits show up without a restart.
"""

import json
import os
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_DATA_PATH = Path(__file__).parent / "portfolio.json"
EMPTY_PAYLOAD = "{}"


def get_data_path() -> Path:
    """Resolve the payload location from PORTFOLIO_DATA_PATH or the bundled file."""
    return Path(os.environ.get("PORTFOLIO_DATA_PATH", DEFAULT_DATA_PATH))


def load_portfolio_data(path: str | Path | None = None) -> str:
    """Read the payload as raw text, without parsing it.

    Args:
        path: JSON file to read. Defaults to get_data_path().

    Returns:
        File contents, or "{}" if the file cannot be read.
    """
    data_path = Path(path) if path is not None else get_data_path()
    try:
        return data_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("portfolio.load_failed", path=str(data_path), error=str(e))
        return EMPTY_PAYLOAD


def load_portfolio_document(path: str | Path | None = None) -> dict:
    """Parse the payload for display. Missing or malformed files give {}."""
    raw = load_portfolio_data(path)
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("portfolio.parse_failed", error=str(e))
        return {}
    return document if isinstance(document, dict) else {}
