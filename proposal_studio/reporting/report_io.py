"""
Report I/O: export request loading, file naming and artifact saving.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Tuple, Union

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FILENAME = re.compile(r"[^a-zA-Z0-9_-]")
_PATH_SEPARATORS = re.compile(r"[\\/]+")

DEFAULT_BASENAME = "proposal"


def load_export_request(file_path: Union[str, Path]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Load an export request from JSON.

    Accepts either {"proposal": {...}, "company": {...}} or a bare
    proposal object (with an optional "company" key).

    Args:
        file_path: Path to JSON file

    Returns:
        (proposal_dict, company_dict)

    Raises:
        ValueError: if the file, its proposal or its company is not a JSON object
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Export request must be a JSON object: {file_path}")

    if "proposal" in data:
        proposal = data["proposal"]
    else:
        proposal = {k: v for k, v in data.items() if k != "company"}
    company = data.get("company") or {}

    if not isinstance(proposal, dict):
        raise ValueError(f"\"proposal\" must be a JSON object: {file_path}")
    if not isinstance(company, dict):
        raise ValueError(f"\"company\" must be a JSON object: {file_path}")

    logger.debug("Loaded export request %s (%d sections)", file_path, len(proposal.get("sections") or {}))
    return proposal, company


def pdf_filename(title: str) -> str:
    """PDF download name: whitespace runs become underscores, path separators dashes."""
    base = _PATH_SEPARATORS.sub("-", _WHITESPACE.sub("_", (title or "").strip())) or DEFAULT_BASENAME
    return f"{base}.pdf"


def docx_filename(title: str) -> str:
    """DOCX download name: underscores for whitespace, other unsafe characters dropped."""
    base = _UNSAFE_FILENAME.sub("", _WHITESPACE.sub("_", (title or "").strip())) or DEFAULT_BASENAME
    return f"{base}.docx"


def save_bytes(content: bytes, directory: Union[str, Path], filename: str) -> Path:
    """Write export bytes under directory, creating it if needed."""
    path = Path(directory) / Path(filename).name
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(content)
    logger.info("Saved %s (%d bytes)", path, len(content))
    return path
