"""
Content Loader

Splits the reading text (one file, parts separated by a literal delimiter)
into an ordered list of Part records. Part IDs are the 1-based position in
the split result, not any number written in the text itself.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from src.core.errors import ContentLoadError
from src.utils.constants import PART_DELIMITER, CONTENT_ENCODING

logger = logging.getLogger("reading_tracker")


@dataclass(frozen=True)
class Part:
    """One numbered part of the reading text."""
    id: int
    text: str

    def to_dict(self) -> dict:
        return {'id': self.id, 'text': self.text}


def load_parts(raw_text: str, delimiter: str = PART_DELIMITER) -> List[Part]:
    """
    Split raw text into parts.

    Args:
        raw_text: Whole content file
        delimiter: Literal token preceding every part

    Returns:
        Parts in file order, IDs starting at 1
    """
    if not delimiter:
        raise ValueError("Part delimiter must not be empty")
    if delimiter not in raw_text:
        return []

    fragments = [f.strip() for f in raw_text.split(delimiter)]
    return [Part(id=i, text=text) for i, text in enumerate((f for f in fragments if f), start=1)]


def load_parts_file(path: Path, delimiter: str = PART_DELIMITER,
                    encoding: str = CONTENT_ENCODING) -> List[Part]:
    """
    Read the content file and split it into parts.

    Raises:
        ContentLoadError: file missing, unreadable or not decodable
    """
    path = Path(path)
    try:
        raw_text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read content file {path}: {e}")
        raise ContentLoadError(f"Could not read content file {path}: {e}") from e

    parts = load_parts(raw_text, delimiter)
    if not parts:
        logger.warning(f"No parts found in {path} (delimiter {delimiter!r}); continuing with an empty corpus")
    else:
        logger.info(f"Loaded {len(parts)} parts from {path.name}")
    return parts


def parts_by_id(parts: List[Part]) -> Dict[int, Part]:
    return {part.id: part for part in parts}
