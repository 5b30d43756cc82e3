"""Source file loading."""

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def load_source(path: Union[str, Path]) -> Optional[str]:
    """Read a source file.

    Returns:
        The file contents, or None if the file does not exist
    """
    file_path = Path(path)
    if not file_path.is_file():
        logger.debug("Source file not found: %s", file_path)
        return None

    with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
        return f.read()
