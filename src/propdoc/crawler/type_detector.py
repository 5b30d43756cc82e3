"""Source file type detection."""

from pathlib import Path
from typing import Optional
from enum import Enum
import re


class FileType(Enum):
    """Source file types."""

    FLOW = "flow"
    JSX = "jsx"
    JS = "js"
    UNKNOWN = "unknown"


class TypeDetector:
    """Detects source file types and likely component files."""

    # Extension-based detection
    EXTENSION_MAP = {
        ".js": FileType.JS,
        ".mjs": FileType.JS,
        ".jsx": FileType.JSX,
    }

    FLOW_PRAGMA = re.compile(r"@flow\b")

    # Content that suggests a file declares a component
    COMPONENT_PATTERNS = [
        r"from\s+['\"]react['\"]",
        r"require\(\s*['\"]react['\"]\s*\)",
        r"extends\s+(?:React\.)?(?:Pure)?Component\b",
        r"\.propTypes\s*=",
        r"static\s+propTypes\b",
    ]

    def __init__(self, extensions: Optional[list] = None) -> None:
        """Initialize the type detector."""
        self.extension_map = dict(self.EXTENSION_MAP)
        for extension in extensions or []:
            self.extension_map.setdefault(extension.lower(), FileType.JS)
        self._component_patterns = [re.compile(pattern) for pattern in self.COMPONENT_PATTERNS]

    def detect_from_extension(self, file_path: Path) -> Optional[FileType]:
        """Detect file type from extension."""
        return self.extension_map.get(file_path.suffix.lower())

    def _read_head(self, file_path: Path, max_lines: int = 200) -> str:
        try:
            with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
                return "".join(f.readline() for _ in range(max_lines))
        except (IOError, UnicodeDecodeError):
            return ""

    def detect_file_type(self, file_path: Path) -> FileType:
        """Detect file type using extension and the @flow pragma."""
        file_type = self.detect_from_extension(file_path)
        if file_type is None:
            return FileType.UNKNOWN

        if self.FLOW_PRAGMA.search(self._read_head(file_path, max_lines=20)):
            return FileType.FLOW
        return file_type

    def is_component_candidate(self, file_path: Path) -> bool:
        """Check if a source file looks like it declares a component."""
        content = self._read_head(file_path)
        return any(pattern.search(content) for pattern in self._component_patterns)
