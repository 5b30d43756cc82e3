"""File crawler for component discovery."""

from pathlib import Path
from typing import Dict, Iterator, List, Optional
import fnmatch
from dataclasses import dataclass

from .type_detector import TypeDetector, FileType


@dataclass
class CrawledFile:
    """Information about a crawled file."""

    path: Path
    file_type: FileType
    relative_path: Path
    size_bytes: int


class FileCrawler:
    """Crawls a source tree for component files."""

    def __init__(
        self,
        root_path: Path,
        ignore_patterns: Optional[List[str]] = None,
        extensions: Optional[List[str]] = None,
        max_file_size_mb: int = 5
    ) -> None:
        """Initialize the file crawler.

        Args:
            root_path: Root directory to crawl
            ignore_patterns: List of glob patterns to ignore
            extensions: Source extensions to consider
            max_file_size_mb: Files larger than this are skipped
        """
        self.root_path = Path(root_path)
        self.ignore_patterns = ignore_patterns or []
        self.extensions = [ext.lower() for ext in (extensions or [".js", ".jsx"])]
        self.max_file_size = max_file_size_mb * 1024 * 1024
        self.type_detector = TypeDetector(self.extensions)

        if not self.ignore_patterns:
            self.ignore_patterns = [
                "**/node_modules/**",
                "**/.git/**",
                "**/dist/**",
                "**/build/**",
            ]

    def _should_ignore(self, file_path: Path) -> bool:
        """Check if file should be ignored based on patterns."""
        if file_path.suffix.lower() not in self.extensions:
            return True

        path_str = file_path.relative_to(self.root_path).as_posix()
        for pattern in self.ignore_patterns:
            if not pattern.startswith("**/"):
                pattern = f"**/{pattern}"
            # "**/" also has to match files at the root
            if fnmatch.fnmatch(path_str, pattern) or fnmatch.fnmatch(path_str, pattern[3:]):
                return True

        return False

    def crawl(self) -> Iterator[CrawledFile]:
        """Crawl the tree and yield files that look like components."""
        if not self.root_path.exists():
            raise ValueError(f"Path does not exist: {self.root_path}")

        if not self.root_path.is_dir():
            raise ValueError(f"Path is not a directory: {self.root_path}")

        for file_path in sorted(self.root_path.rglob("*")):
            if not file_path.is_file():
                continue

            if self._should_ignore(file_path):
                continue

            size_bytes = file_path.stat().st_size
            if size_bytes > self.max_file_size:
                continue

            file_type = self.type_detector.detect_file_type(file_path)
            if file_type == FileType.UNKNOWN:
                continue

            if not self.type_detector.is_component_candidate(file_path):
                continue

            yield CrawledFile(
                path=file_path,
                file_type=file_type,
                relative_path=file_path.relative_to(self.root_path),
                size_bytes=size_bytes
            )

    def get_all_files(self) -> List[CrawledFile]:
        """Get list of all component candidate files."""
        return list(self.crawl())

    def get_stats(self, files: Optional[List[CrawledFile]] = None) -> Dict[str, object]:
        """Get crawling statistics.

        Args:
            files: Files from an earlier crawl; the tree is crawled again if omitted
        """
        by_type: Dict[str, int] = {}
        total_size = 0
        for crawled_file in (self.crawl() if files is None else files):
            by_type[crawled_file.file_type.value] = by_type.get(crawled_file.file_type.value, 0) + 1
            total_size += crawled_file.size_bytes

        return {
            "total_files": sum(by_type.values()),
            "by_type": by_type,
            "total_size_mb": total_size / (1024 * 1024)
        }
