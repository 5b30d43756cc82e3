"""Crawler module initialization."""

from .file_crawler import FileCrawler, CrawledFile
from .type_detector import TypeDetector, FileType

__all__ = ["FileCrawler", "CrawledFile", "TypeDetector", "FileType"]
