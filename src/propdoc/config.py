"""Configuration management for propdoc."""

from pathlib import Path
from typing import List, Optional
import yaml
from pydantic import BaseModel, Field, field_validator

from propdoc.resolution.symbol_table import MergePolicy


class ResolutionConfig(BaseModel):
    """Cross-file resolution settings."""

    extensions: List[str] = Field(default_factory=lambda: [".js", ".jsx"])
    max_depth: int = 32
    strict_parse: bool = False
    conservative_exports: bool = False
    merge_policy: MergePolicy = MergePolicy.IMPORTED

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one extension is required")
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]

    @field_validator("max_depth")
    @classmethod
    def check_max_depth(cls, value: int) -> int:
        if value < 0:
            raise ValueError("max_depth must not be negative")
        return value


class HandlerConfig(BaseModel):
    """Settings for the documentation handlers."""

    utility_types: List[str] = Field(default_factory=lambda: ["$ReadOnly", "$Exact", "$Shape"])
    component_bases: List[str] = Field(
        default_factory=lambda: [
            "Component",
            "PureComponent",
            "React.Component",
            "React.PureComponent"
        ]
    )


class CrawlConfig(BaseModel):
    """Configuration for repository crawling."""

    extensions: List[str] = Field(default_factory=lambda: [".js", ".jsx"])
    ignore_patterns: List[str] = Field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/.git/**",
            "**/dist/**",
            "**/build/**",
            "**/coverage/**",
            "**/__tests__/**",
            "**/*.test.js",
            "**/*.spec.js"
        ]
    )
    max_file_size_mb: int = 5


class ExportConfig(BaseModel):
    """JSON export configuration."""

    pretty: bool = False
    indent: int = 2


class PropDocConfig(BaseModel):
    """Main propdoc configuration."""

    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    handlers: HandlerConfig = Field(default_factory=HandlerConfig)
    crawl: CrawlConfig = Field(default_factory=CrawlConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "PropDocConfig":
        """Load configuration from YAML file."""
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))

    @classmethod
    def load_default(cls) -> "PropDocConfig":
        """Load default configuration."""
        return cls()

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        with open(config_path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)


def load_config(config_path: Optional[str] = None) -> PropDocConfig:
    """Load configuration from file or defaults."""
    if config_path:
        return PropDocConfig.load_from_file(Path(config_path))

    # Try to find config in standard locations
    standard_paths = [
        Path("propdoc.yaml"),
        Path(".propdoc.yaml"),
        Path.home() / ".propdoc" / "config.yaml"
    ]

    for path in standard_paths:
        if path.exists():
            return PropDocConfig.load_from_file(path)

    return PropDocConfig.load_default()
