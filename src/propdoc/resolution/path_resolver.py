"""Import specifier to file path resolution."""

import logging
import os
from pathlib import Path
from typing import Sequence, Union

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".js", ".jsx")


class PathResolver:
    """Turns a relative import specifier into a candidate file path."""

    def __init__(self, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> None:
        if not extensions:
            raise ValueError("At least one source extension is required")
        self.extensions = tuple(extensions)

    @staticmethod
    def is_relative(specifier: str) -> bool:
        """Check whether a specifier points into the project rather than a package."""
        return specifier.startswith(("./", "../", "/")) or specifier in (".", "..")

    def resolve(self, importing_file: Union[str, Path], specifier: str) -> Path:
        """Resolve specifier against the importing file's directory.

        A specifier that already carries a recognized extension is used as
        is. Otherwise each extension is probed in order and the first
        existing file wins; when none exists the last extension is returned
        anyway, so callers must check existence themselves.
        """
        base_dir = os.path.dirname(os.path.abspath(str(importing_file)))
        candidate = os.path.normpath(os.path.join(base_dir, specifier))

        if candidate.endswith(self.extensions):
            return Path(candidate)

        for extension in self.extensions[:-1]:
            probe = candidate + extension
            if os.path.isfile(probe):
                logger.debug("Resolved %s from %s to %s", specifier, importing_file, probe)
                return Path(probe)

        return Path(candidate + self.extensions[-1])
