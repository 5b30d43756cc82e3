"""Docblock comment parsing."""

import re
from typing import List, Optional

from propdoc.documentation import Documentation
from propdoc.parser.nodes import Node

DOCBLOCK_RE = re.compile(r"^/\*\*(.*?)\*/$", re.DOTALL)
LEADING_STAR_RE = re.compile(r"^\s*\*?\s?")


def parse_docblock(comment: str) -> Optional[str]:
    """Get the text of a ``/** ... */`` comment, or None for other comments."""
    match = DOCBLOCK_RE.match(comment.strip())
    if not match:
        return None
    lines = [LEADING_STAR_RE.sub("", line, count=1) for line in match.group(1).split("\n")]
    return "\n".join(lines).strip()


def get_docblock(comments: List[str]) -> Optional[str]:
    """Get the text of the docblock closest to a node."""
    for comment in reversed(comments):
        text = parse_docblock(comment)
        if text is not None:
            return text
    return None


def set_prop_description(documentation: Documentation, name: str, node: Node) -> None:
    """Attach the docblock preceding a prop declaration to its descriptor."""
    descriptor = documentation.get_prop_descriptor(name)
    docblock = get_docblock(node.leading_comments)
    if docblock:
        descriptor.description = docblock
    elif descriptor.description is None:
        descriptor.description = ""
