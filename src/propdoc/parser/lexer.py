"""Tokenizer for JavaScript modules with Flow annotations and JSX."""

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple
import re

from propdoc.errors import ParseError


class TokenKind(Enum):
    """Kinds of lexical tokens."""

    NAME = "NAME"
    STRING = "STRING"
    NUMBER = "NUMBER"
    TEMPLATE = "TEMPLATE"
    REGEX = "REGEX"
    PUNCT = "PUNCT"
    INVALID = "INVALID"
    EOF = "EOF"


@dataclass
class Token:
    """A single token with its source span."""

    kind: TokenKind
    value: str
    start: int
    end: int
    line: int = 1
    column: int = 0
    newline_before: bool = False
    comments: List[str] = field(default_factory=list)

    def is_punct(self, *values: str) -> bool:
        return self.kind == TokenKind.PUNCT and self.value in values

    def is_name(self, *values: str) -> bool:
        if self.kind != TokenKind.NAME:
            return False
        return not values or self.value in values


PUNCTUATORS = [
    ">>>=", "...", "===", "!==", "**=", "<<=", ">>=", ">>>", "&&=", "||=", "??=",
    "=>", "==", "!=", "<=", ">=", "&&", "||", "??", "?.", "**", "++", "--",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<", ">>", "{|", "|}",
    "{", "}", "(", ")", "[", "]", ";", ",", "<", ">", "+", "-", "*", "/",
    "%", "&", "|", "^", "!", "~", "?", ":", "=", ".", "@", "#",
]

PUNCT_RE = re.compile("|".join(re.escape(p) for p in sorted(PUNCTUATORS, key=len, reverse=True)))
NAME_RE = re.compile(r"[A-Za-z_$\u0080-\uffff][\w$\u0080-\uffff]*")
NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]+n?|0[bB][01_]+n?|0[oO][0-7_]+n?"
    r"|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?n?"
)
WHITESPACE_RE = re.compile(r"[ \t\r\n\f\v\u00a0\ufeff\u2028\u2029]+")
UNICODE_ESCAPE_RE = re.compile(r"\\u[0-9a-fA-F]{4}[\w$]*")

# Tokens after which a slash starts a regular expression instead of a division
REGEX_PRECEDING_PUNCT = {
    "(", ",", "=", ":", "[", "!", "&", "|", "?", "{", ";", "&&", "||", "??",
    "=>", "==", "===", "!=", "!==", "+", "-", "*", "%", "~", "^", "+=", "-=",
    "*=", "%=", "&=", "|=", "^=",
}
REGEX_PRECEDING_KEYWORDS = {
    "return", "typeof", "case", "do", "else", "in", "instanceof", "new",
    "delete", "void", "throw", "yield", "await",
}

STRING_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class Lexer:
    """Splits source text into tokens, attaching comments to the following token."""

    def __init__(self, source: str, path: Optional[str] = None) -> None:
        self.source = source
        self.path = path
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", source)]

    def position(self, offset: int) -> Tuple[int, int]:
        """Return the 1-based line and 0-based column of an offset."""
        line = bisect_right(self._line_starts, offset)
        return line, offset - self._line_starts[line - 1]

    def tokenize(self) -> List[Token]:
        source = self.source
        length = len(source)
        tokens: List[Token] = []
        comments: List[str] = []
        pos = 0
        last_end = 0

        while True:
            # Whitespace and comments
            while pos < length:
                match = WHITESPACE_RE.match(source, pos)
                if match:
                    pos = match.end()
                    continue
                if source.startswith("//", pos):
                    newline = source.find("\n", pos)
                    end = length if newline == -1 else newline
                    comments.append(source[pos:end])
                    pos = end
                    continue
                if source.startswith("/*", pos):
                    end = source.find("*/", pos + 2)
                    if end == -1:
                        line, column = self.position(pos)
                        raise ParseError("Unterminated comment", self.path, line, column)
                    comments.append(source[pos:end + 2])
                    pos = end + 2
                    continue
                if pos == 0 and source.startswith("#!"):
                    newline = source.find("\n")
                    pos = length if newline == -1 else newline
                    continue
                break

            newline_before = "\n" in source[last_end:pos]

            if pos >= length:
                tokens.append(self._token(TokenKind.EOF, "", pos, pos, newline_before, comments))
                return tokens

            kind, end = self._scan(pos, tokens[-1] if tokens else None)
            tokens.append(self._token(kind, source[pos:end], pos, end, newline_before, comments))
            comments = []
            pos = end
            last_end = end

    def _token(
        self,
        kind: TokenKind,
        value: str,
        start: int,
        end: int,
        newline_before: bool,
        comments: List[str]
    ) -> Token:
        line, column = self.position(start)
        return Token(
            kind=kind,
            value=value,
            start=start,
            end=end,
            line=line,
            column=column,
            newline_before=newline_before,
            comments=list(comments)
        )

    def _scan(self, pos: int, previous: Optional[Token]) -> Tuple[TokenKind, int]:
        """Scan one token starting at pos and return its kind and end offset."""
        source = self.source
        char = source[pos]

        if char in "\"'":
            end = self._scan_string(pos)
            if end is None:
                # Unterminated quote, e.g. an apostrophe in JSX text
                return TokenKind.INVALID, pos + 1
            return TokenKind.STRING, end

        if char == "`":
            return TokenKind.TEMPLATE, self._scan_template(pos)

        match = NUMBER_RE.match(source, pos)
        if match and (char.isdigit() or (char == "." and pos + 1 < len(source) and source[pos + 1].isdigit())):
            return TokenKind.NUMBER, match.end()

        match = NAME_RE.match(source, pos)
        if match:
            return TokenKind.NAME, match.end()

        if char == "/" and self._regex_allowed(previous):
            end = self._scan_regex(pos)
            if end is not None:
                return TokenKind.REGEX, end

        match = PUNCT_RE.match(source, pos)
        if match:
            return TokenKind.PUNCT, match.end()

        if char == "\\":
            # Unicode escape inside an identifier
            match = UNICODE_ESCAPE_RE.match(source, pos)
            if match:
                return TokenKind.NAME, match.end()

        return TokenKind.INVALID, pos + 1

    def _scan_string(self, pos: int) -> Optional[int]:
        source = self.source
        quote = source[pos]
        i = pos + 1
        while i < len(source):
            char = source[i]
            if char == "\\":
                i += 2
                continue
            if char == quote:
                return i + 1
            if char == "\n":
                return None
            i += 1
        return None

    def _scan_template(self, pos: int) -> int:
        source = self.source
        i = pos + 1
        while i < len(source):
            char = source[i]
            if char == "\\":
                i += 2
                continue
            if char == "`":
                return i + 1
            if source.startswith("${", i):
                i = self._scan_template_expression(i + 2)
                continue
            i += 1
        return len(source)

    def _scan_template_expression(self, pos: int) -> int:
        """Skip a ${...} substitution and return the offset after its closing brace."""
        source = self.source
        depth = 1
        i = pos
        while i < len(source):
            char = source[i]
            if char in "\"'":
                end = self._scan_string(i)
                i = end if end is not None else i + 1
                continue
            if char == "`":
                i = self._scan_template(i)
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return i + 1
            i += 1
        return len(source)

    def _regex_allowed(self, previous: Optional[Token]) -> bool:
        if previous is None:
            return True
        if previous.kind == TokenKind.PUNCT:
            return previous.value in REGEX_PRECEDING_PUNCT
        if previous.kind == TokenKind.NAME:
            return previous.value in REGEX_PRECEDING_KEYWORDS
        return False

    def _scan_regex(self, pos: int) -> Optional[int]:
        source = self.source
        i = pos + 1
        in_class = False
        while i < len(source):
            char = source[i]
            if char == "\n":
                return None
            if char == "\\":
                i += 2
                continue
            if char == "[":
                in_class = True
            elif char == "]":
                in_class = False
            elif char == "/" and not in_class:
                i += 1
                while i < len(source) and (source[i].isalnum() or source[i] == "_"):
                    i += 1
                return i
            i += 1
        return None


def tokenize(source: str, path: Optional[str] = None) -> List[Token]:
    """Tokenize a source string."""
    try:
        return Lexer(source, path).tokenize()
    except RecursionError:
        raise ParseError("Template literals are nested too deeply", path) from None


def string_value(raw: str) -> str:
    """Decode a quoted string literal into its value."""
    body = raw[1:-1]
    if "\\" not in body:
        return body

    result = []
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 >= len(body):
            result.append(char)
            i += 1
            continue

        escape = body[i + 1]
        if escape == "u" and body[i + 2:i + 3] == "{":
            close = body.find("}", i + 3)
            result.append(chr(int(body[i + 3:close], 16)))
            i = close + 1
        elif escape == "u":
            result.append(chr(int(body[i + 2:i + 6], 16)))
            i += 6
        elif escape == "x":
            result.append(chr(int(body[i + 2:i + 4], 16)))
            i += 4
        elif escape == "\n":
            i += 2
        else:
            result.append(STRING_ESCAPES.get(escape, escape))
            i += 2

    return "".join(result)


def number_value(raw: str):
    """Convert a numeric literal into an int or float."""
    text = raw.replace("_", "")
    if text.endswith("n"):
        text = text[:-1]

    try:
        return int(text, 0)
    except ValueError:
        pass

    try:
        return int(text, 10)
    except ValueError:
        return float(text)
