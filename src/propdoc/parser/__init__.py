"""Parser module initialization."""

from .lexer import Lexer, Token, TokenKind, tokenize
from .parser import Parser, parse, parse_type
from . import nodes

__all__ = ["Lexer", "Token", "TokenKind", "tokenize", "Parser", "parse", "parse_type", "nodes"]
