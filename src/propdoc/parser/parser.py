"""Recursive descent parser for the module-level shape of Flow-typed JavaScript.

The parser builds nodes for imports, exports, variable declarations, type
aliases, classes and functions. Function bodies and any expression the
documentation pipeline never looks at are skipped by bracket matching and
kept as ``OpaqueExpression`` raw text.
"""

from typing import Callable, List, Optional, Tuple, TypeVar

from propdoc.errors import ParseError
from .lexer import Token, TokenKind, tokenize, string_value, number_value
from .nodes import (
    ArrayExpression,
    ArrayTypeAnnotation,
    AssignmentExpression,
    CallExpression,
    ClassDeclaration,
    ClassProperty,
    ExistsTypeAnnotation,
    ExportAllDeclaration,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    ExportSpecifier,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    FunctionExpression,
    FunctionTypeAnnotation,
    FunctionTypeParam,
    GenericTypeAnnotation,
    Identifier,
    ImportDeclaration,
    ImportSpecifier,
    IntersectionTypeAnnotation,
    Literal,
    LiteralTypeAnnotation,
    MemberExpression,
    Node,
    NullableTypeAnnotation,
    ObjectExpression,
    ObjectTypeAnnotation,
    ObjectTypeCallProperty,
    ObjectTypeIndexer,
    ObjectTypeProperty,
    ObjectTypeSpreadProperty,
    OpaqueExpression,
    Param,
    PrimitiveTypeAnnotation,
    Program,
    Property,
    SourceLocation,
    SpreadElement,
    Statement,
    TupleTypeAnnotation,
    TypeAlias,
    TypeAnnotation,
    TypeCastExpression,
    TypeofTypeAnnotation,
    UnionTypeAnnotation,
    VariableDeclaration,
    VariableDeclarator,
)

N = TypeVar("N", bound=Node)

OPENERS = ("{", "(", "[", "{|")
CLOSERS = ("}", ")", "]", "|}")
EXPRESSION_END = {",", ";", ")", "]", "}", "|}"}
ANGLE_CLOSERS = (">", ">>", ">>>", ">=", ">>=", ">>>=")

# Bracket and type nesting past this depth is rejected rather than recursed into
MAX_NESTING = 64

PRIMITIVE_TYPES = {
    "string", "number", "boolean", "bool", "any", "mixed", "void", "null",
    "empty", "symbol", "bigint",
}

# Keywords that never start an identifier expression
NON_PRIMARY_KEYWORDS = {
    "new", "typeof", "void", "delete", "await", "yield", "super", "import",
    "if", "for", "while", "do", "switch", "try", "return", "throw", "break",
    "continue", "with", "debugger", "else", "case", "default", "var", "let",
    "const", "in", "instanceof",
}

CLASS_MODIFIERS = {
    "static", "async", "get", "set", "declare", "public", "private",
    "protected", "readonly", "override", "abstract",
}

OPERATOR_KEYWORDS = {
    "return", "typeof", "case", "do", "else", "in", "instanceof", "new",
    "delete", "void", "throw", "yield", "await", "extends",
}


class Parser:
    """Parses one source file into a ``Program``."""

    def __init__(self, source: str, path: Optional[str] = None) -> None:
        self.source = source
        self.path = path
        self.tokens: List[Token] = tokenize(source, path)
        self.pos = 0
        self._last: Optional[Token] = None
        # Inside brackets a newline never ends an expression
        self._bracket_depth = 0
        self._nesting = 0
        self._too_deep = False

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.kind != TokenKind.EOF:
            self.pos += 1
        self._last = token
        return token

    def at(self, *values: str) -> bool:
        token = self.peek()
        return token.kind in (TokenKind.PUNCT, TokenKind.NAME) and token.value in values

    def eat(self, *values: str) -> Optional[Token]:
        if self.at(*values):
            return self.advance()
        return None

    def expect(self, value: str) -> Token:
        if self.at(value):
            return self.advance()
        raise self._error(f"Expected '{value}' but found '{self.peek().value or 'end of file'}'")

    def _expect_name(self) -> Token:
        token = self.peek()
        if token.kind != TokenKind.NAME:
            raise self._error(f"Expected identifier but found '{token.value or 'end of file'}'")
        return self.advance()

    def _at_eof(self) -> bool:
        return self.peek().kind == TokenKind.EOF

    def _error(self, message: str, token: Optional[Token] = None) -> ParseError:
        token = token or self.peek()
        return ParseError(message, self.path, token.line, token.column)

    def _finish(self, node: N, start: Token) -> N:
        """Attach location and raw source text spanning start..last consumed token."""
        node.loc = SourceLocation(self.path, start.line, start.column)
        end = start.start
        if self._last is not None and self._last.end > start.start:
            end = self._last.end
        node.raw = self.source[start.start:end]
        return node

    def _matching_index(self, index: int) -> Optional[int]:
        depth = 0
        for i in range(index, len(self.tokens)):
            token = self.tokens[i]
            if token.kind != TokenKind.PUNCT:
                continue
            if token.value in OPENERS:
                depth += 1
            elif token.value in CLOSERS:
                depth -= 1
                if depth == 0:
                    return i
        return None

    def _skip_balanced(self) -> None:
        """Skip a bracketed group starting at the current opening token."""
        opener = self.advance()
        depth = 1
        while depth:
            token = self.advance()
            if token.kind == TokenKind.EOF:
                raise self._error(f"Unbalanced '{opener.value}'", opener)
            if token.kind != TokenKind.PUNCT:
                continue
            if token.value in OPENERS:
                depth += 1
            elif token.value in CLOSERS:
                depth -= 1

    def _skip_angles(self) -> None:
        """Skip a ``<...>`` type parameter list."""
        depth = 0
        while True:
            token = self.peek()
            if token.kind == TokenKind.EOF:
                raise self._error("Unbalanced '<'")
            if token.is_punct(*OPENERS):
                self._skip_balanced()
                continue
            self.advance()
            if token.is_punct("<"):
                depth += 1
            elif token.is_punct(">"):
                depth -= 1
            elif token.is_punct(">>"):
                depth -= 2
            elif token.is_punct(">>>"):
                depth -= 3
            if depth <= 0:
                return

    def _is_operator(self, token: Optional[Token]) -> bool:
        if token is None:
            return True
        if token.kind == TokenKind.PUNCT:
            return token.value not in (")", "]", "}", "|}", "++", "--", ";")
        if token.kind == TokenKind.NAME:
            return token.value in OPERATOR_KEYWORDS
        return False

    def _ends_by_newline(self, token: Token) -> bool:
        """Automatic semicolon insertion at statement level."""
        if self._bracket_depth > 0 or not token.newline_before:
            return False
        if token.kind not in (TokenKind.NAME, TokenKind.STRING, TokenKind.NUMBER):
            return False
        return not self._is_operator(self._last)

    def _in_brackets(self, parse_fn: Callable[[], N]) -> N:
        self._bracket_depth += 1
        try:
            return parse_fn()
        finally:
            self._bracket_depth -= 1

    def _attempt(self, parse_fn: Callable[[], N]) -> Optional[N]:
        """Run parse_fn, rewinding the token stream if it fails."""
        saved = (self.pos, self._last, self._bracket_depth, list(self.tokens))
        try:
            return parse_fn()
        except ParseError:
            if self._too_deep:
                raise
            self.pos, self._last, self._bracket_depth, self.tokens = saved
            return None

    def _enter_nested(self) -> None:
        if self._nesting >= MAX_NESTING:
            self._too_deep = True
            raise self._error(f"Nesting deeper than {MAX_NESTING} levels")
        self._nesting += 1

    # ------------------------------------------------------------------
    # Program and statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        body: List[Statement] = []
        while not self._at_eof():
            start_pos = self.pos
            statement = self._parse_statement()
            if statement is not None:
                body.append(statement)
            if self.pos == start_pos:
                self.advance()
        return Program(
            body=body,
            source=self.source,
            path=self.path,
            loc=SourceLocation(self.path, 1, 0)
        )

    def _parse_statement(self) -> Optional[Statement]:
        start = self.peek()
        statement = self._parse_statement_inner()
        if statement is not None and not statement.leading_comments:
            statement.leading_comments = list(start.comments)
        return statement

    def _parse_statement_inner(self) -> Optional[Statement]:
        token = self.peek()
        following = self.peek(1)

        if token.is_punct(";"):
            self.advance()
            return None
        if token.is_punct("{"):
            self._skip_balanced()
            return None
        if token.is_punct("@"):
            while self.at("@"):
                self._skip_decorator()
            return self._parse_statement()
        if token.is_name("import") and not following.is_punct("(", "."):
            return self._parse_import()
        if token.is_name("export"):
            return self._parse_export()
        if token.is_name("const", "var") or (token.is_name("let") and following.kind == TokenKind.NAME):
            return self._parse_variable_declaration()
        if token.is_name("type") and following.kind == TokenKind.NAME and self.peek(2).is_punct("=", "<"):
            return self._parse_type_alias()
        if token.is_name("opaque") and following.is_name("type"):
            return self._parse_type_alias()
        if token.is_name("class"):
            return self._parse_class()
        if token.is_name("function") or (
            token.is_name("async") and following.is_name("function") and not following.newline_before
        ):
            return self._parse_function_declaration()
        if token.is_name("declare", "interface", "enum") and following.kind == TokenKind.NAME \
                and not following.newline_before:
            self._skip_statement()
            return None
        return self._parse_expression_statement()

    def _skip_statement(self, first: bool = True) -> None:
        depth = 0
        while True:
            token = self.peek()
            if token.kind == TokenKind.EOF:
                return
            if depth == 0 and token.is_punct(";"):
                self.advance()
                return
            if depth == 0 and not first:
                if token.is_punct(*CLOSERS) or self._ends_by_newline(token):
                    return
            if token.is_punct(*OPENERS):
                depth += 1
            elif token.is_punct(*CLOSERS):
                if depth == 0:
                    return
                depth -= 1
            self.advance()
            first = False

    def _skip_decorator(self) -> None:
        self.expect("@")
        self._expect_name()
        while self.eat("."):
            self._expect_name()
        if self.at("("):
            self._skip_balanced()

    def _parse_expression_statement(self) -> Optional[Statement]:
        start = self.peek()
        start_pos = self.pos
        if start.kind == TokenKind.NAME and start.value not in NON_PRIMARY_KEYWORDS:
            target = self._parse_primary()
            if target is not None:
                target = self._parse_postfix(target, start)
            if isinstance(target, (Identifier, MemberExpression)) and self.at("="):
                self.advance()
                value = self._parse_expression()
                assignment = self._finish(AssignmentExpression(target=target, value=value), start)
                self.eat(";")
                return self._finish(ExpressionStatement(expression=assignment), start)
        self._skip_statement(first=self.pos == start_pos)
        return None

    def _parse_import(self) -> Statement:
        start = self.expect("import")
        import_kind = "value"
        if self.peek().is_name("type", "typeof") and not self.peek(1).is_name("from") \
                and not self.peek(1).is_punct(","):
            import_kind = self.advance().value

        specifiers: List[ImportSpecifier] = []
        if self.peek().kind == TokenKind.STRING:
            source = string_value(self.advance().value)
            self.eat(";")
            return self._finish(ImportDeclaration(source=source, import_kind=import_kind), start)

        if self.peek().kind == TokenKind.NAME:
            local = self.advance()
            specifiers.append(self._finish(
                ImportSpecifier(kind="default", imported="default", local=local.value), local
            ))
            self.eat(",")

        if self.at("*"):
            spec_start = self.advance()
            self.expect("as")
            local = self._expect_name()
            specifiers.append(self._finish(
                ImportSpecifier(kind="namespace", imported="*", local=local.value), spec_start
            ))
        elif self.at("{"):
            self.advance()
            while not self.at("}"):
                spec_start = self.peek()
                if self.peek().is_name("type", "typeof") and self.peek(1).kind == TokenKind.NAME \
                        and not self.peek(1).is_name("as"):
                    self.advance()
                token = self.advance()
                if token.kind == TokenKind.STRING:
                    imported = string_value(token.value)
                elif token.kind == TokenKind.NAME:
                    imported = token.value
                else:
                    raise self._error("Expected import specifier", token)
                local = imported
                if self.eat("as"):
                    local = self._expect_name().value
                specifiers.append(self._finish(
                    ImportSpecifier(kind="named", imported=imported, local=local), spec_start
                ))
                if not self.eat(","):
                    break
            self.expect("}")

        self.expect("from")
        source_token = self.advance()
        if source_token.kind != TokenKind.STRING:
            raise self._error("Expected module specifier string", source_token)
        if self.at("assert", "with") and not self.peek().newline_before and self.peek(1).is_punct("{"):
            self.advance()
            self._skip_balanced()
        self.eat(";")

        return self._finish(ImportDeclaration(
            source=string_value(source_token.value),
            specifiers=specifiers,
            import_kind=import_kind
        ), start)

    def _parse_export(self) -> Optional[Statement]:
        start = self.expect("export")

        if self.eat("default"):
            token = self.peek()
            declaration: Optional[Node]
            if token.is_name("class"):
                declaration = self._parse_class()
            elif token.is_name("function") or (token.is_name("async") and self.peek(1).is_name("function")):
                declaration = self._parse_function_declaration()
            else:
                declaration = self._parse_expression()
                self.eat(";")
            if declaration is not None and not declaration.leading_comments:
                declaration.leading_comments = list(start.comments)
            return self._finish(ExportDefaultDeclaration(declaration=declaration), start)

        if self.at("*"):
            self.advance()
            exported = None
            if self.eat("as"):
                exported = self._expect_name().value
            self.expect("from")
            source = string_value(self.advance().value)
            self.eat(";")
            return self._finish(ExportAllDeclaration(source=source, exported=exported), start)

        export_kind = "value"
        if self.peek().is_name("type") and self.peek(1).is_punct("{"):
            self.advance()
            export_kind = "type"

        if self.at("{"):
            self.advance()
            specifiers: List[ExportSpecifier] = []
            while not self.at("}"):
                spec_start = self.peek()
                if self.peek().is_name("type") and self.peek(1).kind == TokenKind.NAME \
                        and not self.peek(1).is_name("as"):
                    self.advance()
                token = self.advance()
                if token.kind == TokenKind.STRING:
                    local = string_value(token.value)
                elif token.kind == TokenKind.NAME:
                    local = token.value
                else:
                    raise self._error("Expected export specifier", token)
                exported = local
                if self.eat("as"):
                    exported_token = self.advance()
                    exported = exported_token.value
                    if exported_token.kind == TokenKind.STRING:
                        exported = string_value(exported_token.value)
                specifiers.append(self._finish(ExportSpecifier(local=local, exported=exported), spec_start))
                if not self.eat(","):
                    break
            self.expect("}")
            source = None
            if self.eat("from"):
                source = string_value(self.advance().value)
            self.eat(";")
            return self._finish(ExportNamedDeclaration(
                specifiers=specifiers,
                source=source,
                export_kind=export_kind
            ), start)

        declaration = self._parse_statement()
        if declaration is None:
            return None
        if not declaration.leading_comments:
            declaration.leading_comments = list(start.comments)
        return self._finish(ExportNamedDeclaration(declaration=declaration), start)

    def _parse_variable_declaration(self) -> Statement:
        start = self.advance()
        declarations: List[VariableDeclarator] = []
        while True:
            declarator_start = self.peek()
            name = None
            if declarator_start.kind == TokenKind.NAME:
                name = self.advance().value
            elif self.at("{", "["):
                self._skip_balanced()
            else:
                raise self._error("Expected variable name")

            annotation = None
            if self.eat(":"):
                annotation = self._parse_type()
            init = None
            if self.eat("="):
                init = self._parse_expression()

            declarations.append(self._finish(
                VariableDeclarator(name=name, init=init, type_annotation=annotation),
                declarator_start
            ))
            if not self.eat(","):
                break
        self.eat(";")
        return self._finish(VariableDeclaration(kind=start.value, declarations=declarations), start)

    def _parse_type_alias(self) -> Statement:
        start = self.peek()
        opaque = bool(self.eat("opaque"))
        self.expect("type")
        name = self._expect_name().value
        type_parameters: List[str] = []
        if self.at("<"):
            type_parameters = self._parse_type_parameter_names()
        if opaque and self.eat(":"):
            self._parse_type()
        right = None
        if self.eat("="):
            right = self._parse_type()
        self.eat(";")
        return self._finish(TypeAlias(
            name=name,
            right=right,
            opaque=opaque,
            type_parameters=type_parameters
        ), start)

    def _parse_type_parameter_names(self) -> List[str]:
        self.expect("<")
        names = []
        while not self._at_angle_close():
            self.eat("+", "-")
            names.append(self._expect_name().value)
            if self.eat(":"):
                self._parse_type()
            if self.eat("="):
                self._parse_type()
            if not self.eat(","):
                break
        self._close_angle()
        return names

    def _parse_class(self) -> ClassDeclaration:
        start = self.expect("class")
        name = None
        if self.peek().kind == TokenKind.NAME and not self.peek().is_name("extends", "implements"):
            name = self.advance().value
        if self.at("<"):
            self._skip_angles()

        superclass = None
        super_type_parameters: List[TypeAnnotation] = []
        if self.eat("extends"):
            superclass_start = self.peek()
            superclass = self._parse_primary()
            if superclass is None:
                raise self._error("Expected superclass expression")
            superclass = self._parse_postfix(superclass, superclass_start)
            if self.at("<"):
                super_type_parameters = self._parse_type_arguments()

        if self.eat("implements"):
            while not self.at("{") and not self._at_eof():
                if self.at("<"):
                    self._skip_angles()
                else:
                    self.advance()

        self.expect("{")
        body: List[ClassProperty] = []
        saved_depth = self._bracket_depth
        self._bracket_depth = 0
        try:
            while not self.at("}"):
                if self._at_eof():
                    raise self._error("Unterminated class body", start)
                member_start = self.pos
                member = self._parse_class_member()
                if member is not None:
                    body.append(member)
                if self.pos == member_start:
                    self.advance()
        finally:
            self._bracket_depth = saved_depth
        self.expect("}")

        node = self._finish(ClassDeclaration(
            name=name,
            superclass=superclass,
            super_type_parameters=super_type_parameters,
            body=body
        ), start)
        node.leading_comments = list(start.comments)
        return node

    def _parse_class_member(self) -> Optional[ClassProperty]:
        if self.eat(";"):
            return None
        while self.at("@"):
            self._skip_decorator()

        start = self.peek()
        static = False
        while self.peek().is_name(*CLASS_MODIFIERS) and not self.peek(1).is_punct(
            "(", "=", ":", ";", "<", "?", "}"
        ):
            if self.advance().value == "static":
                static = True
        if self.at("{"):
            # static initialization block
            self._skip_balanced()
            return None
        while self.at("+", "-", "*"):
            self.advance()

        token = self.peek()
        key: Optional[str]
        if token.kind == TokenKind.NAME:
            key = self.advance().value
        elif token.kind == TokenKind.STRING:
            key = string_value(self.advance().value)
        elif token.kind == TokenKind.NUMBER:
            key = self.advance().value
        elif self.at("#"):
            self.advance()
            key = "#" + self._expect_name().value
        elif self.at("["):
            self._skip_balanced()
            key = None
        else:
            raise self._error(f"Unexpected token '{token.value}' in class body")

        self.eat("?")
        if self.at("(", "<"):
            if self.at("<"):
                self._skip_angles()
            self._parse_function_signature()
            if self.at("{"):
                self._skip_balanced()
            return None

        annotation = None
        if self.eat(":"):
            annotation = self._parse_type()
        value = None
        if self.eat("="):
            value = self._parse_expression()
        self.eat(";")

        if key is None:
            return None
        member = self._finish(ClassProperty(
            key=key,
            value=value,
            type_annotation=annotation,
            static=static
        ), start)
        member.leading_comments = list(start.comments)
        return member

    def _parse_function_declaration(self) -> FunctionDeclaration:
        start = self.peek()
        is_async = bool(self.eat("async"))
        self.expect("function")
        self.eat("*")
        name = None
        if self.peek().kind == TokenKind.NAME:
            name = self.advance().value
        params, return_type = self._parse_function_signature()
        if self.at("{"):
            self._skip_balanced()
        else:
            self.eat(";")
        node = self._finish(FunctionDeclaration(
            name=name,
            params=params,
            return_type=return_type,
            is_async=is_async
        ), start)
        node.leading_comments = list(start.comments)
        return node

    def _parse_function_signature(
        self,
        allow_bare_arrow: bool = True
    ) -> Tuple[List[Param], Optional[TypeAnnotation]]:
        if self.at("<"):
            self._skip_angles()
        params = self._parse_params()
        return_type = None
        if self.eat(":"):
            return_type = self._parse_type(allow_bare_arrow=allow_bare_arrow)
        if self.at("%") and self.peek(1).is_name("checks"):
            self.advance()
            self.advance()
        return params, return_type

    def _parse_params(self) -> List[Param]:
        self.expect("(")

        def parse_list() -> List[Param]:
            params: List[Param] = []
            while not self.at(")"):
                start = self.peek()
                rest = bool(self.eat("..."))
                name = None
                if self.peek().kind == TokenKind.NAME:
                    name = self.advance().value
                elif self.at("{", "["):
                    self._skip_balanced()
                else:
                    raise self._error("Unexpected token in parameter list")
                optional = bool(self.eat("?"))
                annotation = None
                if self.eat(":"):
                    annotation = self._parse_type()
                if self.eat("="):
                    self._parse_expression()
                params.append(self._finish(Param(
                    name=name,
                    type_annotation=annotation,
                    optional=optional,
                    rest=rest
                ), start))
                if not self.eat(","):
                    break
            return params

        params = self._in_brackets(parse_list)
        self.expect(")")
        return params

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _at_expression_end(self, stop: Tuple[str, ...] = ()) -> bool:
        token = self.peek()
        if token.kind == TokenKind.EOF:
            return True
        if token.kind == TokenKind.PUNCT and (token.value in EXPRESSION_END or token.value in stop):
            return True
        return self._ends_by_newline(token)

    def _skip_expression(self, stop: Tuple[str, ...] = ()) -> None:
        depth = 0
        while True:
            token = self.peek()
            if token.kind == TokenKind.EOF:
                return
            if depth == 0:
                if token.kind == TokenKind.PUNCT and (token.value in EXPRESSION_END or token.value in stop):
                    return
                if self._ends_by_newline(token):
                    return
            if token.is_punct(*OPENERS):
                depth += 1
            elif token.is_punct(*CLOSERS):
                depth -= 1
            self.advance()

    def _parse_expression(self, stop: Tuple[str, ...] = ()) -> Expression:
        start = self.peek()
        if self._at_expression_end(stop):
            raise self._error(f"Expected expression but found '{start.value or 'end of file'}'")
        self._enter_nested()
        try:
            expression = self._parse_primary()
            if expression is not None:
                expression = self._parse_postfix(expression, start)
                if self._at_expression_end(stop):
                    return expression
        finally:
            self._nesting -= 1
        self._skip_expression(stop)
        return self._finish(OpaqueExpression(), start)

    def _parse_primary(self) -> Optional[Expression]:
        token = self.peek()
        following = self.peek(1)

        if token.kind == TokenKind.NAME:
            value = token.value
            if value == "function" or (value == "async" and following.is_name("function")):
                return self._parse_function_expression()
            if value == "class":
                return self._parse_class()
            if value == "async" and not following.newline_before and (
                following.is_punct("(") or (following.kind == TokenKind.NAME and self.peek(2).is_punct("=>"))
            ):
                return self._attempt(self._parse_arrow_function)
            if following.is_punct("=>"):
                return self._parse_arrow_function()
            if value in ("true", "false"):
                self.advance()
                return self._finish(Literal(value=value == "true"), token)
            if value == "null":
                self.advance()
                return self._finish(Literal(value=None), token)
            if value in NON_PRIMARY_KEYWORDS:
                return None
            self.advance()
            return self._finish(Identifier(name=value), token)

        if token.kind == TokenKind.STRING:
            self.advance()
            return self._finish(Literal(value=string_value(token.value)), token)
        if token.kind == TokenKind.NUMBER:
            self.advance()
            return self._finish(Literal(value=number_value(token.value)), token)
        if token.is_punct("-") and following.kind == TokenKind.NUMBER:
            self.advance()
            self.advance()
            return self._finish(Literal(value=-number_value(following.value)), token)
        if token.is_punct("["):
            return self._parse_array()
        if token.is_punct("{"):
            return self._parse_object()
        if token.is_punct("("):
            close = self._matching_index(self.pos)
            after = self.tokens[close + 1] if close is not None and close + 1 < len(self.tokens) else None
            if after is not None and after.is_punct("=>"):
                return self._parse_arrow_function()
            if after is not None and after.is_punct(":"):
                arrow = self._attempt(self._parse_arrow_function)
                if arrow is not None:
                    return arrow
            return self._parse_parenthesized()
        return None

    def _parse_postfix(self, expression: Expression, start: Token) -> Expression:
        if isinstance(expression, (FunctionExpression, ClassDeclaration)):
            return expression
        while True:
            if self.at(".", "?."):
                self.advance()
                if self.at("("):
                    continue
                self.eat("#")
                name = self._expect_name().value
                expression = self._finish(MemberExpression(object=expression, property=name), start)
            elif self.at("["):
                self.advance()
                key = self._in_brackets(self._parse_expression)
                self.expect("]")
                if isinstance(key, Literal) and isinstance(key.value, str):
                    key_name = key.value
                else:
                    key_name = key.raw
                expression = self._finish(
                    MemberExpression(object=expression, property=key_name, computed=True), start
                )
            elif self.at("("):
                arguments = self._parse_arguments()
                expression = self._finish(CallExpression(callee=expression, arguments=arguments), start)
            elif self.peek().kind == TokenKind.TEMPLATE:
                self.advance()
                expression = self._finish(OpaqueExpression(), start)
            else:
                return expression

    def _parse_arguments(self) -> List[Expression]:
        self.expect("(")

        def parse_list() -> List[Expression]:
            arguments: List[Expression] = []
            while not self.at(")"):
                self.eat("...")
                arguments.append(self._parse_expression())
                if not self.eat(","):
                    break
            return arguments

        arguments = self._in_brackets(parse_list)
        self.expect(")")
        return arguments

    def _parse_parenthesized(self) -> Expression:
        start = self.expect("(")

        def parse_inner() -> Expression:
            expression = self._parse_expression(stop=(":",))
            if self.eat(":"):
                annotation = self._parse_type()
                expression = self._finish(
                    TypeCastExpression(expression=expression, type_annotation=annotation), start
                )
            while not self.at(")") and not self._at_eof():
                # sequence expressions
                self.eat(",")
                self._skip_expression()
            return expression

        expression = self._in_brackets(parse_inner)
        self.expect(")")
        return expression

    def _parse_array(self) -> ArrayExpression:
        start = self.expect("[")

        def parse_elements() -> List[Optional[Expression]]:
            elements: List[Optional[Expression]] = []
            while not self.at("]"):
                if self.eat(","):
                    elements.append(None)
                    continue
                element_start = self.peek()
                if self.eat("..."):
                    argument = self._parse_expression()
                    elements.append(self._finish(SpreadElement(argument=argument), element_start))
                else:
                    elements.append(self._parse_expression())
                if not self.eat(","):
                    break
            return elements

        elements = self._in_brackets(parse_elements)
        self.expect("]")
        return self._finish(ArrayExpression(elements=elements), start)

    def _parse_object(self) -> ObjectExpression:
        start = self.expect("{")

        def parse_properties() -> list:
            properties = []
            while not self.at("}"):
                property_start = self.peek()
                if self.eat("..."):
                    argument = self._parse_expression()
                    spread = self._finish(SpreadElement(argument=argument), property_start)
                    spread.leading_comments = list(property_start.comments)
                    properties.append(spread)
                else:
                    properties.append(self._parse_object_property())
                if not self.eat(","):
                    break
            return properties

        properties = self._in_brackets(parse_properties)
        self.expect("}")
        return self._finish(ObjectExpression(properties=properties), start)

    def _parse_object_property(self) -> Property:
        start = self.peek()
        if self.peek().is_name("get", "set", "async") and not self.peek(1).is_punct(",", ":", "(", "}", "="):
            self.advance()
        self.eat("*")

        token = self.peek()
        computed = False
        if token.kind == TokenKind.NAME:
            key = self.advance().value
        elif token.kind == TokenKind.STRING:
            key = string_value(self.advance().value)
        elif token.kind == TokenKind.NUMBER:
            key = self.advance().value
        elif self.at("["):
            self.advance()
            computed = True
            key = self._in_brackets(self._parse_expression).raw
            self.expect("]")
        else:
            raise self._error(f"Unexpected token '{token.value}' in object literal")

        if self.eat(":"):
            value = self._parse_expression()
            node = self._finish(Property(key=key, value=value, computed=computed), start)
        elif self.at("(", "<"):
            method_start = self.peek()
            params, return_type = self._parse_function_signature()
            if self.at("{"):
                self._skip_balanced()
            method = self._finish(
                FunctionExpression(name=key, params=params, return_type=return_type), method_start
            )
            node = self._finish(Property(key=key, value=method, computed=computed, method=True), start)
        else:
            value = self._finish(Identifier(name=key), token)
            if self.eat("="):
                self._parse_expression()
            node = self._finish(Property(key=key, value=value, shorthand=True), start)

        node.leading_comments = list(start.comments)
        return node

    def _parse_function_expression(self) -> FunctionExpression:
        start = self.peek()
        is_async = bool(self.eat("async"))
        self.expect("function")
        self.eat("*")
        name = None
        if self.peek().kind == TokenKind.NAME:
            name = self.advance().value
        params, return_type = self._parse_function_signature()
        if self.at("{"):
            self._skip_balanced()
        return self._finish(FunctionExpression(
            name=name,
            params=params,
            return_type=return_type,
            is_async=is_async
        ), start)

    def _parse_arrow_function(self) -> FunctionExpression:
        start = self.peek()
        is_async = False
        if self.peek().is_name("async") and not self.peek(1).is_punct("=>"):
            self.advance()
            is_async = True

        return_type = None
        if self.peek().kind == TokenKind.NAME:
            token = self.advance()
            params = [self._finish(Param(name=token.value), token)]
        else:
            params, return_type = self._parse_function_signature(allow_bare_arrow=False)

        self.expect("=>")
        if self.at("{"):
            self._skip_balanced()
        else:
            self._parse_expression()

        return self._finish(FunctionExpression(
            params=params,
            return_type=return_type,
            arrow=True,
            is_async=is_async
        ), start)

    # ------------------------------------------------------------------
    # Flow type annotations
    # ------------------------------------------------------------------

    def _at_angle_close(self) -> bool:
        return self.peek().is_punct(*ANGLE_CLOSERS)

    def _close_angle(self) -> None:
        token = self.peek()
        if token.is_punct(">"):
            self.advance()
            return
        if not self._at_angle_close():
            raise self._error(f"Expected '>' but found '{token.value or 'end of file'}'")
        # Split `>>` so nested type argument lists close one level at a time
        self._last = Token(
            kind=TokenKind.PUNCT,
            value=">",
            start=token.start,
            end=token.start + 1,
            line=token.line,
            column=token.column
        )
        self.tokens[self.pos] = Token(
            kind=TokenKind.PUNCT,
            value=token.value[1:],
            start=token.start + 1,
            end=token.end,
            line=token.line,
            column=token.column + 1
        )

    def _parse_type_arguments(self) -> List[TypeAnnotation]:
        self.expect("<")
        params: List[TypeAnnotation] = []
        while not self._at_angle_close():
            params.append(self._parse_type())
            if not self.eat(","):
                break
        self._close_angle()
        return params

    def parse_type(self) -> TypeAnnotation:
        """Parse a standalone type annotation."""
        return self._parse_type()

    def _parse_type(self, allow_bare_arrow: bool = True) -> TypeAnnotation:
        start = self.peek()
        self.eat("|")
        self._enter_nested()
        try:
            types = [self._parse_intersection_type(allow_bare_arrow)]
            while self.eat("|"):
                types.append(self._parse_intersection_type(allow_bare_arrow))
        finally:
            self._nesting -= 1
        if len(types) == 1:
            return types[0]
        return self._finish(UnionTypeAnnotation(types=types), start)

    def _parse_intersection_type(self, allow_bare_arrow: bool) -> TypeAnnotation:
        start = self.peek()
        self.eat("&")
        types = [self._parse_prefix_type(allow_bare_arrow)]
        while self.eat("&"):
            types.append(self._parse_prefix_type(allow_bare_arrow))
        if len(types) == 1:
            return types[0]
        return self._finish(IntersectionTypeAnnotation(types=types), start)

    def _parse_prefix_type(self, allow_bare_arrow: bool) -> TypeAnnotation:
        start = self.peek()
        if self.eat("?"):
            inner = self._parse_prefix_type(allow_bare_arrow)
            return self._finish(NullableTypeAnnotation(type_annotation=inner), start)
        return self._parse_postfix_type(allow_bare_arrow)

    def _parse_postfix_type(self, allow_bare_arrow: bool) -> TypeAnnotation:
        start = self.peek()
        annotation = self._parse_primary_type()
        while self.at("[") and not self.peek().newline_before:
            self.advance()
            if self.eat("]"):
                annotation = self._finish(ArrayTypeAnnotation(element_type=annotation), start)
            else:
                # indexed access, e.g. Props['size']
                self._parse_type()
                self.expect("]")
                annotation = self._finish(GenericTypeAnnotation(), start)
                annotation.name = annotation.raw
        if allow_bare_arrow and self.at("=>"):
            param = self._finish(FunctionTypeParam(type_annotation=annotation), start)
            self.advance()
            return_type = self._parse_type()
            annotation = self._finish(
                FunctionTypeAnnotation(params=[param], return_type=return_type), start
            )
        return annotation

    def _parse_primary_type(self) -> TypeAnnotation:
        token = self.peek()

        if token.is_punct("{", "{|"):
            return self._parse_object_type()
        if token.is_punct("["):
            self.advance()
            types: List[TypeAnnotation] = []
            while not self.at("]"):
                types.append(self._parse_type())
                if not self.eat(","):
                    break
            self.expect("]")
            return self._finish(TupleTypeAnnotation(types=types), token)
        if token.is_punct("("):
            return self._parse_parenthesized_type()
        if token.is_punct("<"):
            self._skip_angles()
            return self._parse_function_type(token)
        if token.kind == TokenKind.STRING:
            self.advance()
            return self._finish(LiteralTypeAnnotation(value=string_value(token.value)), token)
        if token.kind == TokenKind.NUMBER:
            self.advance()
            return self._finish(LiteralTypeAnnotation(value=number_value(token.value)), token)
        if token.is_punct("-") and self.peek(1).kind == TokenKind.NUMBER:
            self.advance()
            number = self.advance()
            return self._finish(LiteralTypeAnnotation(value=-number_value(number.value)), token)
        if token.is_punct("*"):
            self.advance()
            return self._finish(ExistsTypeAnnotation(), token)

        if token.kind == TokenKind.NAME:
            if token.value == "typeof":
                self.advance()
                argument = self._parse_primary_type()
                return self._finish(TypeofTypeAnnotation(argument=argument), token)
            if token.value in ("true", "false"):
                self.advance()
                return self._finish(LiteralTypeAnnotation(value=token.value == "true"), token)
            if token.value in PRIMITIVE_TYPES and not self.peek(1).is_punct("."):
                self.advance()
                return self._finish(PrimitiveTypeAnnotation(name=token.value), token)

            names = [self.advance().value]
            while self.at(".") and self.peek(1).kind == TokenKind.NAME:
                self.advance()
                names.append(self.advance().value)
            type_parameters: List[TypeAnnotation] = []
            if self.at("<"):
                type_parameters = self._parse_type_arguments()
            return self._finish(GenericTypeAnnotation(
                name=".".join(names),
                type_parameters=type_parameters
            ), token)

        raise self._error(f"Unexpected token '{token.value or 'end of file'}' in type annotation")

    def _parse_parenthesized_type(self) -> TypeAnnotation:
        start = self.peek()
        close = self._matching_index(self.pos)
        after = self.tokens[close + 1] if close is not None and close + 1 < len(self.tokens) else None
        if after is not None and after.is_punct("=>"):
            return self._parse_function_type(start)
        self.expect("(")
        inner = self._parse_type()
        self.expect(")")
        return inner

    def _parse_function_type(self, start: Token, method: bool = False) -> FunctionTypeAnnotation:
        if self.at("<"):
            self._skip_angles()
        params, rest = self._parse_function_type_params()
        self.expect(":" if method else "=>")
        return_type = self._parse_type()
        return self._finish(FunctionTypeAnnotation(
            params=params,
            rest=rest,
            return_type=return_type
        ), start)

    def _parse_function_type_params(self) -> Tuple[List[FunctionTypeParam], Optional[FunctionTypeParam]]:
        self.expect("(")
        params: List[FunctionTypeParam] = []
        rest = None
        while not self.at(")"):
            start = self.peek()
            is_rest = bool(self.eat("..."))
            name = None
            optional = False
            following = self.peek(1)
            if self.peek().kind == TokenKind.NAME and (
                following.is_punct(":") or (following.is_punct("?") and self.peek(2).is_punct(":"))
            ):
                name = self.advance().value
                optional = bool(self.eat("?"))
                self.expect(":")
            annotation = self._parse_type()
            param = self._finish(
                FunctionTypeParam(name=name, type_annotation=annotation, optional=optional), start
            )
            if is_rest:
                rest = param
            else:
                params.append(param)
            if not self.eat(","):
                break
        self.expect(")")
        return params, rest

    def _parse_object_type(self) -> ObjectTypeAnnotation:
        start = self.advance()
        exact = start.value == "{|"
        closer = "|}" if exact else "}"
        properties = []
        inexact = False

        while not self.at(closer):
            if self._at_eof():
                raise self._error("Unterminated object type", start)
            member_start = self.peek()
            if self.at("+", "-") and self.peek(1).is_punct("["):
                self.advance()

            if self.at("..."):
                self.advance()
                if self.at(",", ";", closer):
                    inexact = True
                else:
                    argument = self._parse_type()
                    spread = self._finish(ObjectTypeSpreadProperty(argument=argument), member_start)
                    spread.leading_comments = list(member_start.comments)
                    properties.append(spread)
            elif self.at("["):
                properties.append(self._parse_object_type_indexer(member_start))
            elif self.at("(", "<"):
                value = self._parse_function_type(member_start, method=True)
                properties.append(self._finish(ObjectTypeCallProperty(value=value), member_start))
            else:
                properties.append(self._parse_object_type_property())

            if not self.eat(",", ";"):
                break

        self.expect(closer)
        return self._finish(ObjectTypeAnnotation(
            properties=properties,
            exact=exact,
            inexact=inexact
        ), start)

    def _parse_object_type_indexer(self, start: Token) -> ObjectTypeIndexer:
        self.expect("[")
        name = None
        if self.peek().kind == TokenKind.NAME and self.peek(1).is_punct(":"):
            name = self.advance().value
            self.advance()
        key = self._parse_type()
        self.expect("]")
        self.eat("?")
        self.expect(":")
        value = self._parse_type()
        return self._finish(ObjectTypeIndexer(id=name, key=key, value=value), start)

    def _parse_object_type_property(self) -> ObjectTypeProperty:
        start = self.peek()
        if self.peek().is_name("static", "proto") and not self.peek(1).is_punct(":", "?", "(", "<"):
            self.advance()
        if self.at("+", "-"):
            self.advance()

        token = self.peek()
        if token.kind == TokenKind.NAME:
            key = self.advance().value
        elif token.kind == TokenKind.STRING:
            key = string_value(self.advance().value)
        elif token.kind == TokenKind.NUMBER:
            key = self.advance().value
        else:
            raise self._error(f"Unexpected token '{token.value or 'end of file'}' in object type")

        optional = bool(self.eat("?"))
        if self.at("(", "<"):
            method_start = self.peek()
            value = self._parse_function_type(method_start, method=True)
            node = self._finish(ObjectTypeProperty(
                key=key,
                value=value,
                optional=optional,
                method=True
            ), start)
        else:
            self.expect(":")
            value = self._parse_type()
            node = self._finish(ObjectTypeProperty(key=key, value=value, optional=optional), start)

        node.leading_comments = list(start.comments)
        return node


def parse(source: str, path: Optional[str] = None) -> Program:
    """Parse a JavaScript/Flow module into a ``Program``.

    Raises:
        ParseError: if the source cannot be tokenized or its module-level
            structure cannot be parsed.
    """
    parser = Parser(source, path)
    try:
        return parser.parse_program()
    except RecursionError:
        raise parser._error("Source is nested too deeply to parse") from None


def parse_type(source: str, path: Optional[str] = None) -> TypeAnnotation:
    """Parse a single Flow type expression, e.g. ``{a: string, ...B}``."""
    parser = Parser(source, path)
    try:
        annotation = parser.parse_type()
    except RecursionError:
        raise parser._error("Type is nested too deeply to parse") from None
    if not parser._at_eof():
        raise parser._error(f"Unexpected token '{parser.peek().value}' after type")
    return annotation
