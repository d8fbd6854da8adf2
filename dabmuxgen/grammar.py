"""
Tokenizer and block-tree parser for the brace-delimited multiplexer grammar.

The grammar is a sequence of named blocks ``name { ... }``, arbitrarily
nested, whose bodies hold ``key value`` or ``key "quoted value"`` lines.
Comments run from ``;`` or ``#`` to the end of the line.

Deutsch:
    Tokenizer und Parser für die geschweifte-Klammern-Grammatik der
    Multiplexer-Konfiguration. Liefert einen Blockbaum in einem Durchlauf.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

WORD = "word"
STRING = "string"
LBRACE = "lbrace"
RBRACE = "rbrace"
NEWLINE = "newline"

COMMENT_CHARS = ";#"
QUOTE_CHARS = "\"'"


class ConfigSyntaxError(ValueError):
    """Raised when the text cannot be split into balanced blocks."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int
    start: int
    end: int
    source: str  # the full physical line, used to rebuild unquoted values


@dataclass(frozen=True)
class Scalar:
    key: str
    value: str
    line: int


@dataclass
class Block:
    """
    A named block with its scalar fields and child blocks in source order.

    Deutsch:
        Ein benannter Block mit Feldern und Unterblöcken in Quellreihenfolge.
    """

    name: str
    line: int = 0
    value: str = ""
    scalars: List[Scalar] = field(default_factory=list)
    children: List["Block"] = field(default_factory=list)

    def get(self, key: str, default: str = "") -> str:
        """First scalar whose key matches case-insensitively."""
        wanted = key.lower()
        for scalar in self.scalars:
            if scalar.key.lower() == wanted:
                return scalar.value
        return default

    def find(self, name: str) -> Optional["Block"]:
        """First descendant block called ``name``, in order of appearance."""
        pending = list(reversed(self.children))
        while pending:
            child = pending.pop()
            if child.name == name:
                return child
            pending.extend(reversed(child.children))
        return None

    def find_path(self, *names: str) -> Optional["Block"]:
        current: Optional[Block] = self
        for name in names:
            if current is None:
                return None
            current = current.find(name)
        return current

    def iter_blocks(self) -> Iterator["Block"]:
        return iter(self.children)


def parse(text: str) -> Block:
    """
    Parse configuration text into an unnamed root block.

    Raises:
        ConfigSyntaxError: on a stray ``}`` or a block left open at the end.
    """

    return _Parser(list(tokenize(text))).parse()


def tokenize(text: str) -> Iterator[Token]:
    for line_no, line in enumerate(text.splitlines(), start=1):
        yield from _tokenize_line(line, line_no)
        yield Token(NEWLINE, "", line_no, len(line), len(line), line)


def _tokenize_line(line: str, line_no: int) -> Iterator[Token]:
    pos = 0
    length = len(line)
    while pos < length:
        ch = line[pos]
        if ch.isspace():
            pos += 1
            continue
        if ch in COMMENT_CHARS:
            return
        if ch == "{":
            yield Token(LBRACE, ch, line_no, pos, pos + 1, line)
            pos += 1
            continue
        if ch == "}":
            yield Token(RBRACE, ch, line_no, pos, pos + 1, line)
            pos += 1
            continue
        if ch in QUOTE_CHARS:
            close = line.find(ch, pos + 1)
            # an unterminated quote runs to the end of the line
            end = close if close != -1 else length
            yield Token(STRING, line[pos + 1 : end], line_no, pos, min(end + 1, length), line)
            pos = end + 1
            continue
        start = pos
        while pos < length and not line[pos].isspace() and line[pos] not in "{}" + COMMENT_CHARS:
            pos += 1
        yield Token(WORD, line[start:pos], line_no, start, pos, line)


class _Parser:
    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def parse(self) -> Block:
        root = Block(name="")
        # open blocks, innermost last
        stack: List[Block] = [root]
        while True:
            token = self.peek()
            block = stack[-1]
            if token is None:
                if len(stack) > 1:
                    raise ConfigSyntaxError(f"block '{block.name}' is never closed", block.line)
                return root
            if token.kind == NEWLINE:
                self.advance()
                continue
            if token.kind == RBRACE:
                if len(stack) == 1:
                    raise ConfigSyntaxError("unexpected '}'", token.line)
                self.advance()
                stack.pop()
                continue
            if token.kind == LBRACE:
                self.advance()
                child = Block(name="", line=token.line)
                block.children.append(child)
                stack.append(child)
                continue
            opened = self._parse_statement(block)
            if opened is not None:
                stack.append(opened)

    def _parse_statement(self, block: Block) -> Optional[Block]:
        key = self.advance()
        values: List[Token] = []
        while True:
            token = self.peek()
            if token is None or token.kind not in (WORD, STRING):
                break
            values.append(self.advance())

        if not values:
            self._skip_to_brace()
        token = self.peek()
        if token is not None and token.kind == LBRACE:
            self.advance()
            child = Block(name=key.text, line=key.line, value=_join(values))
            block.children.append(child)
            return child
        block.scalars.append(Scalar(key.text, _join(values), key.line))
        return None

    def _skip_to_brace(self) -> None:
        # "name" on its own line may have its "{" on a following line
        index = self.pos
        while index < len(self.tokens) and self.tokens[index].kind == NEWLINE:
            index += 1
        if index < len(self.tokens) and self.tokens[index].kind == LBRACE:
            self.pos = index


def _join(values: List[Token]) -> str:
    if not values:
        return ""
    if len(values) == 1:
        return values[0].text.strip()
    first, last = values[0], values[-1]
    raw = first.source[first.start : last.end].strip()
    return raw.strip(QUOTE_CHARS).strip()
