"""Operation document reader.

Just enough of the GraphQL grammar to find out *which* operation a
request asks for: the operation type, its optional name and the single
root field of its selection set.  Arguments, variable definitions,
directives and nested selections are skipped over, never interpreted;
argument values come from the request's ``variables`` instead.

Comments, commas and string literals are consumed by the tokenizer, so
text inside them can never be mistaken for a field name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

_TOKEN = re.compile(
    r"""
    (?P<ignored>[\s,\ufeff]+|\#[^\n\r]*)
    |(?P<block_string>\"\"\"(?:\\\"\"\"|(?!\"\"\").)*\"\"\")
    |(?P<string>"(?:\\.|[^"\\\n\r])*")
    |(?P<spread>\.\.\.)
    |(?P<number>-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
    |(?P<name>[_A-Za-z][_0-9A-Za-z]*)
    |(?P<punct>[!$&()\[\]{}:=@|])
    """,
    re.VERBOSE | re.DOTALL,
)

_OPEN = {"(": ")", "[": "]", "{": "}"}
_OPERATION_TYPES = ("query", "mutation")


class OperationSyntaxError(ValueError):
    """The document is not a single, well-formed operation."""


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    position: int


@dataclass(frozen=True)
class ParsedOperation:
    operation_type: str
    name: Optional[str]
    field: str
    alias: Optional[str] = None


def tokenize(source: str) -> List[Token]:
    tokens: List[Token] = []
    position = 0
    while position < len(source):
        match = _TOKEN.match(source, position)
        if match is None:
            raise OperationSyntaxError(
                f"Unexpected character {source[position]!r} at position {position}."
            )
        kind = match.lastgroup
        if kind != "ignored":
            tokens.append(Token(kind, match.group(), position))
        position = match.end()
    return tokens


class _Reader:
    def __init__(self, tokens: List[Token]) -> None:
        self._tokens = tokens
        self._index = 0

    @property
    def done(self) -> bool:
        return self._index >= len(self._tokens)

    def peek(self) -> Optional[Token]:
        return None if self.done else self._tokens[self._index]

    def next(self) -> Token:
        if self.done:
            raise OperationSyntaxError("Unexpected end of document.")
        token = self._tokens[self._index]
        self._index += 1
        return token

    def at(self, value: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == "punct" and token.value == value

    def expect(self, value: str) -> Token:
        token = self.next()
        if token.kind != "punct" or token.value != value:
            raise OperationSyntaxError(
                f"Expected {value!r} at position {token.position}, found {token.value!r}."
            )
        return token

    def name(self) -> str:
        token = self.next()
        if token.kind != "name":
            raise OperationSyntaxError(
                f"Expected a name at position {token.position}, found {token.value!r}."
            )
        return token.value

    def skip_group(self) -> None:
        """Consume a bracketed group, nested brackets included."""
        stack = [_OPEN[self.next().value]]
        while stack:
            token = self.next()
            if token.kind != "punct":
                continue
            if token.value in _OPEN:
                stack.append(_OPEN[token.value])
            elif token.value in _OPEN.values():
                if token.value != stack.pop():
                    raise OperationSyntaxError(
                        f"Mismatched {token.value!r} at position {token.position}."
                    )

    def skip_directives(self) -> None:
        while self.at("@"):
            self.next()
            self.name()
            if self.at("("):
                self.skip_group()


def _root_fields(reader: _Reader) -> Iterator[tuple[Optional[str], str]]:
    reader.expect("{")
    while not reader.at("}"):
        token = reader.peek()
        if token is not None and token.kind == "spread":
            raise OperationSyntaxError("Fragments are not supported at the root.")
        alias: Optional[str] = None
        field = reader.name()
        if reader.at(":"):
            reader.next()
            alias, field = field, reader.name()
        if reader.at("("):
            reader.skip_group()
        reader.skip_directives()
        if reader.at("{"):
            reader.skip_group()
        yield alias, field
    reader.expect("}")


def parse_operation(source: str) -> ParsedOperation:
    """Read the one operation in ``source``.

    Raises:
        OperationSyntaxError: if the document does not parse, holds
            anything other than exactly one operation, or that operation
            selects anything other than exactly one root field.
    """
    reader = _Reader(tokenize(source))
    if reader.done:
        raise OperationSyntaxError("Empty document.")

    name: Optional[str] = None
    if reader.at("{"):
        operation_type = "query"
    else:
        operation_type = reader.name()
        if operation_type not in _OPERATION_TYPES:
            raise OperationSyntaxError(f"Unsupported definition '{operation_type}'.")
        token = reader.peek()
        if token is not None and token.kind == "name":
            name = reader.name()
        if reader.at("("):
            reader.skip_group()
        reader.skip_directives()

    fields = list(_root_fields(reader))
    if not reader.done:
        raise OperationSyntaxError("Documents may contain a single operation only.")
    if len(fields) != 1:
        raise OperationSyntaxError(
            f"Expected exactly one root field, found {len(fields)}."
        )

    alias, field = fields[0]
    return ParsedOperation(
        operation_type=operation_type, name=name, field=field, alias=alias
    )
