"""Mini template language used by the prompt bodies.

Supported constructs::

    {{name}}                                  substitution
    {{#each name}}...{{this}}...{{/each}}     iteration (@last, @first, @index)
    {{#if name}}...{{/if}}                    conditional
    {{#unless name}}...{{/unless}}            inverse conditional

Rendering happens in two independent steps.  ``parse`` scans the text once
into a flat token stream and folds it into a tree of typed nodes using an
explicit stack; unmatched or mismatched directives raise
``TemplateSyntaxError``.  ``evaluate`` walks that tree against a context.
A block tag that sits alone on its line swallows the line's indentation and
newline, the same way ``trim_blocks``/``lstrip_blocks`` behave in Jinja2.

Missing names render as an empty string; rendering never fails on data.
Braces that do not hold a name or a block directive, such as JSX style
objects, are left in the output untouched.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .errors import TemplateSyntaxError


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

_TAG_PATTERN = re.compile(r"\{\{\s*(.*?)\s*\}\}")
_STANDALONE_TAIL = re.compile(r"[ \t]*(?:\r?\n|$)")
_NAME_PATTERN = re.compile(r"^[@A-Za-z_][\w.\-]*$")
_DIRECTIVE_PATTERN = re.compile(r"^([#/])(\w+)(?:\s+(.*))?$")

BLOCK_KINDS = ("each", "if", "unless")
LOOP_VARIABLES = ("this", "@last", "@first", "@index")


@dataclass(frozen=True)
class Token:
    kind: str  # "text" | "var" | "open" | "close"
    value: str
    name: str = ""
    position: int = 0


def _parse_tag(inner: str, position: int) -> Token | None:
    """Classify the inside of a ``{{ ... }}`` tag.

    Returns ``None`` when the tag is not template syntax at all, such as an
    empty ``{{}}`` or a JSX object literal like ``style={{ color: 'red' }}``;
    the caller keeps those braces as literal text.
    """
    directive = _DIRECTIVE_PATTERN.match(inner)
    if directive is None:
        if inner and _NAME_PATTERN.match(inner):
            return Token("var", inner, inner, position)
        return None

    sigil, kind, name = directive.group(1), directive.group(2), (directive.group(3) or "").strip()
    if sigil == "#":
        if kind not in BLOCK_KINDS:
            raise TemplateSyntaxError(f"unknown directive '#{kind}'", inner, position)
        if not name or not _NAME_PATTERN.match(name):
            raise TemplateSyntaxError(f"'#{kind}' needs a name", inner, position)
        return Token("open", kind, name, position)

    if kind not in BLOCK_KINDS or name:
        raise TemplateSyntaxError(f"unknown closing tag '{inner}'", inner, position)
    return Token("close", kind, "", position)


def tokenize(text: str) -> list[Token]:
    """Scan *text* left to right into a flat list of tokens."""
    tokens: list[Token] = []
    cursor = 0

    for match in _TAG_PATTERN.finditer(text):
        start, end = match.span()
        token = _parse_tag(match.group(1), start)
        if token is None:
            continue

        literal = text[cursor:start]
        if token.kind in ("open", "close"):
            line_start = text.rfind("\n", 0, start) + 1
            tail = _STANDALONE_TAIL.match(text, end)
            if text[line_start:start].strip(" \t") == "" and line_start >= cursor and tail:
                literal = text[cursor:line_start]
                end = tail.end()

        if literal:
            tokens.append(Token("text", literal, position=cursor))
        tokens.append(token)
        cursor = end

    if cursor < len(text):
        tokens.append(Token("text", text[cursor:], position=cursor))
    return tokens


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class EachBlock:
    name: str
    body: tuple["Node", ...] = ()


@dataclass(frozen=True)
class IfBlock:
    name: str
    body: tuple["Node", ...] = ()


@dataclass(frozen=True)
class UnlessBlock:
    name: str
    body: tuple["Node", ...] = ()


Node = Union[Literal, Variable, EachBlock, IfBlock, UnlessBlock]

_BLOCK_NODES = {"each": EachBlock, "if": IfBlock, "unless": UnlessBlock}


@dataclass
class _OpenBlock:
    kind: str
    name: str
    position: int
    children: list[Node] = field(default_factory=list)


def parse(text: str) -> tuple[Node, ...]:
    """Parse template *text* into a tuple of top-level nodes.

    Raises:
        TemplateSyntaxError: On a closing tag with no opener, a closing tag
            that does not match the innermost open block, or a block that is
            never closed.
    """
    root: list[Node] = []
    stack: list[_OpenBlock] = []

    for token in tokenize(text):
        siblings = stack[-1].children if stack else root

        if token.kind == "text":
            siblings.append(Literal(token.value))
        elif token.kind == "var":
            siblings.append(Variable(token.name))
        elif token.kind == "open":
            stack.append(_OpenBlock(token.value, token.name, token.position))
        else:
            if not stack:
                raise TemplateSyntaxError(
                    f"'{{{{/{token.value}}}}}' has no matching opening tag",
                    f"/{token.value}",
                    token.position,
                )
            block = stack.pop()
            if block.kind != token.value:
                raise TemplateSyntaxError(
                    f"'{{{{/{token.value}}}}}' closes '{{{{#{block.kind} {block.name}}}}}'",
                    f"/{token.value}",
                    token.position,
                )
            node = _BLOCK_NODES[block.kind](block.name, tuple(block.children))
            (stack[-1].children if stack else root).append(node)

    if stack:
        block = stack[-1]
        raise TemplateSyntaxError(
            f"'{{{{#{block.kind} {block.name}}}}}' is never closed",
            f"#{block.kind} {block.name}",
            block.position,
        )
    return tuple(root)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Frame:
    item: Any
    index: int
    length: int


def stringify(value: Any) -> str:
    """Convert a context value to the text that gets substituted."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(v) for v in value)
    return str(value)


def _resolve(name: str, context: Mapping[str, Any], scopes: list[_Frame]) -> Any:
    if name in LOOP_VARIABLES:
        if not scopes:
            return None
        frame = scopes[-1]
        if name == "this":
            return frame.item
        if name == "@last":
            return frame.index == frame.length - 1
        if name == "@first":
            return frame.index == 0
        return frame.index
    return context.get(name)


def _walk(
    nodes: tuple[Node, ...],
    context: Mapping[str, Any],
    scopes: list[_Frame],
    out: list[str],
) -> None:
    for node in nodes:
        if isinstance(node, Literal):
            out.append(node.text)
        elif isinstance(node, Variable):
            out.append(stringify(_resolve(node.name, context, scopes)))
        elif isinstance(node, EachBlock):
            items = _resolve(node.name, context, scopes)
            if not isinstance(items, (list, tuple)):
                continue
            for index, item in enumerate(items):
                scopes.append(_Frame(item, index, len(items)))
                try:
                    _walk(node.body, context, scopes, out)
                finally:
                    scopes.pop()
        elif isinstance(node, IfBlock):
            if _resolve(node.name, context, scopes):
                _walk(node.body, context, scopes, out)
        elif isinstance(node, UnlessBlock):
            if not _resolve(node.name, context, scopes):
                _walk(node.body, context, scopes, out)


def evaluate(nodes: tuple[Node, ...], context: Mapping[str, Any]) -> str:
    """Render parsed *nodes* against *context*."""
    out: list[str] = []
    _walk(nodes, context, [], out)
    return "".join(out)


def render(text: str, context: Mapping[str, Any]) -> str:
    """Parse and evaluate *text* in one step."""
    return evaluate(parse(text), context)


def scan_variables(text: str) -> frozenset[str]:
    """Return the distinct context names a body refers to.

    Loop variables are excluded.  Malformed tags are skipped rather than
    reported, so scanning never fails where rendering later would.
    """
    names: set[str] = set()
    for match in _TAG_PATTERN.finditer(text):
        inner = match.group(1)
        if inner.startswith("/"):
            continue
        if inner.startswith("#"):
            directive, _, inner = inner[1:].partition(" ")
            if directive not in BLOCK_KINDS:
                continue
            inner = inner.strip()
        if inner and _NAME_PATTERN.match(inner) and inner not in LOOP_VARIABLES:
            if not inner.startswith("@"):
                names.add(inner)
    return frozenset(names)
