"""
Rich-text node tree

Structured rich-text values are stored as ``{"root": <node>, ...}`` where
every node is a JSON object. This module parses them into a closed set of
node kinds and rebuilds them after transformation:

    TextNode     leaf with a ``text`` string
    ElementNode  container with ``children`` (root, paragraph, heading, link, list ...)
    BlockNode    embedded block with a ``fields`` object (banner, code, media block ...)
    OpaqueNode   anything else (linebreak, horizontalrule ...)

Every key that a kind does not model explicitly is kept in ``attrs`` and
written back untouched, so tags, formatting, urls and media references
survive a round trip exactly.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Union

# Block sub-fields whose string values are translated
TRANSLATABLE_BLOCK_FIELDS = ("content", "caption")

TranslateFn = Callable[[str], Awaitable[str]]


@dataclass(frozen=True)
class TextNode:
    text: str
    attrs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ElementNode:
    children: tuple[Node, ...]
    attrs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BlockNode:
    fields: dict[str, Any]
    children: tuple[Node, ...] | None = None
    attrs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class OpaqueNode:
    attrs: dict[str, Any] = field(default_factory=dict)


Node = Union[TextNode, ElementNode, BlockNode, OpaqueNode]


@dataclass(frozen=True)
class RichTextDocument:
    """A rich-text field value: the root node plus any sibling keys of ``root``."""

    root: Node
    extra: dict[str, Any] = field(default_factory=dict)


# ── Parsing / serialisation ──────────────────────────────────────────────────


def _rest(raw: dict[str, Any], *keys: str) -> dict[str, Any]:
    return {k: copy.deepcopy(v) for k, v in raw.items() if k not in keys}


def _parse_children(raw: Any) -> tuple[Node, ...]:
    return tuple(parse_node(child) for child in raw)


def parse_node(raw: dict[str, Any]) -> Node:
    if not isinstance(raw, dict):
        raise TypeError(f"rich-text node must be an object, got {type(raw).__name__}")

    if isinstance(raw.get("text"), str):
        return TextNode(text=raw["text"], attrs=_rest(raw, "text"))

    if isinstance(raw.get("fields"), dict):
        children = raw.get("children")
        if isinstance(children, list):
            return BlockNode(
                fields=copy.deepcopy(raw["fields"]),
                children=_parse_children(children),
                attrs=_rest(raw, "fields", "children"),
            )
        return BlockNode(fields=copy.deepcopy(raw["fields"]), attrs=_rest(raw, "fields"))

    if isinstance(raw.get("children"), list):
        return ElementNode(children=_parse_children(raw["children"]), attrs=_rest(raw, "children"))

    return OpaqueNode(attrs=_rest(raw))


def node_to_dict(node: Node) -> dict[str, Any]:
    out = copy.deepcopy(node.attrs)
    if isinstance(node, TextNode):
        out["text"] = node.text
    elif isinstance(node, ElementNode):
        out["children"] = [node_to_dict(child) for child in node.children]
    elif isinstance(node, BlockNode):
        out["fields"] = copy.deepcopy(node.fields)
        if node.children is not None:
            out["children"] = [node_to_dict(child) for child in node.children]
    return out


def is_rich_text(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("root"), dict)


def parse_rich_text(value: dict[str, Any]) -> RichTextDocument:
    return RichTextDocument(root=parse_node(value["root"]), extra=_rest(value, "root"))


def rich_text_to_dict(document: RichTextDocument) -> dict[str, Any]:
    out = copy.deepcopy(document.extra)
    out["root"] = node_to_dict(document.root)
    return out


# ── Transformation ───────────────────────────────────────────────────────────


async def _translate_if_present(value: Any, translate: TranslateFn) -> Any:
    if isinstance(value, str) and value:
        return await translate(value)
    return value


async def _translate_children(children: tuple[Node, ...], translate: TranslateFn) -> tuple[Node, ...]:
    # gather keeps result order equal to input order
    return tuple(await asyncio.gather(*(translate_tree(child, translate) for child in children)))


async def translate_tree(node: Node, translate: TranslateFn) -> Node:
    """Return a copy of ``node`` with every text leaf and block content/caption translated.

    Empty strings are left alone. Exceptions raised by ``translate`` propagate.
    """
    if isinstance(node, TextNode):
        return TextNode(text=await _translate_if_present(node.text, translate), attrs=node.attrs)

    if isinstance(node, ElementNode):
        return ElementNode(children=await _translate_children(node.children, translate), attrs=node.attrs)

    if isinstance(node, BlockNode):
        fields = dict(node.fields)
        for key in TRANSLATABLE_BLOCK_FIELDS:
            if key in fields:
                fields[key] = await _translate_if_present(fields[key], translate)
        children = None
        if node.children is not None:
            children = await _translate_children(node.children, translate)
        return BlockNode(fields=fields, children=children, attrs=node.attrs)

    return node


async def translate_rich_text(value: dict[str, Any], translate: TranslateFn) -> dict[str, Any]:
    """Translate a stored rich-text value and return it in stored form."""
    document = parse_rich_text(value)
    root = await translate_tree(document.root, translate)
    return rich_text_to_dict(RichTextDocument(root=root, extra=document.extra))


# ── Structural helpers ───────────────────────────────────────────────────────


def _children_of(node: Node) -> tuple[Node, ...]:
    if isinstance(node, ElementNode):
        return node.children
    if isinstance(node, BlockNode) and node.children is not None:
        return node.children
    return ()


def count_nodes(node: Node) -> int:
    return 1 + sum(count_nodes(child) for child in _children_of(node))


def tree_depth(node: Node) -> int:
    children = _children_of(node)
    if not children:
        return 1
    return 1 + max(tree_depth(child) for child in children)


def has_translatable_text(node: Node) -> bool:
    if isinstance(node, TextNode):
        return bool(node.text)
    if isinstance(node, BlockNode) and any(
        isinstance(node.fields.get(key), str) and node.fields.get(key) for key in TRANSLATABLE_BLOCK_FIELDS
    ):
        return True
    return any(has_translatable_text(child) for child in _children_of(node))
