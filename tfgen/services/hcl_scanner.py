"""
Lightweight scanner for Terraform HCL text.

Finds top-level declaration blocks and reads attributes back out of them.
This is a signature scanner, not a parser: it understands block nesting and
quoted strings, and nothing else.
"""
from typing import Dict, List, Optional
from dataclasses import dataclass
import re


BLOCK_HEADER = re.compile(
    r'^(?P<keyword>resource|data|provider)\s+"(?P<type>[^"]+)"(?:\s+"(?P<name>[^"]+)")?\s*\{',
    re.MULTILINE,
)


@dataclass(frozen=True)
class Block:
    """A top-level `keyword "type" "name" { ... }` declaration."""
    keyword: str
    type: str
    name: str
    body: str

    @property
    def address(self) -> str:
        if self.keyword == "data":
            return f"data.{self.type}.{self.name}"
        if self.keyword == "provider":
            return f"provider.{self.type}"
        return f"{self.type}.{self.name}"


def _matching_brace(text: str, open_index: int) -> int:
    """
    Return the index of the brace closing the one at `open_index`.

    Braces inside double-quoted strings are ignored. Returns len(text) when
    the block is never closed so truncated input still yields a body.
    """
    depth = 0
    in_string = False
    index = open_index
    while index < len(text):
        char = text[index]
        if in_string:
            if char == "\\":
                index += 2
                continue
            if char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return len(text)


def _depth_at(text: str, position: int) -> int:
    """Brace depth at `position`, ignoring braces inside strings."""
    depth = 0
    in_string = False
    index = 0
    while index < position:
        char = text[index]
        if in_string:
            if char == "\\":
                index += 2
                continue
            if char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        index += 1
    return depth


def iter_blocks(code: str) -> List[Block]:
    """Return every top-level resource, data and provider block in order."""
    blocks = []
    for match in BLOCK_HEADER.finditer(code):
        open_index = match.end() - 1
        close_index = _matching_brace(code, open_index)
        blocks.append(Block(
            keyword=match.group("keyword"),
            type=match.group("type"),
            name=match.group("name") or "",
            body=code[open_index + 1:close_index],
        ))
    return blocks


def resources_by_type(code: str) -> Dict[str, List[Block]]:
    """Group top-level resource blocks by their resource type."""
    grouped: Dict[str, List[Block]] = {}
    for block in iter_blocks(code):
        if block.keyword == "resource":
            grouped.setdefault(block.type, []).append(block)
    return grouped


def _top_level_only(body: str) -> str:
    """Drop the contents of nested blocks, keeping depth-0 text."""
    kept = []
    depth = 0
    in_string = False
    index = 0
    while index < len(body):
        char = body[index]
        if in_string:
            if depth == 0:
                kept.append(char)
            if char == "\\" and index + 1 < len(body):
                if depth == 0:
                    kept.append(body[index + 1])
                index += 2
                continue
            if char == '"':
                in_string = False
        elif char == '"':
            in_string = True
            if depth == 0:
                kept.append(char)
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif depth == 0:
            kept.append(char)
        index += 1
    return "".join(kept)


def attribute(body: str, name: str) -> Optional[str]:
    """
    Read a top-level attribute value from a block body.

    Quoted values are returned without quotes, anything else verbatim.
    Trailing `#` comments are dropped.
    """
    pattern = re.compile(
        rf'^[ \t]*{re.escape(name)}[ \t]*=[ \t]*(?P<value>"[^"\n]*"|[^\n#]*)',
        re.MULTILINE,
    )
    match = pattern.search(_top_level_only(body))
    if not match:
        return None
    value = match.group("value").strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def nested_blocks(body: str, name: str) -> List[str]:
    """Return the bodies of `name { ... }` blocks directly inside `body`."""
    bodies = []
    pattern = re.compile(rf'^[ \t]*{re.escape(name)}[ \t]*\{{', re.MULTILINE)
    for match in pattern.finditer(body):
        open_index = match.end() - 1
        if _depth_at(body, open_index) != 0:
            continue
        close_index = _matching_brace(body, open_index)
        bodies.append(body[open_index + 1:close_index])
    return bodies


def references(text: str, resource_type: str) -> List[str]:
    """Names of `resource_type.<name>` references in `text`, first-seen order."""
    names: List[str] = []
    for name in re.findall(rf'\b{re.escape(resource_type)}\.([A-Za-z0-9_-]+)', text):
        if name not in names:
            names.append(name)
    return names


def provider_region(code: str, provider: str = "aws") -> Optional[str]:
    """Region literal bound in the `provider "<provider>"` block, if any."""
    for block in iter_blocks(code):
        if block.keyword == "provider" and block.type == provider:
            return attribute(block.body, "region")
    return None
