"""Parse Go source with tree-sitter and convert it to :mod:`covgate.syntax` nodes.

Columns are byte offsets, matching the positions written by ``go test
-coverprofile``. Node kinds follow the tree-sitter Go grammar; both the older
grammar (statements directly inside blocks and cases) and the newer one
(statements wrapped in ``statement_list``) are accepted.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator

from .errors import SourceParseError
from .logging_config import get_logger
from .syntax import (
    BlockStmt,
    CaseClause,
    CommClause,
    ForStmt,
    FuncDecl,
    IfStmt,
    LabeledStmt,
    Position,
    Range,
    RangeStmt,
    SelectStmt,
    SimpleStmt,
    SourceFile,
    Stmt,
    SwitchStmt,
    TypeSwitchStmt,
)

LOGGER = get_logger(__name__)

Node = Any

_FUNCTION_NODES = frozenset({"function_declaration", "method_declaration"})
_CASE_NODES = frozenset({"expression_case", "type_case", "default_case"})
_COMM_NODES = frozenset({"communication_case", "default_case"})
_SKIPPED_NODES = frozenset({"comment"})


@lru_cache(maxsize=None)
def _parser():
    try:
        import tree_sitter_languages
    except ImportError as exc:
        raise SourceParseError(
            "tree-sitter-languages is required to parse Go sources; "
            "install with: pip install 'covgate[go]'"
        ) from exc
    return tree_sitter_languages.get_parser("go")


def _position(point: tuple[int, int]) -> Position:
    row, column = point
    return Position(row + 1, column + 1)


def _range(node: Node) -> Range:
    return Range(_position(node.start_point), _position(node.end_point))


def _span(first: Node, last: Node) -> Range:
    return Range(_position(first.start_point), _position(last.end_point))


def _statement_nodes(nodes: list[Node]) -> Iterator[Node]:
    for node in nodes:
        if not node.is_named or node.type in _SKIPPED_NODES:
            continue
        if node.type == "statement_list":
            yield from _statement_nodes(node.children)
        else:
            yield node


def _after_token(node: Node, token: str) -> list[Node]:
    children = node.children
    for index, child in enumerate(children):
        if child.type == token:
            return children[index + 1:]
    return []


def _token(node: Node, token: str, *, last: bool = False) -> Node | None:
    matches = [child for child in node.children if child.type == token]
    if not matches:
        return None
    return matches[-1] if last else matches[0]


def _optional(node: Node | None) -> Stmt | None:
    return convert_statement(node) if node is not None else None


def _block(node: Node | None) -> BlockStmt | None:
    if node is None:
        return None
    body = tuple(convert_statement(child) for child in _statement_nodes(node.children))
    return BlockStmt(range=_range(node), body=body)


def _braced_body(node: Node, cases: list[Stmt]) -> BlockStmt | None:
    lbrace = _token(node, "{")
    rbrace = _token(node, "}", last=True)
    if lbrace is None or rbrace is None:
        return None
    return BlockStmt(range=_span(lbrace, rbrace), body=tuple(cases))


def _clause_body(node: Node) -> tuple[Stmt, ...]:
    return tuple(convert_statement(child) for child in _statement_nodes(_after_token(node, ":")))


def _if(node: Node) -> IfStmt:
    return IfStmt(
        range=_range(node),
        init=_optional(node.child_by_field_name("initializer")),
        body=_block(node.child_by_field_name("consequence")),
        else_=_optional(node.child_by_field_name("alternative")),
    )


def _for(node: Node) -> Stmt:
    body = _block(node.child_by_field_name("body"))
    for child in node.named_children:
        if child.type == "range_clause":
            return RangeStmt(range=_range(node), body=body)
        if child.type == "for_clause":
            return ForStmt(
                range=_range(node),
                body=body,
                init=_optional(child.child_by_field_name("initializer")),
                post=_optional(child.child_by_field_name("update")),
            )
    return ForStmt(range=_range(node), body=body)


def _switch(node: Node) -> SwitchStmt:
    cases: list[Stmt] = [
        CaseClause(range=_range(child), body=_clause_body(child))
        for child in node.named_children
        if child.type in _CASE_NODES
    ]
    return SwitchStmt(
        range=_range(node),
        init=_optional(node.child_by_field_name("initializer")),
        body=_braced_body(node, cases),
    )


def _type_switch_guard(node: Node) -> Stmt | None:
    value = node.child_by_field_name("value")
    if value is None:
        return None
    alias = node.child_by_field_name("alias")
    closing = None
    for child in node.children:
        if child.start_byte >= value.end_byte and child.type == ")":
            closing = child
            break
    first = alias if alias is not None else value
    last = closing if closing is not None else value
    kind = "short_var_declaration" if alias is not None else "expression_statement"
    return SimpleStmt(range=_span(first, last), kind=kind)


def _type_switch(node: Node) -> TypeSwitchStmt:
    cases: list[Stmt] = [
        CaseClause(range=_range(child), body=_clause_body(child))
        for child in node.named_children
        if child.type in _CASE_NODES
    ]
    return TypeSwitchStmt(
        range=_range(node),
        init=_optional(node.child_by_field_name("initializer")),
        assign=_type_switch_guard(node),
        body=_braced_body(node, cases),
    )


def _select(node: Node) -> SelectStmt:
    cases: list[Stmt] = [
        CommClause(range=_range(child), body=_clause_body(child))
        for child in node.named_children
        if child.type in _COMM_NODES
    ]
    return SelectStmt(range=_range(node), body=_braced_body(node, cases))


def _labeled(node: Node) -> LabeledStmt:
    wrapped = next(_statement_nodes(_after_token(node, ":")), None)
    return LabeledStmt(range=_range(node), stmt=_optional(wrapped))


_CONVERTERS = {
    "block": _block,
    "if_statement": _if,
    "for_statement": _for,
    "expression_switch_statement": _switch,
    "type_switch_statement": _type_switch,
    "select_statement": _select,
    "labeled_statement": _labeled,
}


def convert_statement(node: Node) -> Stmt:
    """Convert one tree-sitter statement node."""

    converter = _CONVERTERS.get(node.type)
    if converter is None:
        return SimpleStmt(range=_range(node), kind=node.type)
    return converter(node)


def _function(node: Node) -> FuncDecl:
    name_node = node.child_by_field_name("name")
    name = name_node.text.decode("utf-8") if name_node is not None else ""
    return FuncDecl(
        name=name,
        range=_range(node),
        body=_block(node.child_by_field_name("body")),
        start_offset=node.start_byte,
        end_offset=node.end_byte,
    )


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def parse_source(src: bytes, path: str) -> SourceFile:
    """Parse Go ``src`` and return its function declarations."""

    tree = _parser().parse(src)
    root = tree.root_node
    if root.has_error:
        error = _first_error(root)
        location = _position(error.start_point) if error is not None else None
        raise SourceParseError(
            f"could not parse file {path}",
            context={"path": path, "position": str(location) if location else None},
        )
    functions = tuple(_function(child) for child in root.named_children if child.type in _FUNCTION_NODES)
    LOGGER.debug("parsed source file", extra={"path": path, "functions": len(functions)})
    return SourceFile(path=path, functions=functions)


def parse_file(path: Path | str) -> SourceFile:
    file_path = Path(path)
    try:
        src = file_path.read_bytes()
    except OSError as exc:
        raise SourceParseError(f"could not read file {file_path}", context={"path": str(file_path)}) from exc
    return parse_source(src, str(file_path))


__all__ = ["convert_statement", "parse_file", "parse_source"]
