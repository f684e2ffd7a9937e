from dataclasses import dataclass, field
from typing import Optional, List, Dict, Callable

import tree_sitter as ts
import tree_sitter_typescript as tsts

from quickrefer.parsers import (
    AbstractLabelStrategy,
    add_unique_entry,
    get_node_text,
)
from quickrefer.models import (
    LanguageKind,
    ReferenceEntry,
    SelectionRange,
    format_line_text,
)
from quickrefer.helpers import byte_offset
from quickrefer.logger import logger

TS_LANGUAGE = ts.Language(tsts.language_typescript())
TSX_LANGUAGE = ts.Language(tsts.language_tsx())
_parsers: Dict[str, ts.Parser] = {}


def _get_parser(variant: str) -> ts.Parser:
    if variant not in _parsers:
        language = TSX_LANGUAGE if variant == "tsx" else TS_LANGUAGE
        _parsers[variant] = ts.Parser(language)
    return _parsers[variant]


@dataclass
class _TraversalState:
    """Per-call walk state, threaded through the tree walk."""

    relative_path: str
    selection_start: int  # byte offsets
    selection_end: int
    focus: int
    entries: List[ReferenceEntry] = field(default_factory=list)
    enclosing: Optional[ts.Node] = None
    enclosing_width: Optional[int] = None


class TypeScriptLabelStrategy(AbstractLabelStrategy):
    language = LanguageKind.TYPESCRIPT
    extensions = [".ts", ".tsx"]

    _FUNCTION_VALUES = {
        "arrow_function",
        "function_expression",
        "function",
        "generator_function",
    }
    _CLASS_NODES = {
        "class_declaration",
        "abstract_class_declaration",
        "class",
    }

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._classifiers: Dict[str, Callable[[ts.Node], Optional[str]]] = {
            "function_declaration": self._classify_function,
            "generator_function_declaration": self._classify_function,
            "function_signature": self._classify_function,
            "variable_declarator": self._classify_variable,
            "method_definition": self._classify_method,
            "abstract_method_signature": self._classify_method,
            "method_signature": self._classify_method,
            "public_field_definition": self._classify_method,
            "field_definition": self._classify_method,
            "pair": self._classify_pair,
        }

    def _get_parser(self, extension: str) -> ts.Parser:
        return _get_parser("tsx" if extension.lower() == ".tsx" else "typescript")

    def resolve(
        self,
        relative_path: str,
        text: str,
        selection: SelectionRange,
        extension: str,
    ) -> List[ReferenceEntry]:
        source = text.encode("utf-8")
        try:
            tree = self._get_parser(extension).parse(source)
        except Exception as ex:
            logger.warning(
                "tree-sitter failed to parse source",
                path=relative_path,
                extension=extension,
                error=str(ex),
            )
            return []

        state = _TraversalState(
            relative_path=relative_path,
            selection_start=byte_offset(text, selection.start),
            selection_end=byte_offset(text, selection.end),
            focus=byte_offset(text, selection.focus),
        )
        self._walk(tree.root_node, state)

        if state.entries:
            return state.entries

        if state.enclosing is None:
            return []

        label = self._find_enclosing_label(state.enclosing)
        logger.debug(
            "No declaration intersects selection; using enclosing node",
            path=relative_path,
            node_type=state.enclosing.type,
            label=label,
        )
        return [self._entry(relative_path, selection.line_text, label)]

    # --- traversal --------------------------------------------------
    def _walk(self, root: ts.Node, state: _TraversalState) -> None:
        """
        Pre-order walk over named nodes. Uses an explicit stack: long operator
        or call chains nest deeper than the interpreter recursion limit.
        """
        stack = [root]
        while stack:
            node = stack.pop()
            self._visit(node, state)
            stack.extend(reversed(node.named_children))

    def _visit(self, node: ts.Node, state: _TraversalState) -> None:
        start, end = node.start_byte, node.end_byte

        if start <= state.focus <= end:
            width = end - start
            if state.enclosing_width is None or width < state.enclosing_width:
                state.enclosing = node
                state.enclosing_width = width

        if start <= state.selection_end and state.selection_start <= end:
            label = self._classify(node)
            if label:
                line = node.start_point[0]
                add_unique_entry(
                    state.entries,
                    self._entry(
                        state.relative_path, format_line_text(line, line), label
                    ),
                )

    def _find_enclosing_label(self, node: ts.Node) -> Optional[str]:
        current: Optional[ts.Node] = node
        while current is not None:
            if current.type == "member_expression":
                return get_node_text(current)
            label = self._classify(current)
            if label:
                return label
            current = current.parent
        return None

    # --- classification ---------------------------------------------
    def _classify(self, node: ts.Node) -> Optional[str]:
        classifier = self._classifiers.get(node.type)
        if classifier is None:
            return None
        return classifier(node)

    def _classify_function(self, node: ts.Node) -> Optional[str]:
        return get_node_text(node.child_by_field_name("name")) or None

    def _classify_variable(self, node: ts.Node) -> Optional[str]:
        name_node = node.child_by_field_name("name")
        value_node = node.child_by_field_name("value")
        if name_node is None or value_node is None:
            return None
        if name_node.type != "identifier":
            return None
        if value_node.type not in self._FUNCTION_VALUES:
            return None
        return get_node_text(name_node) or None

    def _classify_method(self, node: ts.Node) -> Optional[str]:
        """
        Class methods and fields, plus methods written inside object literals.
        """
        name_node = node.child_by_field_name("name") or node.child_by_field_name(
            "property"
        )
        member = self._property_name_text(name_node)
        if not member:
            return None

        parent = node.parent
        if parent is not None and parent.type == "class_body":
            cls = parent.parent
            cls_name = None
            if cls is not None and cls.type in self._CLASS_NODES:
                cls_name = get_node_text(cls.child_by_field_name("name")) or None
            return f"{cls_name}.{member}" if cls_name else member

        # Interface and type literal members are not declarations
        if node.type == "method_signature":
            return None

        if parent is not None and parent.type == "object":
            owner = self._object_owner_name(parent)
            return f"{owner}.{member}" if owner else member

        return member

    def _classify_pair(self, node: ts.Node) -> Optional[str]:
        prop = self._property_name_text(node.child_by_field_name("key"))
        if not prop:
            return None

        parent = node.parent
        if parent is None or parent.type != "object":
            return prop

        owner = self._object_owner_name(parent)
        return f"{owner}.{prop}" if owner else prop

    # --- helpers ----------------------------------------------------
    def _property_name_text(self, node: Optional[ts.Node]) -> Optional[str]:
        if node is None:
            return None
        if node.type in (
            "identifier",
            "property_identifier",
            "private_property_identifier",
            "type_identifier",
            "number",
        ):
            return get_node_text(node) or None
        if node.type == "string":
            raw = get_node_text(node)
            return raw[1:-1] if len(raw) >= 2 else None
        if node.type == "computed_property_name":
            inner = node.named_children[0] if node.named_children else None
            return get_node_text(inner) or None
        return None

    def _object_owner_name(self, obj: ts.Node) -> Optional[str]:
        """
        Name the object literal is bound to: `const owner = {...}` or
        `owner = {...}` / `a.b.owner = {...}`.
        """
        parent = obj.parent
        if parent is None:
            return None

        if parent.type == "variable_declarator":
            name_node = parent.child_by_field_name("name")
            if (
                parent.child_by_field_name("value") == obj
                and name_node is not None
                and name_node.type == "identifier"
            ):
                return get_node_text(name_node) or None
            return None

        if parent.type == "assignment_expression":
            left = parent.child_by_field_name("left")
            if parent.child_by_field_name("right") != obj or left is None:
                return None
            if left.type in ("identifier", "member_expression"):
                return get_node_text(left) or None

        return None
