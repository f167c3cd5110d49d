"""Restricted evaluation of JavaScript literal expressions.

Only data is accepted: object and array literals, strings, template strings
without substitutions, numbers, booleans, ``null`` and ``undefined``. Any
identifier reference, call, spread or computed key is rejected, so a
literal can never run code.
"""

import re
from typing import Any, Dict, List, Optional

from .parsers import JavaScriptParser, get_javascript_parser


class LiteralEvaluationError(ValueError):
    """Raised when text is not a pure data literal."""
    
    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number


class _Undefined:
    def __repr__(self) -> str:
        return "undefined"


UNDEFINED = _Undefined()

_SIMPLE_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v",
    "0": "\0", "'": "'", '"': '"', "`": "`", "\\": "\\", "\n": "",
}
_ESCAPE_PATTERN = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])"
)


def decode_string(raw: str) -> str:
    """Decode the escape sequences of a JavaScript string body."""
    
    def replace(match: "re.Match") -> str:
        escape = match.group(1)
        if escape.startswith("u{"):
            return chr(int(escape[2:-1], 16))
        if escape[0] in "ux" and len(escape) > 1:
            return chr(int(escape[1:], 16))
        if escape in ("\r\n", "\r", "\u2028", "\u2029"):
            return ""
        return _SIMPLE_ESCAPES.get(escape, escape)
    
    return _ESCAPE_PATTERN.sub(replace, raw)


def parse_number(raw: str) -> Any:
    """Convert a JavaScript numeric literal to int or float."""
    text = raw.replace("_", "")
    lowered = text.lower()
    if lowered.endswith("n"):
        raise LiteralEvaluationError(f"BigInt literal {raw} is not JSON serializable")
    if lowered.startswith("0x"):
        return int(text[2:], 16)
    if lowered.startswith("0o"):
        return int(text[2:], 8)
    if lowered.startswith("0b"):
        return int(text[2:], 2)
    if "." in lowered or "e" in lowered:
        value = float(text)
        return int(value) if value.is_integer() else value
    return int(text, 10)


class LiteralEvaluator:
    """Evaluates a JavaScript literal into plain Python data."""
    
    def __init__(self, parser: Optional[JavaScriptParser] = None):
        self.parser = parser or get_javascript_parser()
    
    def evaluate(self, text: str) -> Any:
        """Evaluate ``text`` as a single literal expression."""
        tree = self.parser.parse_raw(f"({text}\n)")
        root = tree.root_node
        if root.has_error:
            raise LiteralEvaluationError("Literal is not valid JavaScript")
        
        statements = [n for n in root.named_children if n.type != "comment"]
        if len(statements) != 1 or statements[0].type != "expression_statement":
            raise LiteralEvaluationError("Expected exactly one literal expression")
        
        value = self._evaluate(statements[0].named_children[0])
        return None if value is UNDEFINED else value
    
    def _evaluate(self, node: Any) -> Any:
        handler = getattr(self, f"_eval_{node.type}", None)
        if handler is None:
            raise LiteralEvaluationError(
                f"Unsupported expression '{node.type}' in literal",
                line_number=node.start_point[0] + 1
            )
        return handler(node)
    
    def _eval_parenthesized_expression(self, node: Any) -> Any:
        children = [c for c in node.named_children if c.type != "comment"]
        if len(children) != 1:
            raise LiteralEvaluationError("Sequence expressions are not literals")
        return self._evaluate(children[0])
    
    def _eval_object(self, node: Any) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for child in node.named_children:
            if child.type == "comment":
                continue
            if child.type != "pair":
                raise LiteralEvaluationError(
                    f"Unsupported object member '{child.type}'",
                    line_number=child.start_point[0] + 1
                )
            key = self._key(child.child_by_field_name("key"))
            value = self._evaluate(child.child_by_field_name("value"))
            if value is UNDEFINED:
                result.pop(key, None)
            else:
                result[key] = value
        return result
    
    def _key(self, node: Any) -> str:
        if node.type == "property_identifier":
            return node.text.decode("utf-8")
        if node.type == "string":
            return self._eval_string(node)
        if node.type == "number":
            return str(self._eval_number(node))
        raise LiteralEvaluationError(
            f"Unsupported property key '{node.type}'",
            line_number=node.start_point[0] + 1
        )
    
    def _eval_array(self, node: Any) -> List[Any]:
        # Holes such as [1,,2] serialize as null, like undefined elements.
        items = []
        expecting_value = True
        for child in node.children:
            if child.type in ("[", "]", "comment"):
                continue
            if child.type == ",":
                if expecting_value:
                    items.append(None)
                expecting_value = True
                continue
            value = self._evaluate(child)
            items.append(None if value is UNDEFINED else value)
            expecting_value = False
        return items
    
    def _eval_string(self, node: Any) -> str:
        return decode_string(node.text.decode("utf-8")[1:-1])
    
    def _eval_template_string(self, node: Any) -> str:
        if any(c.type == "template_substitution" for c in node.named_children):
            raise LiteralEvaluationError(
                "Template substitutions are not allowed in literals",
                line_number=node.start_point[0] + 1
            )
        return decode_string(node.text.decode("utf-8")[1:-1])
    
    def _eval_number(self, node: Any) -> Any:
        return parse_number(node.text.decode("utf-8"))
    
    def _eval_unary_expression(self, node: Any) -> Any:
        operator = node.child_by_field_name("operator").type
        argument = node.child_by_field_name("argument")
        if operator not in ("-", "+") or argument.type != "number":
            raise LiteralEvaluationError(
                f"Unsupported unary expression '{node.text.decode('utf-8')}'",
                line_number=node.start_point[0] + 1
            )
        value = self._eval_number(argument)
        return -value if operator == "-" else value
    
    def _eval_true(self, node: Any) -> bool:
        return True
    
    def _eval_false(self, node: Any) -> bool:
        return False
    
    def _eval_null(self, node: Any) -> None:
        return None
    
    def _eval_undefined(self, node: Any) -> _Undefined:
        return UNDEFINED
    
    def _eval_identifier(self, node: Any) -> _Undefined:
        # Older grammars parse `undefined` as a plain identifier.
        if node.text == b"undefined":
            return UNDEFINED
        raise LiteralEvaluationError(
            f"Identifier reference '{node.text.decode('utf-8')}' is not a literal",
            line_number=node.start_point[0] + 1
        )


def evaluate_literal(text: str) -> Any:
    """Evaluate a JavaScript data literal with the shared parser."""
    return LiteralEvaluator().evaluate(text)
