from typing import Optional

import tree_sitter as ts
import tree_sitter_javascript as tsjs

from quickrefer.lang.typescript import TypeScriptLabelStrategy
from quickrefer.models import LanguageKind

JS_LANGUAGE = ts.Language(tsjs.language())
_parser: Optional[ts.Parser] = None


def _get_parser() -> ts.Parser:
    global _parser
    if _parser is None:
        _parser = ts.Parser(JS_LANGUAGE)
    return _parser


class JavaScriptLabelStrategy(TypeScriptLabelStrategy):
    """
    Same traversal as TypeScript; the JavaScript grammar also covers JSX.
    """

    language = LanguageKind.JAVASCRIPT
    extensions = [".js", ".jsx"]

    def _get_parser(self, extension: str) -> ts.Parser:
        return _get_parser()
