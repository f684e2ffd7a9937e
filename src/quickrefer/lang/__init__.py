# Importing the language modules registers their label strategies.
from quickrefer.lang.python import PythonLabelStrategy
from quickrefer.lang.typescript import TypeScriptLabelStrategy
from quickrefer.lang.javascript import JavaScriptLabelStrategy
from quickrefer.lang.html import HtmlLabelStrategy

__all__ = [
    "PythonLabelStrategy",
    "TypeScriptLabelStrategy",
    "JavaScriptLabelStrategy",
    "HtmlLabelStrategy",
]
