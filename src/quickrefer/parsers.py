from typing import Optional, List, Dict, Type
from abc import ABC, abstractmethod
import inspect

from quickrefer.models import LanguageKind, ReferenceEntry, SelectionRange
from quickrefer.settings import ReferSettings


class AbstractLabelStrategy(ABC):
    """
    Derives reference entries for a selection inside a buffer of one
    language family. Concrete subclasses register themselves by extension.
    """

    language: LanguageKind
    extensions: List[str]

    def __init_subclass__(cls, **kw):
        super().__init_subclass__(**kw)
        if not inspect.isabstract(cls):
            if not hasattr(cls, "extensions") or not cls.extensions:
                raise ValueError(f"{cls.__name__} missing `extensions`")
            LabelStrategyRegistry.register_strategy(cls)

    def __init__(self, settings: Optional[ReferSettings] = None) -> None:
        self.settings = settings or ReferSettings()

    @abstractmethod
    def resolve(
        self,
        relative_path: str,
        text: str,
        selection: SelectionRange,
        extension: str,
    ) -> List[ReferenceEntry]:
        """
        Return the entries for *selection*. An empty list means the strategy
        found nothing; the caller decides on the fallback entry.
        """
        ...

    def _entry(
        self, relative_path: str, line_text: str, label: Optional[str]
    ) -> ReferenceEntry:
        return ReferenceEntry(
            relative_path=relative_path, line_text=line_text, label=label
        )


class LabelStrategyRegistry:
    """
    Singleton registry mapping file extensions to label strategies.
    """

    _instance = None
    _strategies: Dict[str, Type[AbstractLabelStrategy]] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(LabelStrategyRegistry, cls).__new__(cls)
        return cls._instance

    @classmethod
    def register_strategy(cls, strategy: Type[AbstractLabelStrategy]) -> None:
        for ext in strategy.extensions:
            cls._strategies[ext.lower()] = strategy

    @classmethod
    def get_strategy_class(
        cls, extension: str, settings: Optional[ReferSettings] = None
    ) -> Optional[Type[AbstractLabelStrategy]]:
        ext = extension.lower()
        strategy = cls._strategies.get(ext)
        if strategy is not None or settings is None:
            return strategy

        language = settings.extra_extensions.get(ext)
        if language is None:
            return None
        return next(
            (s for s in cls._strategies.values() if s.language == language),
            None,
        )

    @classmethod
    def get_strategies(cls) -> Dict[str, Type[AbstractLabelStrategy]]:
        return dict(cls._strategies)


# Helpers
def add_unique_entry(entries: List[ReferenceEntry], entry: ReferenceEntry) -> None:
    """
    Append *entry* unless an entry with the same path, line and label exists.
    """
    key = (entry.relative_path, entry.line_text, entry.label or "")
    for existing in entries:
        if (existing.relative_path, existing.line_text, existing.label or "") == key:
            return
    entries.append(entry)


def get_node_text(node) -> str:
    """
    Get text of the tree sitter node
    """
    if not node or not node.text:
        return ""

    return node.text.decode("utf-8")
