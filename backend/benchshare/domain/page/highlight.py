"""Syntax highlighting adapter around Pygments."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from benchshare.errors import HighlightError


class Highlighter(ABC):

    @abstractmethod
    def highlight(self, language: str, source: str) -> str:
        """Return *source* as highlighted markup for *language*."""
        ...


class PygmentsHighlighter(Highlighter):
    """
    Emits bare token spans (no wrapping <div>/<pre>) so fragments can be
    spliced into each other. Output keeps exactly the newlines of the source.
    """

    def __init__(self) -> None:
        self._formatter = HtmlFormatter(nowrap=True)
        self._lexers: Dict[str, Lexer] = {}

    def _get_lexer(self, language: str) -> Lexer:
        if language not in self._lexers:
            try:
                self._lexers[language] = get_lexer_by_name(
                    language, stripnl=False, ensurenl=False
                )
            except ClassNotFound as e:
                raise HighlightError(language) from e
        return self._lexers[language]

    def highlight(self, language: str, source: str) -> str:
        out = highlight(source, self._get_lexer(language), self._formatter)
        # the formatter always closes the last line
        if out.endswith("\n") and not source.endswith("\n"):
            out = out[:-1]
        return out
