"""
Preparation code assembly.

The preparation markup of a test page is HTML that may embed <script> blocks.
Highlighting it in one go lets the markup lexer decide how the scripts are
tokenized, so each script body is highlighted on its own as JavaScript, the
body is swapped for a placeholder, the remaining markup is highlighted as HTML
and the highlighted bodies are spliced back in where their placeholders ended up.
"""
from __future__ import annotations
import re
from collections import deque
from typing import Deque

from benchshare.domain.page.highlight import Highlighter
from benchshare.domain.page.models import PrepResult
from benchshare.errors import PrepAssemblyError

SCRIPT_RE = re.compile(r"(<script[^>]*?>)([\s\S]*?)(</script>)", re.IGNORECASE)

MARKUP_LANGUAGE = "html"
SCRIPT_LANGUAGE = "javascript"

# Private use area; the first code point not already present in the markup is used.
_PLACEHOLDER_CANDIDATES = range(0xE000, 0xF900)

# Some highlighters pad fragment output with a trailing no-break space.
_NBSP_ARTIFACT = "&nbsp;"


def _pick_placeholder(markup: str) -> str:
    for code_point in _PLACEHOLDER_CANDIDATES:
        candidate = chr(code_point)
        if candidate not in markup:
            return candidate
    raise ValueError("markup already uses every private-use code point")


def _placeholder_pattern(placeholder: str) -> re.Pattern[str]:
    # The markup highlighter may wrap the placeholder in a single token span.
    token = re.escape(placeholder)
    return re.compile(rf'<span class="[^"<>]*">{token}</span>|{token}')


def assemble_prep(init_html: str, setup: str, teardown: str, highlighter: Highlighter) -> PrepResult:
    has_setup_or_teardown = bool(setup) or bool(teardown)
    has_prep = bool(init_html) or has_setup_or_teardown

    if not has_prep:
        return PrepResult(has_prep=False, has_setup_or_teardown=False)

    stripped = SCRIPT_RE.sub("", init_html)
    placeholder = _pick_placeholder(init_html)
    fragments: Deque[str] = deque()

    def _swap_out(match: re.Match[str]) -> str:
        opening, body, closing = match.groups()
        highlighted_body = highlighter.highlight(SCRIPT_LANGUAGE, body)
        if highlighted_body.endswith(_NBSP_ARTIFACT):
            highlighted_body = highlighted_body[: -len(_NBSP_ARTIFACT)]
        # newest at the front, so popping from the back yields document order
        fragments.appendleft(highlighted_body)
        return opening + placeholder + closing

    working = SCRIPT_RE.sub(_swap_out, init_html)
    working_highlighted = highlighter.highlight(MARKUP_LANGUAGE, working)

    pattern = _placeholder_pattern(placeholder)
    occurrences = len(pattern.findall(working_highlighted))
    if occurrences != len(fragments):
        raise PrepAssemblyError(placeholders=occurrences, fragments=len(fragments))

    highlighted = pattern.sub(lambda _m: fragments.pop(), working_highlighted)

    return PrepResult(
        has_prep=True,
        has_setup_or_teardown=has_setup_or_teardown,
        stripped_markup=stripped,
        highlighted_markup=highlighted,
    )
