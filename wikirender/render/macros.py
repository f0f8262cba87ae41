#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Macro placeholders
==================
A render for the cache leaves every macro as an HTML comment holding its
escaped body.  The presentation pass finds those comments and swaps in the
evaluated output in a single left-to-right pass, so text produced by a
macro is never scanned for further placeholders.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import re
from typing import Callable

# -----------------------------------------------------------------------------

_PLACEHOLDER_RE = re.compile(r"<!--wr-macro:(.*?)-->", re.DOTALL)


def macro_placeholder(body: str) -> str:
    # escaping turns any "-->" in the body into "--&gt;"
    return f"<!--wr-macro:{html.escape(body)}-->"


def substitute_macros(rendered: str, evaluate: Callable[[str], str]) -> str:
    return _PLACEHOLDER_RE.sub(lambda m: evaluate(html.unescape(m.group(1))), rendered)


# -----------------------------------------------------------------------------
