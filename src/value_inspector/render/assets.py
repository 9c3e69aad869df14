"""Inline style and script for HTML dumps, and the once-per-process flag.

The first HTML dump of a process carries the ``<style>`` and ``<script>``
blocks; later dumps rely on them already being on the page.  ``AssetState``
makes that flag explicit: ``claim()`` returns True exactly once until
``reset()`` is called, and both are safe to call from several threads.
"""

from __future__ import annotations

import threading

__all__ = ["ASSETS", "ASSET_MARKUP", "AssetState"]

_STYLE = (
    ".ref{font:12px/1.4 monospace;color:#333}"
    ".ref dl{margin:0 0 0 1.5em;padding:0}"
    ".ref dt,.ref dd{display:inline;margin:0}"
    ".ref h4{margin:.4em 0 0 1em;font-size:11px;color:#888}"
    ".ref .rHasTip{position:relative;border-bottom:1px dotted #999}"
    ".ref .rHasTip code{display:none;position:absolute;left:0;top:1.4em;z-index:9;"
    "white-space:pre-wrap;background:#ffd;border:1px solid #cc9;padding:2px 4px}"
    ".ref .rHasTip:hover>code{display:block}"
    ".ref .rToggle{cursor:pointer;padding:0 .3em}"
    ".ref .rToggle.exp:after{content:'-'}"
    ".ref .rToggle.col:after{content:'+'}"
    ".ref .rToggle.col+div{display:none}"
    ".ref .rString{color:#080}.ref .rInt,.ref .rFloat{color:#00c}"
    ".ref .rBool,.ref .rNull{color:#c60}.ref .rRecursion{color:#c00}"
)

_SCRIPT = (
    "document.addEventListener('click',function(e){"
    "var t=e.target;if(!t.classList||!t.classList.contains('rToggle'))return;"
    "t.classList.toggle('exp');t.classList.toggle('col');});"
)

ASSET_MARKUP = f"<style scoped>{_STYLE}</style><script>{_SCRIPT}</script>"


class AssetState:
    """Tracks whether the HTML assets have been emitted."""

    def __init__(self) -> None:
        self._emitted = False
        self._lock = threading.Lock()

    @property
    def emitted(self) -> bool:
        return self._emitted

    def claim(self) -> bool:
        """Return True if the caller should emit the assets now."""
        with self._lock:
            if self._emitted:
                return False
            self._emitted = True
            return True

    def reset(self) -> None:
        """Forget that the assets were emitted, e.g. for a new page."""
        with self._lock:
            self._emitted = False


# Process-wide state shared by every HtmlRenderer that is not given its own
ASSETS = AssetState()
