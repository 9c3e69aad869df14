"""Renderers turning a Node tree into text or HTML."""

from __future__ import annotations

from value_inspector.render.assets import ASSETS, AssetState
from value_inspector.render.html import HtmlRenderer
from value_inspector.render.protocols import Renderer
from value_inspector.render.text import TextRenderer

__all__ = ["ASSETS", "AssetState", "HtmlRenderer", "Renderer", "TextRenderer"]
