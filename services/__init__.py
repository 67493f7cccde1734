"""
Services package for Showmatch.
Contains the default value renderer.
"""
from services.render import render_value, Renderer, RENDER_MODES

__all__ = [
    "render_value",
    "Renderer",
    "RENDER_MODES"
]
