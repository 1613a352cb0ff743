"""
Visualization Module
====================
Read-only views of a running simulation.
"""

from .engine_interface import (
    RenderState,
    ConeSprite,
    RendererInterface,
    HeadlessRenderer,
    create_renderer,
    cone_color
)

__all__ = [
    'RenderState',
    'ConeSprite',
    'RendererInterface',
    'HeadlessRenderer',
    'create_renderer',
    'cone_color'
]
