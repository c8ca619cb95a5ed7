"""
Input source implementations.
"""
from games.common.input.sources.base import InputSource
from games.common.input.sources.pointer import PointerInputSource

__all__ = ['InputSource', 'PointerInputSource']
