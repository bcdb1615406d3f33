"""
UI service - page functions, routing and shared widgets.
"""

from .context import PageContext, build_page_context, get_page_context
from .router import RecordingNavigator, Router, StreamlitNavigator

__all__ = [
    'PageContext',
    'build_page_context',
    'get_page_context',
    'RecordingNavigator',
    'Router',
    'StreamlitNavigator',
]
