"""
Query-parameter routing.

The browser URL carries the logical route as `?path=/user/xhs-notes/<id>`
plus any extra parameters (`token=...`). Navigation rewrites the query
string and reruns the script.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import streamlit as st

from utils.logging_config import get_logger

logger = get_logger(__name__)

PATH_PARAM = "path"


class StreamlitNavigator:
    """Navigation inside a running Streamlit app"""

    # Keys that survive a full-page redirect (the token cache)
    PRESERVED_KEYS = ("session_store",)

    def current_path(self) -> str:
        return st.query_params.get(PATH_PARAM, "/") or "/"

    def current_params(self) -> Dict[str, str]:
        return {key: st.query_params[key] for key in st.query_params if key != PATH_PARAM}

    def push(self, route: str, **params: Any):
        """Client-side navigation: in-memory state is kept"""
        logger.debug(f"Navigating to {route}")
        st.query_params.clear()
        st.query_params[PATH_PARAM] = route
        for key, value in params.items():
            if value is not None:
                st.query_params[key] = str(value)
        st.rerun()

    def redirect(self, route: str):
        """Full-page navigation: every in-memory value except the token cache is dropped"""
        logger.info(f"Full-page redirect to {route}")
        for key in list(st.session_state.keys()):
            if key not in self.PRESERVED_KEYS:
                del st.session_state[key]
        self.push(route)


class RecordingNavigator:
    """Navigator that only records where it was sent"""

    def __init__(self, path: str = "/", params: Optional[Dict[str, str]] = None):
        self.path = path
        self.params = dict(params or {})
        self.history: List[Tuple[str, str, Dict[str, Any]]] = []

    def current_path(self) -> str:
        return self.path

    def current_params(self) -> Dict[str, str]:
        return dict(self.params)

    def push(self, route: str, **params: Any):
        self.history.append(("push", route, params))
        self.path = route
        self.params = {key: str(value) for key, value in params.items() if value is not None}

    def redirect(self, route: str):
        self.history.append(("redirect", route, {}))
        self.path = route
        self.params = {}

    @property
    def routes(self) -> List[str]:
        return [route for _, route, _ in self.history]


@dataclass
class Route:
    """A path pattern such as /admin/user-detail/{id}"""
    pattern: str
    handler: Callable
    title: str = ""
    regex: Any = field(init=False, repr=False)

    def __post_init__(self):
        expression = re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", self.pattern.rstrip("/") or "/")
        self.regex = re.compile(f"^{expression}/?$")

    def match(self, path: str) -> Optional[Dict[str, str]]:
        found = self.regex.match(path)
        return found.groupdict() if found else None


class Router:
    """Ordered route table"""

    def __init__(self):
        self.routes: List[Route] = []

    def add(self, pattern: str, handler: Callable, title: str = "") -> 'Router':
        self.routes.append(Route(pattern, handler, title))
        return self

    def resolve(self, path: str) -> Tuple[Optional[Route], Dict[str, str]]:
        path = path.split("?", 1)[0] or "/"
        for route in self.routes:
            params = route.match(path)
            if params is not None:
                return route, params
        return None, {}
