"""
Dotted-key lookup into the locale tables, with {placeholder} substitution
"""

from typing import Any, Dict, Optional

from locales import LOCALES, DEFAULT_LOCALE
from utils.logging_config import get_logger

logger = get_logger(__name__)


def _get_nested_value(table: Dict[str, Any], key: str) -> Optional[Any]:
    node: Any = table
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def t(key: str, locale: str = DEFAULT_LOCALE, **placeholders: Any) -> str:
    """
    Translate a dotted key such as 'messages.error.general'

    Missing keys are logged and returned unchanged.
    """
    table = LOCALES.get(locale, LOCALES[DEFAULT_LOCALE])
    text = _get_nested_value(table, key)

    if not isinstance(text, str):
        logger.warning(f"Translation not found for key: {key}")
        return key

    for name, value in placeholders.items():
        text = text.replace("{" + name + "}", str(value))

    return text
