"""
Message tables. Only zh-CN ships today.
"""

from .zh_cn import MESSAGES as ZH_CN

LOCALES = {
    "zh-CN": ZH_CN,
}

DEFAULT_LOCALE = "zh-CN"

__all__ = ["LOCALES", "DEFAULT_LOCALE", "ZH_CN"]
