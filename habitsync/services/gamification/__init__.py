"""
Gamification module
Badge catalog and badge list merging
"""
from .badges import (
    BadgeInfo,
    BADGE_CATALOG,
    FALLBACK_BADGE,
    get_badge_info,
    merge_badges,
    replace_badges
)

__all__ = [
    'BadgeInfo',
    'BADGE_CATALOG',
    'FALLBACK_BADGE',
    'get_badge_info',
    'merge_badges',
    'replace_badges'
]
