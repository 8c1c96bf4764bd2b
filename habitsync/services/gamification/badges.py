"""
Gamification Merge - Badge catalog lookup and badge list updates

Two update paths exist and must stay separate:
- toggle responses carry only badges earned by that toggle -> merge_badges (append)
- profile fetches carry the full authoritative set -> replace_badges
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union
import logging

from habitsync.models import Badge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BadgeInfo:
    """Display information for a badge"""
    name: str
    icon: str


BADGE_CATALOG = {
    "week_warrior": BadgeInfo(name="7-Day Warrior", icon="🔥"),
    "month_master": BadgeInfo(name="Month Master", icon="👑"),
    "habit_collector": BadgeInfo(name="Habit Collector", icon="⭐"),
    "dedication_champion": BadgeInfo(name="Dedication Champion", icon="🏆"),
}

FALLBACK_BADGE = BadgeInfo(name="Badge", icon="🎖️")


def get_badge_info(badge: Union[Badge, str, None]) -> BadgeInfo:
    """
    Look up display information for a badge

    Args:
        badge: Badge model or bare badge id

    Returns:
        Catalog entry, or the generic fallback for unknown ids
    """
    badge_id: Optional[str] = badge.badge_id if isinstance(badge, Badge) else badge
    return BADGE_CATALOG.get(badge_id, FALLBACK_BADGE)


def merge_badges(existing: Iterable[Badge], incoming: Iterable[Badge], dedupe: bool = False) -> List[Badge]:
    """
    Append newly earned badges to the current list in arrival order

    The server only reports badges earned by the triggering toggle, so no
    de-duplication happens unless `dedupe` is set.

    Args:
        existing: Current badge list
        incoming: Badges earned by a toggle
        dedupe: Skip incoming badges whose id is already present

    Returns:
        New badge list; inputs are not modified
    """
    merged = list(existing)
    if not dedupe:
        merged.extend(incoming)
        return merged

    seen = {b.badge_id for b in merged if b.badge_id is not None}
    for badge in incoming:
        if badge.badge_id is not None and badge.badge_id in seen:
            logger.warning(f"Dropping already-owned badge from toggle response: {badge.badge_id}")
            continue
        if badge.badge_id is not None:
            seen.add(badge.badge_id)
        merged.append(badge)
    return merged


def replace_badges(snapshot: Iterable[Badge]) -> List[Badge]:
    """Take a profile's badge list as the complete authoritative set"""
    return list(snapshot)
