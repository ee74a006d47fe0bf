# riskboard/services/thresholds.py
from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from riskboard.core.rules import BOUNDED_LEVELS, RiskThresholds, RuleProfile, get_rules
from riskboard.models.location import Location

log = logging.getLogger("riskboard.thresholds")


def _custom_values(location: Any) -> Optional[dict]:
    """
    Pull the four override columns off a Location (or a dict with the same keys).
    Returns None unless all four are set.
    """
    if location is None:
        return None
    getter = location.get if isinstance(location, dict) else lambda k: getattr(location, k, None)
    values = {level: getter(f"threshold_{level}") for level in BOUNDED_LEVELS}
    if all(v is None for v in values.values()):
        return None
    if any(v is None for v in values.values()):
        return {}
    return values


def resolve_thresholds(location: Any, rules: Optional[RuleProfile] = None) -> RiskThresholds:
    """
    Custom thresholds of the location when present and well-formed, otherwise
    the profile defaults. Never raises.
    """
    rules = rules or get_rules()
    values = _custom_values(location)
    if values is None:
        return rules.default_thresholds

    if values:
        custom = RiskThresholds(**values)
        if custom.is_descending():
            return custom

    log.warning(
        "Ignoring malformed thresholds on location id=%s (%s); using defaults",
        getattr(location, "id", None),
        values or "partially set",
    )
    return rules.default_thresholds


def resolve_thresholds_for_location(
    db: Session, location_id: Optional[int], rules: Optional[RuleProfile] = None
) -> RiskThresholds:
    """Read the location fresh and resolve; unknown or missing id -> defaults."""
    location = db.get(Location, location_id) if location_id is not None else None
    return resolve_thresholds(location, rules)


def has_custom_thresholds(location: Any) -> bool:
    """True when the location's own, well-formed override is in effect."""
    values = _custom_values(location)
    return bool(values) and RiskThresholds(**values).is_descending()
