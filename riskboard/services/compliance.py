# riskboard/services/compliance.py
"""
Training / health-check validity and risk-assessment document validity.

Renewal periods depend on the hazard class of the workplace or role and come
from the active rule profile (validity_years / assessment_validity_years).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from riskboard.core.dates import DateLike, add_years, days_until, parse_calendar_date, start_of_day
from riskboard.core.errors import InvalidInput
from riskboard.core.rules import COMPLIANCE_KINDS, RuleProfile, get_rules, normalize_hazard_class

NO_DATA = "NoData"
EXPIRED = "Expired"
WARNING = "Warning"
VALID = "Valid"


@dataclass(frozen=True)
class ValidityResult:
    status: str
    label: str
    days_remaining: int
    due_date: Optional[date] = None


def validity_years(hazard_class: str, kind: str, rules: Optional[RuleProfile] = None) -> int:
    rules = rules or get_rules()
    if kind not in COMPLIANCE_KINDS:
        raise InvalidInput(f"Unknown compliance type: {kind!r}", field="kind", value=kind)
    return rules.validity_years[normalize_hazard_class(hazard_class)][kind]


def check_validity(
    last_event_date: DateLike,
    hazard_class: str,
    kind: str,
    now: Union[date, datetime],
    rules: Optional[RuleProfile] = None,
) -> ValidityResult:
    rules = rules or get_rules()
    last = parse_calendar_date(last_event_date, field=f"last_{kind}_date")
    if last is None:
        return ValidityResult(status=NO_DATA, label="No data", days_remaining=0)

    due = add_years(last, validity_years(hazard_class, kind, rules))
    days = days_until(start_of_day(due), now)

    if days < 0:
        return ValidityResult(status=EXPIRED, label="Expired", days_remaining=days, due_date=due)
    if days < rules.warning_window_days:
        return ValidityResult(
            status=WARNING, label=f"{days} days left", days_remaining=days, due_date=due
        )
    return ValidityResult(status=VALID, label="Valid", days_remaining=days, due_date=due)


def assessment_validity(
    revision_date: DateLike, hazard_class: str, rules: Optional[RuleProfile] = None
) -> Optional[date]:
    """End date of a risk assessment revised on ``revision_date``; None without a revision date."""
    rules = rules or get_rules()
    revised = parse_calendar_date(revision_date, field="revision_date")
    if revised is None:
        return None
    years = rules.assessment_validity_years[normalize_hazard_class(hazard_class)]
    return add_years(revised, years)
