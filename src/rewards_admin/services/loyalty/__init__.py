"""Loyalty service exports."""

from .points_rules import (  # noqa: F401
    PointsRuleRepository,
    PointsRuleService,
    check_branch_ownership,
    js_weekday,
    rule_applies_at,
)
