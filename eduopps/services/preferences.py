# eduopps/services/preferences.py
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def _category_predicates(preferences) -> List[Callable[[object], bool]]:
    predicates = []

    industries = set(getattr(preferences, "industries", None) or ())
    if industries:
        predicates.append(lambda opportunity: opportunity.industry in industries)

    opportunity_types = set(getattr(preferences, "opportunity_types", None) or ())
    if opportunity_types:
        predicates.append(lambda opportunity: opportunity.opportunity_type in opportunity_types)

    age_groups = set(getattr(preferences, "age_groups", None) or ())
    if age_groups:
        predicates.append(
            lambda opportunity: not age_groups.isdisjoint(opportunity.age_groups or ())
        )

    # locations are stored for the profile page only
    return predicates


def has_active_preferences(preferences) -> bool:
    return preferences is not None and bool(_category_predicates(preferences))


def apply_preferences(preferences: Optional[object], opportunities: Iterable[T]) -> List[T]:
    """
    Narrow a list of opportunities to the ones matching saved preferences.

    Each non-empty category contributes one predicate. An opportunity is kept
    when it matches ANY predicate, so adding a category widens the result
    rather than narrowing it. With no non-empty category the input is
    returned unchanged. Order is preserved.
    """
    opportunities = list(opportunities)
    if preferences is None:
        return opportunities

    predicates = _category_predicates(preferences)
    if not predicates:
        return opportunities

    return [
        opportunity for opportunity in opportunities
        if any(predicate(opportunity) for predicate in predicates)
    ]
