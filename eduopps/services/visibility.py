# eduopps/services/visibility.py
from typing import Iterable, List, TypeVar

T = TypeVar("T")


def is_visible(user, opportunity) -> bool:
    """
    Whether an opportunity is visible to the given user.

    Visible when the opportunity is global, when it belongs to the user's
    school, or when the user's school is listed in visible_to_schools.
    A user without a school only ever sees global opportunities. Role plays
    no part here; callers that bypass visibility do so explicitly.
    """
    if opportunity.is_global:
        return True

    school_id = user.school_id
    if school_id is None:
        return False

    if opportunity.school_id == school_id:
        return True

    return school_id in (opportunity.visible_to_schools or ())


def filter_visible(user, opportunities: Iterable[T]) -> List[T]:
    return [opportunity for opportunity in opportunities if is_visible(user, opportunity)]
