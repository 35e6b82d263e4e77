"""
Consensus engine: turns independent labeler choices into tag statistics
and a final tag set.

Both functions are pure. They take plain rows (anything with ``tag_id`` and
``labeler_id`` attributes for assignments, ``id`` and ``name`` for tags) so
they can be fed straight from query results.
"""

import math
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Protocol

from app.config import settings
from app.schemas.final_tag import TagStatistic

# Default share of labelers that must pick a tag for it to become final;
# the FINAL_TAG_THRESHOLD setting carries the value actually used.
CONSENSUS_THRESHOLD = 0.5


class AssignmentLike(Protocol):
    tag_id: int
    labeler_id: int


class TagLike(Protocol):
    id: int | None
    name: str


def compute_tag_statistics(
    group_tags: Sequence[TagLike],
    assignments: Iterable[AssignmentLike],
) -> list[TagStatistic]:
    """
    Per-tag agreement for one image.

    Returns one entry per group tag, tags nobody chose included, ordered by
    percentage descending. Equal percentages keep the order of ``group_tags``
    (callers pass tags ordered by id).
    """
    assignments = list(assignments)
    counts = Counter(a.tag_id for a in assignments)
    total_labelers = len({a.labeler_id for a in assignments})

    stats = []
    for tag in group_tags:
        count = counts.get(tag.id, 0)  # type: ignore[arg-type]
        percentage = count / total_labelers * 100 if total_labelers > 0 else 0.0
        stats.append(
            TagStatistic(
                tag_id=tag.id,  # type: ignore[arg-type]
                tag_name=tag.name,
                percentage=percentage,
                count=count,
                total_labelers=total_labelers,
            )
        )

    # sorted() is stable, so ties stay in group-tag order
    return sorted(stats, key=lambda s: s.percentage, reverse=True)


def auto_generate_final_tags(
    assignments: Iterable[AssignmentLike],
    threshold: float | None = None,
) -> set[int]:
    """
    Tag ids chosen by at least ``ceil(total_labelers * threshold)`` labelers.

    With no assignments at all the result is empty.
    """
    assignments = list(assignments)
    if not assignments:
        return set()

    ratio = threshold if threshold is not None else settings.FINAL_TAG_THRESHOLD
    total_labelers = len({a.labeler_id for a in assignments})
    required = math.ceil(total_labelers * ratio)

    counts = Counter(a.tag_id for a in assignments)
    return {tag_id for tag_id, count in counts.items() if count >= required}
