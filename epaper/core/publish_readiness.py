"""Checks that an edition's page numbering is complete before it can be published."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

DEFAULT_PREVIEW_LIMIT = 8


@dataclass(frozen=True)
class PublishReadiness:
    """Outcome of a readiness check."""

    is_ready: bool
    blockers: list[str] = field(default_factory=list)


def _format_numbers(numbers: list[int], limit: int) -> str:
    shown = ", ".join(str(number) for number in numbers[:limit])
    remaining = len(numbers) - limit
    if remaining > 0:
        return f"{shown} ...and {remaining} more"
    return shown


def evaluate_publish_readiness(
    page_numbers: Iterable[int],
    *,
    preview_limit: int = DEFAULT_PREVIEW_LIMIT,
) -> PublishReadiness:
    """
    Evaluate whether a set of page numbers can be published.

    Args:
        page_numbers: Page numbers of every page in the edition
        preview_limit: How many offending numbers to list per message

    Returns:
        PublishReadiness with human-readable blockers (empty when ready)

    Example:
        >>> evaluate_publish_readiness([1, 2, 4]).blockers
        ['Page numbering has a gap: missing page 3.']
    """
    numbers = [int(number) for number in page_numbers]

    if not numbers:
        return PublishReadiness(
            is_ready=False,
            blockers=["Add at least one page before publishing."],
        )

    blockers: list[str] = []

    counts = Counter(numbers)
    duplicates = sorted(number for number, seen in counts.items() if seen > 1)
    if duplicates:
        blockers.append(
            f"Duplicate page numbers found: {_format_numbers(duplicates, preview_limit)}. "
            "Resolve duplicates before publishing."
        )

    present = set(counts)
    gaps = [number for number in range(1, max(present) + 1) if number not in present]
    if len(gaps) == 1:
        blockers.append(f"Page numbering has a gap: missing page {gaps[0]}.")
    elif gaps:
        blockers.append(
            f"Page numbering has gaps: missing pages {_format_numbers(gaps, preview_limit)}."
        )

    return PublishReadiness(is_ready=not blockers, blockers=blockers)
