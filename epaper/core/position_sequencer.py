"""Two-phase renumbering of rows that share a live uniqueness constraint.

Assigning final ranks directly can collide with a value still held by a row
that has not been written yet (swapping 1 and 2 fails on the first write).
The sequencer therefore parks every row in a temporary range that no row
currently holds and that lies above 1..N, as close to ``max_value`` as the
existing values allow, before writing the final 1..N values.

Used for page numbers within an edition; the same routine fits any
``(scope, position)`` unique pair such as category positions.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from sqlalchemy import inspect, select, update
from sqlalchemy.orm import InstrumentedAttribute, Session

from epaper.core.exceptions import ValidationError

DEFAULT_MAX_VALUE = 65535


@dataclass(frozen=True)
class PositionPlan:
    """Values to write, in order, to move a set of rows to a new ordering."""

    previous: dict[int, int]
    temporary: dict[int, int]
    final: dict[int, int]

    @property
    def count(self) -> int:
        return len(self.final)

    def value_remap(self) -> dict[int, int]:
        """Old value -> new value, computed from the values held before any write."""
        return {
            self.previous[row_id]: new_value
            for row_id, new_value in self.final.items()
            if self.previous.get(row_id) is not None and self.previous[row_id] > 0
        }


def _temporary_start(occupied: Iterable[int], count: int, max_value: int) -> int:
    """Highest ``start`` such that start+1..start+count holds no occupied value."""
    start = max_value - count
    for value in sorted(occupied, reverse=True):
        if value <= start:
            break
        if value <= start + count:
            start = value - 1 - count
    return start


def plan_sequential_positions(
    current: Mapping[int, int],
    ordered_ids: Sequence[int],
    *,
    max_value: int = DEFAULT_MAX_VALUE,
    field: str = "ordered_ids",
    invalid_message: str = "Reorder payload is invalid.",
    too_many_message: str = "Too many items to reorder.",
) -> PositionPlan:
    """
    Plan a two-phase renumbering without touching the store.

    Args:
        current: Existing row id -> current value for the whole scope
        ordered_ids: Desired order; must be a permutation of ``current`` keys
        max_value: Largest value the column can hold
        field: Input field name used to key validation errors
        invalid_message: Error when ``ordered_ids`` is not a full permutation
        too_many_message: Error when no free temporary range above 1..N fits

    Returns:
        PositionPlan with temporary and final values per row id

    Raises:
        ValidationError: If the payload is incomplete, has extra or duplicate
            ids, or no free temporary range exists in the value space
    """
    ordered = [int(row_id) for row_id in ordered_ids]

    if len(ordered) != len(current) or sorted(ordered) != sorted(current):
        raise ValidationError.for_field(field, invalid_message)

    temp_start = _temporary_start(current.values(), len(ordered), max_value)
    if temp_start < len(ordered):
        raise ValidationError.for_field(field, too_many_message)

    temporary = {row_id: temp_start + rank for rank, row_id in enumerate(ordered, start=1)}
    final = {row_id: rank for rank, row_id in enumerate(ordered, start=1)}

    return PositionPlan(
        previous={row_id: current[row_id] for row_id in ordered},
        temporary=temporary,
        final=final,
    )


def load_positions(
    db: Session,
    column: InstrumentedAttribute,
    *criteria,
    lock: bool = True,
) -> dict[int, int]:
    """
    Read the current id -> value mapping for one uniqueness scope.

    With ``lock`` the rows are selected FOR UPDATE so a concurrent write to
    one of them waits. Inserts into the scope are not blocked by this; callers
    that need that lock the parent row first.
    """
    model = column.class_
    pk = inspect(model).primary_key[0]

    stmt = select(pk, column).where(*criteria).order_by(column)
    if lock:
        stmt = stmt.with_for_update()

    return {row_id: value for row_id, value in db.execute(stmt).all()}


def apply_sequential_positions(
    db: Session,
    column: InstrumentedAttribute,
    plan: PositionPlan,
) -> None:
    """Write both phases of ``plan``, flushing each one before the next starts."""
    model = column.class_
    pk = inspect(model).primary_key[0]

    for values in (plan.temporary, plan.final):
        for row_id, value in values.items():
            db.execute(
                update(model)
                .where(pk == row_id)
                .values({column.key: value})
                .execution_options(synchronize_session=False)
            )
        db.flush()
