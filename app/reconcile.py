# app/reconcile.py
# Works out how the stored steps of a recipe must change to match a submitted step list.
# Pure functions only; applying the plan is left to crud.update_recipe.

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Tuple


class DesiredStep(Protocol):
    step_id: Optional[int]
    step_number: int


@dataclass
class StepPlan:
    # (existing step_id, desired step) pairs to update in place
    to_update: List[Tuple[int, DesiredStep]] = field(default_factory=list)
    to_insert: List[DesiredStep] = field(default_factory=list)
    to_delete: List[int] = field(default_factory=list)

    def __repr__(self):
        return (
            f"StepPlan(update={[step_id for step_id, _ in self.to_update]}, "
            f"insert={[s.step_number for s in self.to_insert]}, delete={self.to_delete})"
        )


def reconcile(current: Iterable[Tuple[int, int]], desired: Iterable[DesiredStep]) -> StepPlan:
    """
    Diff the current steps against the desired ones.

    `current` holds (step_id, step_number) pairs as stored.
    Each desired step targets an existing row by its explicit step_id when that
    id belongs to the recipe, otherwise by a matching step_number; anything
    unmatched is inserted. A stored row is targeted at most once, explicit ids
    taking precedence over number matches.

    Stored steps left untargeted are deleted. Without explicit ids these are
    exactly the steps whose number no longer appears in the desired list.
    """
    current = list(current)
    desired = list(desired)

    ids = {step_id for step_id, _ in current}
    by_number = {step_number: step_id for step_id, step_number in current}

    targets: List[Optional[int]] = [None] * len(desired)
    used = set()

    # Explicit ids first, so a number match cannot steal a row claimed by id
    for index, step in enumerate(desired):
        if step.step_id is not None and step.step_id in ids and step.step_id not in used:
            targets[index] = step.step_id
            used.add(step.step_id)

    for index, step in enumerate(desired):
        if targets[index] is not None:
            continue
        candidate = by_number.get(step.step_number)
        if candidate is not None and candidate not in used:
            targets[index] = candidate
            used.add(candidate)

    plan = StepPlan()
    for step, target in zip(desired, targets):
        if target is None:
            plan.to_insert.append(step)
        else:
            plan.to_update.append((target, step))

    plan.to_delete = [step_id for step_id, _ in current if step_id not in used]
    return plan
