from app.reconcile import reconcile
from app.schemas import StepCreate


def step(number, step_id=None, text="Do the next thing carefully."):
    return StepCreate(step_id=step_id, step_number=number, step_instructions=text)


def test_matches_existing_steps_by_number():
    plan = reconcile([(10, 1), (11, 2)], [step(1), step(2)])

    assert [step_id for step_id, _ in plan.to_update] == [10, 11]
    assert plan.to_insert == []
    assert plan.to_delete == []


def test_new_numbers_are_inserted():
    plan = reconcile([(10, 1)], [step(1), step(2)])

    assert [step_id for step_id, _ in plan.to_update] == [10]
    assert [s.step_number for s in plan.to_insert] == [2]
    assert plan.to_delete == []


def test_dropped_numbers_are_deleted():
    plan = reconcile([(10, 1), (11, 2)], [step(1, text="Boil the water thoroughly.")])

    assert len(plan.to_update) == 1
    step_id, desired = plan.to_update[0]
    assert step_id == 10
    assert desired.step_instructions == "Boil the water thoroughly."
    assert plan.to_delete == [11]


def test_empty_desired_list_deletes_everything():
    plan = reconcile([(10, 1), (11, 2)], [])

    assert plan.to_update == []
    assert plan.to_insert == []
    assert plan.to_delete == [10, 11]


def test_no_current_steps_inserts_everything():
    plan = reconcile([], [step(1), step(3)])

    assert plan.to_update == []
    assert [s.step_number for s in plan.to_insert] == [1, 3]
    assert plan.to_delete == []


def test_explicit_id_renumbers_without_deleting():
    # Step 10 moves from number 1 to number 3
    plan = reconcile([(10, 1), (11, 2)], [step(3, step_id=10), step(2)])

    assert sorted(step_id for step_id, _ in plan.to_update) == [10, 11]
    assert plan.to_insert == []
    assert plan.to_delete == []


def test_explicit_id_wins_over_number_match():
    # Step 10 is claimed by id, so number 1 cannot reuse it and becomes a new row
    plan = reconcile([(10, 1)], [step(1), step(5, step_id=10)])

    assert plan.to_update[0][0] == 10
    assert plan.to_update[0][1].step_number == 5
    assert [s.step_number for s in plan.to_insert] == [1]
    assert plan.to_delete == []


def test_foreign_step_id_falls_back_to_number():
    # 99 is not a step of this recipe
    plan = reconcile([(10, 1)], [step(1, step_id=99)])

    assert plan.to_update[0][0] == 10
    assert plan.to_insert == []


def test_unknown_step_id_without_number_match_is_inserted():
    plan = reconcile([(10, 1)], [step(2, step_id=99)])

    assert plan.to_update == []
    assert [s.step_number for s in plan.to_insert] == [2]
    assert plan.to_delete == [10]


def test_swap_numbers_by_id():
    plan = reconcile([(10, 1), (11, 2)], [step(2, step_id=10), step(1, step_id=11)])

    assert dict((step_id, s.step_number) for step_id, s in plan.to_update) == {10: 2, 11: 1}
    assert plan.to_delete == []
