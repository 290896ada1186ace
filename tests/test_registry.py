"""Person lifecycle and registry queries."""
import pytest

from escalator import Behavior, InvalidTransition, Lane, PersonRegistry, PersonState
from escalator.person import QUEUE_POSITION


def test_create_registers_a_queued_person():
    registry = PersonRegistry()
    person = registry.create(Behavior.WALKER, Lane.LEFT, 0.7, now=1.5)
    assert person.state is PersonState.QUEUED
    assert person.position == QUEUE_POSITION
    assert person.arrival_time == 1.5
    assert person.desired_walk_speed == 0.7
    assert list(registry) == [person]


def test_standers_never_carry_a_walk_speed():
    registry = PersonRegistry()
    person = registry.create(Behavior.STANDER, Lane.RIGHT, 0.9, now=0.0)
    assert person.desired_walk_speed == 0.0
    assert person.speed(0.5) == 0.5


def test_ids_are_unique_and_sequential():
    registry = PersonRegistry()
    ids = [registry.create(Behavior.STANDER, Lane.A, 0, 0.0).person_id for _ in range(5)]
    assert ids == [0, 1, 2, 3, 4]


def test_transitions_stamp_times():
    registry = PersonRegistry()
    person = registry.create(Behavior.STANDER, Lane.A, 0, now=1.0)
    registry.transition(person, PersonState.ON_ESCALATOR, 3.0)
    assert person.board_time == 3.0
    assert person.position == 0.0
    registry.transition(person, PersonState.EXITED, 10.0)
    assert person.exit_time == 10.0
    assert person.wait_time == 2.0
    assert person.transit_time == 7.0


def test_boarding_can_start_past_the_foot():
    registry = PersonRegistry()
    person = registry.create(Behavior.STANDER, Lane.A, 0, now=0.0)
    registry.transition(person, PersonState.ON_ESCALATOR, 0.8, position=0.1)
    assert person.position == 0.1
    assert person.board_time == 0.8


@pytest.mark.parametrize(
    "steps",
    [
        [PersonState.EXITED],
        [PersonState.QUEUED],
        [PersonState.ON_ESCALATOR, PersonState.QUEUED],
        [PersonState.ON_ESCALATOR, PersonState.EXITED, PersonState.ON_ESCALATOR],
    ],
)
def test_illegal_transitions_raise(steps):
    registry = PersonRegistry()
    person = registry.create(Behavior.STANDER, Lane.A, 0, now=0.0)
    with pytest.raises(InvalidTransition):
        for state in steps:
            registry.transition(person, state, 1.0)


def test_remove_only_after_exit():
    registry = PersonRegistry()
    person = registry.create(Behavior.STANDER, Lane.A, 0, now=0.0)
    with pytest.raises(InvalidTransition):
        registry.remove(person)
    registry.transition(person, PersonState.ON_ESCALATOR, 0.0)
    with pytest.raises(InvalidTransition):
        registry.remove(person)
    registry.transition(person, PersonState.EXITED, 1.0)
    registry.remove(person)
    assert len(registry) == 0


def test_list_by_lane_is_oldest_first():
    registry = PersonRegistry()
    first = registry.create(Behavior.WALKER, Lane.LEFT, 0.5, now=0.0)
    registry.create(Behavior.STANDER, Lane.RIGHT, 0, now=0.1)
    second = registry.create(Behavior.WALKER, Lane.LEFT, 0.6, now=0.2)
    assert registry.list_by_lane(Lane.LEFT, PersonState.QUEUED) == [first, second]
    registry.transition(first, PersonState.ON_ESCALATOR, 0.3)
    assert registry.list_by_state(PersonState.ON_ESCALATOR) == [first]
    assert registry.list_by_lane(Lane.LEFT, PersonState.QUEUED) == [second]
