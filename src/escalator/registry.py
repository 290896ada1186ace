from __future__ import annotations

from typing import Dict, Iterator, List

from .person import Behavior, Lane, Person, PersonState

_NEXT_STATE = {
    PersonState.QUEUED: PersonState.ON_ESCALATOR,
    PersonState.ON_ESCALATOR: PersonState.EXITED,
}


class InvalidTransition(ValueError):
    """Raised when a person is moved against the queue -> belt -> exit order."""


class PersonRegistry:
    """Owns every live person of a run, keyed by id in arrival order."""

    def __init__(self) -> None:
        self._persons: Dict[int, Person] = {}
        self._by_state: Dict[PersonState, Dict[int, Person]] = {state: {} for state in PersonState}
        self._next_person_id = 0

    def create(self, behavior: Behavior, lane: Lane, speed: float, now: float) -> Person:
        person = Person(
            person_id=self._next_person_id,
            behavior=behavior,
            lane=lane,
            desired_walk_speed=speed if behavior is Behavior.WALKER else 0.0,
            arrival_time=now,
        )
        self._next_person_id += 1
        self._persons[person.person_id] = person
        self._by_state[PersonState.QUEUED][person.person_id] = person
        return person

    def list_by_state(self, state: PersonState) -> List[Person]:
        return list(self._by_state[state].values())

    def list_by_lane(self, lane: Lane, state: PersonState) -> List[Person]:
        return sorted(
            (p for p in self._by_state[state].values() if p.lane is lane),
            key=lambda p: (p.arrival_time, p.person_id),
        )

    def transition(self, person: Person, new_state: PersonState, now: float, position: float = 0.0) -> None:
        """Advance one step along queue -> belt -> exit, stamping ``now``.

        ``position`` is where a boarding person starts on the belt.
        """
        if self._persons.get(person.person_id) is not person:
            raise InvalidTransition(f"Person {person.person_id} is not registered")
        if _NEXT_STATE.get(person.state) is not new_state:
            raise InvalidTransition(
                f"Person {person.person_id} cannot move from {person.state.value} to {new_state.value}"
            )
        del self._by_state[person.state][person.person_id]
        self._by_state[new_state][person.person_id] = person
        person.state = new_state
        if new_state is PersonState.ON_ESCALATOR:
            person.board_time = now
            person.position = position
        else:
            person.exit_time = now

    def remove(self, person: Person) -> None:
        if person.state is not PersonState.EXITED:
            raise InvalidTransition(
                f"Person {person.person_id} is {person.state.value}; only exited persons can be removed"
            )
        self._persons.pop(person.person_id, None)
        self._by_state[PersonState.EXITED].pop(person.person_id, None)

    def __iter__(self) -> Iterator[Person]:
        return iter(self._persons.values())

    def __len__(self) -> int:
        return len(self._persons)

