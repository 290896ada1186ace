from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, Optional

from .person import Lane, Person


@dataclass
class BoardingArea:
    """FIFO queues at the foot of the escalator, one per lane."""

    lanes: Iterable[Lane]
    queues: Dict[Lane, Deque[Person]] = field(init=False)

    def __post_init__(self) -> None:
        self.queues = {lane: deque() for lane in self.lanes}

    def add_person(self, person: Person) -> None:
        self.queues[person.lane].append(person)

    def head(self, lane: Lane) -> Optional[Person]:
        queue = self.queues[lane]
        return queue[0] if queue else None

    def pop_head(self, lane: Lane) -> Person:
        return self.queues[lane].popleft()

    def queue_length(self, lane: Lane) -> int:
        return len(self.queues[lane])

    def shortest_lane(self) -> Lane:
        # min() keeps the first lane on ties
        return min(self.queues, key=lambda lane: len(self.queues[lane]))

    def lengths(self) -> Dict[str, int]:
        return {lane.value: len(queue) for lane, queue in self.queues.items()}

    def __len__(self) -> int:
        return sum(len(queue) for queue in self.queues.values())
