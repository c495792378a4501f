"""Declarative transition tables exposed by state-machine-driven classes."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Any, Iterable, List, Tuple, Union

from .graph import StateGraph

StateLike = Union[str, Enum]


def label_of(value: Any) -> str:
    if isinstance(value, Enum):
        return value.name
    return str(value)


def _as_labels(values: Union[StateLike, Iterable[StateLike]]) -> List[str]:
    if isinstance(values, (str, Enum)):
        values = [values]
    labels: List[str] = []
    for value in values:
        label = label_of(value)
        if label not in labels:
            labels.append(label)
    return labels


@dataclass(frozen=True)
class Transition:
    pre_state: str
    post_state: str
    event: str


class StateMachineFactory:
    """Transition table for one kind of state machine.

    Classes publish an instance as a class attribute (``state_machine_factory``
    by default) so the visualizer can draw their transitions without creating
    the owning object.
    """

    def __init__(self, initial_state: StateLike) -> None:
        self.initial_state = label_of(initial_state)
        self._transitions: List[Transition] = []

    def add_transition(
        self,
        pre_state: StateLike,
        post_states: Union[StateLike, Iterable[StateLike]],
        events: Union[StateLike, Iterable[StateLike]],
    ) -> "StateMachineFactory":
        pre = label_of(pre_state)
        targets = _as_labels(post_states)
        event_labels = _as_labels(events)
        if not pre or not targets or not all(targets):
            raise ValueError(f"Transition from {pre!r} needs non-empty pre and post states")
        if not event_labels:
            raise ValueError(f"Transition from {pre!r} declares no events")
        for target in targets:
            for event in event_labels:
                transition = Transition(pre, target, event)
                if transition not in self._transitions:
                    self._transitions.append(transition)
        return self

    @property
    def transitions(self) -> Tuple[Transition, ...]:
        return tuple(self._transitions)

    @property
    def states(self) -> List[str]:
        ordered = [self.initial_state]
        for transition in self._transitions:
            for state in (transition.pre_state, transition.post_state):
                if state not in ordered:
                    ordered.append(state)
        return ordered

    def generate_state_graph(
        self,
        name: str,
        start_states: AbstractSet[str] = frozenset(),
        post_states: AbstractSet[str] = frozenset(),
    ) -> StateGraph:
        """Draw the transition table as a graph called ``name``.

        A non-empty ``start_states`` keeps only transitions leaving one of those
        states; a non-empty ``post_states`` keeps only transitions entering one.
        """

        graph = StateGraph(name)
        for transition in self._transitions:
            if start_states and transition.pre_state not in start_states:
                continue
            if post_states and transition.post_state not in post_states:
                continue
            graph.add_edge(transition.pre_state, transition.post_state, transition.event)
        if not start_states and not post_states:
            graph.add_node(self.initial_state)
        return graph

    def __repr__(self) -> str:
        return f"StateMachineFactory(initial_state={self.initial_state!r}, transitions={len(self._transitions)})"
