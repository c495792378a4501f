"""State machine transition tables and their graph rendering."""

from .factory import StateMachineFactory, Transition
from .graph import Edge, StateGraph

__all__ = ["Edge", "StateGraph", "StateMachineFactory", "Transition"]
