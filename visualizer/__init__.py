"""Graphviz rendering of state machine transition tables."""
