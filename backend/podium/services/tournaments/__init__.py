"""Tournament domain services: round scoring and state transitions.

This package contains the pure engine (state, scoring, transitions,
queries) plus the store adapter and the command layer that serializes
writes. HTTP routes and socket handlers import from here, keeping
transport concerns separated from scoring rules.
"""
