"""Taxonomy discovery over TFS object graphs.

TFS does not hand out the vocabulary a board mapping needs in the shape the
mapping needs it:

- A work item type's states are only implied by its transition model, a
  directed graph of (from, to) edges. Pseudo-states such as the initial
  state may only ever appear as an edge endpoint.
- Iteration paths live in a tree of classification nodes, all nested under
  a structural "Iteration" node that means nothing to a board user.

The functions here are pure; the connector feeds them REST payloads.
"""

from typing import Iterable, List, Optional

from core.models.taxonomy import State, WorkItemType
from connectors.tfs.tfs_models import TfsClassificationNode, TfsTransition, TfsWorkItemType

ITERATION_SEGMENT = "Iteration"
PATH_SEPARATOR = "\\"


def states_from_transitions(transitions: Iterable[TfsTransition]) -> List[State]:
    """Distinct non-empty states appearing at either end of any edge, sorted by name."""
    names = set()
    for transition in transitions:
        if transition.to_state:
            names.add(transition.to_state)
        if transition.from_state:
            names.add(transition.from_state)
    return [State(name=name) for name in sorted(names)]


def discover_states_of(work_item_type: TfsWorkItemType) -> List[State]:
    """States of a work item type, derived from its transition model."""
    return states_from_transitions(work_item_type.transition_edges())


def merge_states(work_item_types: Iterable[WorkItemType]) -> List[State]:
    """Union of the states of several work item types, sorted by name."""
    names = {state.name for work_item_type in work_item_types for state in work_item_type.states}
    return [State(name=name) for name in sorted(names)]


def iteration_paths(node: Optional[TfsClassificationNode]) -> List[str]:
    """Pre-order walk of an iteration tree collecting node paths.

    A node's own path comes before its children's, children are visited in
    order, and nodes without a path are skipped (their children are not).
    """
    if node is None:
        return []

    paths = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.path:
            paths.append(current.path)
        stack.extend(reversed(current.children or []))
    return paths


def strip_iteration_segment(path: str) -> str:
    """Remove the structural "Iteration" segment that follows the project.

    "\\Fabrikam\\Iteration\\Sprint 1" becomes "\\Fabrikam\\Sprint 1". A path
    without the segment is returned unchanged.
    """
    parts = path.split(PATH_SEPARATOR)
    index = 2 if path.startswith(PATH_SEPARATOR) else 1
    if len(parts) > index and parts[index].lower() == ITERATION_SEGMENT.lower():
        del parts[index]
    return PATH_SEPARATOR.join(parts)


def discover_iteration_paths(node: Optional[TfsClassificationNode]) -> List[str]:
    """User-facing iteration paths of a tree, in pre-order."""
    return [strip_iteration_segment(path) for path in iteration_paths(node)]
