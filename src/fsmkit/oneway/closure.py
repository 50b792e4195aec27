from collections import deque
from collections.abc import Iterable
from typing import Any

from fsmkit.core.errors import NullInput
from fsmkit.core.models import EPSILON
from fsmkit.oneway.models import MachineSpec


def _closure_from(
    spec: MachineSpec, seeds: Iterable[Any]
) -> frozenset[Any]:
    closure = {state for state in seeds if state in spec.states}
    if not spec.has_epsilon:
        return frozenset(closure)

    visit = deque(closure)
    while visit:
        state = visit.popleft()
        for target in spec.transitions.get((state, EPSILON), ()):
            if target not in closure:
                closure.add(target)
                visit.append(target)
    return frozenset(closure)


def epsilon_closure_of_state(
    spec: MachineSpec, state: Any
) -> frozenset[Any]:
    """States reachable from `state` through zero or more epsilon moves.

    A state outside the machine has an empty closure.
    """
    return _closure_from(spec, (state,))


def epsilon_closure(
    spec: MachineSpec, states: Iterable[Any] | None
) -> frozenset[Any]:
    """Union of the epsilon closures of every state in `states`."""
    if states is None:
        raise NullInput("cannot take the epsilon closure of None")
    return _closure_from(spec, states)
