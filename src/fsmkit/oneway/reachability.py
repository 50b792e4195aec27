from collections import deque
from typing import Any

from fsmkit.core.models import EPSILON
from fsmkit.oneway.closure import epsilon_closure
from fsmkit.oneway.models import MachineSpec


def _ordered(values: frozenset[Any]) -> list[Any]:
    return sorted(values, key=lambda v: (type(v).__name__, repr(v)))


def _successors(
    spec: MachineSpec, state: Any, symbol: Any
) -> frozenset[Any]:
    key = (state, symbol)
    if key not in spec.transitions:
        return frozenset()
    if spec.is_deterministic:
        return frozenset({spec.transitions[key]})
    return spec.transitions[key]


def witness_inputs(spec: MachineSpec) -> dict[Any, tuple[Any, ...]]:
    """Map every reachable state to an input that reaches it.

    Epsilon moves read nothing, so states in the start closure map to the
    empty input. Reading a state's witness leaves the machine in that
    state (or, when nondeterministic, with a live branch in it).
    """
    if spec.is_deterministic:
        seeds = [spec.start_state]
    else:
        seeds = _ordered(epsilon_closure(spec, {spec.start_state}))

    symbols = _ordered(spec.alphabet)
    if spec.has_epsilon:
        symbols.append(EPSILON)

    witnesses: dict[Any, tuple[Any, ...]] = {state: () for state in seeds}
    visit = deque(seeds)
    while visit:
        state = visit.popleft()
        for symbol in symbols:
            path = witnesses[state]
            if symbol is not EPSILON:
                path = (*path, symbol)
            for target in _ordered(_successors(spec, state, symbol)):
                if target not in witnesses:
                    witnesses[target] = path
                    visit.append(target)
    return witnesses


def reachable_states(spec: MachineSpec) -> frozenset[Any]:
    """States reachable from the start through zero or more transitions."""
    return frozenset(witness_inputs(spec))
