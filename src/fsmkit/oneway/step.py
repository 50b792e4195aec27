from collections.abc import Set
from typing import Any

from fsmkit.core.models import DEAD, EPSILON, Halt
from fsmkit.oneway.closure import epsilon_closure
from fsmkit.oneway.models import MachineSpec


def deterministic_step(
    spec: MachineSpec, state: Any | Halt, symbol: Any
) -> Any | Halt:
    """Follow one transition; a missing transition yields DEAD."""
    if state is DEAD or symbol is EPSILON:
        return DEAD
    return spec.transitions.get((state, symbol), DEAD)


def nondeterministic_step(
    spec: MachineSpec, states: Set[Any] | Halt, symbol: Any
) -> frozenset[Any] | Halt:
    """Advance every branch on `symbol`, then close over epsilon moves.

    Branches without a transition die silently. Only when no branch
    survives is the result DEAD.
    """
    if states is DEAD or symbol is EPSILON:
        return DEAD

    targets: set[Any] = set()
    for state in states:
        targets.update(spec.transitions.get((state, symbol), ()))
    if not targets:
        return DEAD
    return epsilon_closure(spec, targets)
