import logging
from collections.abc import Iterable
from typing import Any

from fsmkit.core.errors import NullInput
from fsmkit.core.models import DEAD, Computation, MachineKind, Step
from fsmkit.oneway.closure import epsilon_closure
from fsmkit.oneway.models import MachineSpec
from fsmkit.oneway.step import deterministic_step, nondeterministic_step

_LOGGER = logging.getLogger(__name__)


def _compute_deterministic(
    spec: MachineSpec, symbols: Iterable[Any]
) -> list[Step]:
    current = spec.start_state
    steps = [Step(index=0, before=current, after=current)]
    for index, symbol in enumerate(symbols, start=1):
        after = deterministic_step(spec, current, symbol)
        steps.append(
            Step(index=index, before=current, symbol=symbol, after=after)
        )
        # A halted deterministic machine never resumes.
        if after is DEAD:
            _LOGGER.debug(
                "halted at step %d: no transition from %r on %r",
                index,
                current,
                symbol,
            )
            break
        current = after
    return steps


def _compute_nondeterministic(
    spec: MachineSpec, symbols: Iterable[Any]
) -> list[Step]:
    start = frozenset({spec.start_state})
    current = epsilon_closure(spec, start)
    steps = [Step(index=0, before=start, after=current)]
    for index, symbol in enumerate(symbols, start=1):
        after = nondeterministic_step(spec, current, symbol)
        if after is DEAD and current is not DEAD:
            _LOGGER.debug(
                "every branch died at step %d on %r", index, symbol
            )
        steps.append(
            Step(index=index, before=current, symbol=symbol, after=after)
        )
        current = after
    return steps


def compute(
    spec: MachineSpec, symbols: Iterable[Any] | None
) -> Computation:
    """Record every step of `spec` reading `symbols` left to right.

    Step 0 is the machine before reading anything. Deterministic records
    end at the first DEAD step; nondeterministic records always hold one
    step per symbol plus step 0.
    """
    if symbols is None:
        raise NullInput("cannot compute a machine on a None input")

    if spec.is_deterministic:
        steps = _compute_deterministic(spec, symbols)
        kind = MachineKind.DETERMINISTIC
    else:
        steps = _compute_nondeterministic(spec, symbols)
        kind = MachineKind.NONDETERMINISTIC
    return Computation(kind=kind, steps=tuple(steps))
