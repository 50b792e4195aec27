from collections.abc import Iterable, Mapping
from typing import Any

from fsmkit.core.errors import InternalConsistencyError, NullInput
from fsmkit.core.models import DEAD, Computation, Halt
from fsmkit.oneway.compute import compute
from fsmkit.oneway.models import MachineSpec
from fsmkit.oneway.reachability import reachable_states


def _translate(table: Mapping[Any, Any], key: Any, label: str) -> Any:
    try:
        return table[key]
    except KeyError as err:
        raise InternalConsistencyError(
            f"{label} translation has no output for {key!r}"
        ) from err


def is_accepting(spec: MachineSpec, configuration: Any | Halt) -> bool:
    if configuration is DEAD:
        return False
    if spec.is_deterministic:
        return configuration in spec.accept_states
    return not spec.accept_states.isdisjoint(configuration)


def classify(spec: MachineSpec, symbols: Iterable[Any] | None) -> Any:
    """Final configuration after reading `symbols`: a state, a frozenset
    of states, or DEAD."""
    return compute(spec, symbols).final


def accepts(spec: MachineSpec, symbols: Iterable[Any] | None) -> bool:
    return is_accepting(spec, compute(spec, symbols).final)


def recognizes(
    spec: MachineSpec, inputs: Iterable[Iterable[Any]] | None
) -> bool:
    """Whether every input in `inputs` is accepted.

    The empty collection is recognized only when no accept state is
    reachable, so that it stands for the language of a machine that
    accepts nothing.
    """
    if inputs is None:
        raise NullInput("cannot recognize a None collection of inputs")
    inputs = list(inputs)
    if any(symbols is None for symbols in inputs):
        raise NullInput("cannot recognize a collection containing None")

    if not inputs:
        return spec.accept_states.isdisjoint(reachable_states(spec))
    return all(accepts(spec, symbols) for symbols in inputs)


def _transduce_deterministic(
    spec: MachineSpec, computation: Computation
) -> list[Any]:
    outputs: list[Any] = []
    if spec.moore is not None:
        outputs.append(_translate(spec.moore, computation.initial, "moore"))

    for step in computation.steps[1:]:
        # A halted step took no transition.
        if step.halted:
            break
        if spec.mealy is not None:
            key = (step.before, step.symbol)
            outputs.append(_translate(spec.mealy, key, "mealy"))
        else:
            outputs.append(_translate(spec.moore, step.after, "moore"))
    return outputs


def _transduce_nondeterministic(
    spec: MachineSpec, computation: Computation
) -> frozenset[tuple[Any, ...]]:
    # Each branch is (outputs so far, current state).
    branches: set[tuple[tuple[Any, ...], Any]] = set()
    for state in computation.initial:
        if spec.moore is not None:
            branches.add(((_translate(spec.moore, state, "moore"),), state))
        else:
            branches.add(((), state))

    for step in computation.steps[1:]:
        if step.halted:
            return frozenset()

        advanced: set[tuple[tuple[Any, ...], Any]] = set()
        for emitted, state in branches:
            if state not in step.before:
                raise InternalConsistencyError(
                    f"branch in {state!r} is missing from step {step.index}"
                )
            key = (state, step.symbol)
            for target in spec.transitions.get(key, ()):
                if target not in step.after:
                    raise InternalConsistencyError(
                        f"branch target {target!r} is missing from step "
                        f"{step.index}"
                    )
                if spec.mealy is not None:
                    output = _translate(spec.mealy, key, "mealy")
                else:
                    output = _translate(spec.moore, target, "moore")
                advanced.add(((*emitted, output), target))
        branches = advanced

    return frozenset(emitted for emitted, _ in branches)


def transduce_computation(
    spec: MachineSpec, computation: Computation
) -> list[Any] | frozenset[tuple[Any, ...]]:
    """Translate a computation of `spec` that was already recorded."""
    if not spec.is_transducer:
        raise ValueError("machine has no mealy or moore translation")
    if computation.kind != spec.kind:
        raise ValueError(
            f"cannot translate a {computation.kind.value} computation with "
            f"a {spec.kind.value} machine"
        )

    if spec.is_deterministic:
        return _transduce_deterministic(spec, computation)
    return _transduce_nondeterministic(spec, computation)


def transduce(
    spec: MachineSpec, symbols: Iterable[Any] | None
) -> list[Any] | frozenset[tuple[Any, ...]]:
    """Translate `symbols` into outputs.

    Deterministic transducers return one output list: one entry per
    transition for Mealy machines, one per visited state (step 0 included)
    for Moore machines. Nondeterministic transducers return the set of
    output sequences, one per surviving branch.
    """
    if not spec.is_transducer:
        raise ValueError("machine has no mealy or moore translation")
    return transduce_computation(spec, compute(spec, symbols))
