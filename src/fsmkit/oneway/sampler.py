import logging
import random
import string
from typing import Any

from fsmkit.core.models import EPSILON, MachineKind
from fsmkit.core.trace import TraceStep, trace_step
from fsmkit.oneway.models import MachineRole, MachineSpec, SamplerAxes

_LOGGER = logging.getLogger(__name__)


def _symbol_names(n: int) -> list[str]:
    if n <= len(string.ascii_lowercase):
        return list(string.ascii_lowercase[:n])
    return [f"s{i}" for i in range(n)]


def _sample_targets(
    state_names: list[str], rng: random.Random
) -> frozenset[str]:
    k = rng.randint(1, min(2, len(state_names)))
    return frozenset(rng.sample(state_names, k))


def _sample_transitions(
    kind: MachineKind,
    role: MachineRole,
    state_names: list[str],
    symbols: list[str],
    axes: SamplerAxes,
    rng: random.Random,
) -> dict[tuple[Any, Any], Any]:
    transitions: dict[tuple[Any, Any], Any] = {}
    for state in state_names:
        for symbol in symbols:
            if kind == MachineKind.DETERMINISTIC:
                transitions[(state, symbol)] = rng.choice(state_names)
            elif rng.random() < axes.edge_probability:
                transitions[(state, symbol)] = _sample_targets(
                    state_names, rng
                )
        if (
            kind == MachineKind.NONDETERMINISTIC
            and role == MachineRole.ACCEPTOR
            and rng.random() < axes.epsilon_probability
        ):
            transitions[(state, EPSILON)] = _sample_targets(state_names, rng)
    return transitions


def sample_machine(
    axes: SamplerAxes | None = None,
    rng: random.Random | None = None,
    trace: list[TraceStep] | None = None,
) -> MachineSpec:
    if axes is None:
        axes = SamplerAxes()
    if rng is None:
        rng = random.Random()

    kind = rng.choice(axes.kinds)
    role = rng.choice(axes.roles)
    trace_step(
        trace, "sample_kind", f"Machine kind: {kind.value}", kind.value
    )
    trace_step(
        trace, "sample_role", f"Machine role: {role.value}", role.value
    )

    n_states = rng.randint(*axes.n_states_range)
    n_symbols = rng.randint(*axes.alphabet_size_range)
    state_names = [f"q{i}" for i in range(n_states)]
    symbols = _symbol_names(n_symbols)
    trace_step(
        trace,
        "sample_n_states",
        f"Number of states: {n_states}",
        n_states,
    )
    trace_step(
        trace,
        "sample_alphabet",
        f"Alphabet: {', '.join(symbols) or '(empty)'}",
        symbols,
    )

    start_state = rng.choice(state_names)
    accept_states = frozenset(
        state
        for state in state_names
        if rng.random() < axes.accept_probability
    )
    trace_step(
        trace,
        "sample_start_state",
        f"Start state: {start_state}",
        start_state,
    )
    trace_step(
        trace,
        "sample_accept_states",
        f"Accept states: {len(accept_states)}",
        sorted(accept_states),
    )

    transitions = _sample_transitions(
        kind, role, state_names, symbols, axes, rng
    )
    trace_step(
        trace,
        "sample_transitions",
        f"Transition entries: {len(transitions)}",
        len(transitions),
    )

    fields: dict[str, Any] = {}
    if role != MachineRole.ACCEPTOR:
        n_outputs = rng.randint(*axes.n_outputs_range)
        outputs = [f"o{i}" for i in range(n_outputs)]
        fields["outputs"] = frozenset(outputs)
        if role == MachineRole.MEALY:
            fields["mealy"] = {
                key: rng.choice(outputs) for key in transitions
            }
        else:
            fields["moore"] = {
                state: rng.choice(outputs) for state in state_names
            }
        trace_step(
            trace,
            "sample_outputs",
            f"Number of outputs: {n_outputs}",
            n_outputs,
        )

    _LOGGER.debug(
        "sampled %s %s with %d states and %d transition entries",
        kind.value,
        role.value,
        n_states,
        len(transitions),
    )
    return MachineSpec(
        kind=kind,
        states=frozenset(state_names),
        alphabet=frozenset(symbols),
        transitions=transitions,
        start_state=start_state,
        accept_states=accept_states,
        **fields,
    )
