from typing import Any

from fsmkit.core.models import EPSILON, MachineKind
from fsmkit.oneway.models import MachineSpec

PARITY_TRANSITIONS: dict[tuple[str, int], str] = {
    ("q0", 0): "q0",
    ("q0", 1): "q1",
    ("q1", 0): "q1",
    ("q1", 1): "q0",
}


def parity_dfa(**overrides: Any) -> MachineSpec:
    """Accepts inputs holding an odd number of 1s."""
    fields: dict[str, Any] = {
        "kind": MachineKind.DETERMINISTIC,
        "states": {"q0", "q1"},
        "alphabet": {0, 1},
        "transitions": PARITY_TRANSITIONS,
        "start_state": "q0",
        "accept_states": {"q1"},
    }
    fields.update(overrides)
    return MachineSpec(**fields)


def parity_mealy() -> MachineSpec:
    return parity_dfa(
        accept_states=set(),
        outputs={"even", "odd"},
        mealy={
            ("q0", 0): "even",
            ("q0", 1): "odd",
            ("q1", 0): "even",
            ("q1", 1): "even",
        },
    )


def parity_moore() -> MachineSpec:
    return parity_dfa(
        accept_states=set(),
        outputs={"even", "odd"},
        moore={"q0": "even", "q1": "odd"},
    )


def epsilon_nfa(**overrides: Any) -> MachineSpec:
    """a --eps--> b --x--> c, accepting in c."""
    fields: dict[str, Any] = {
        "kind": MachineKind.NONDETERMINISTIC,
        "states": {"a", "b", "c"},
        "alphabet": {"x"},
        "transitions": {("a", EPSILON): {"b"}, ("b", "x"): {"c"}},
        "start_state": "a",
        "accept_states": {"c"},
    }
    fields.update(overrides)
    return MachineSpec(**fields)


def ends_in_ab_nfa() -> MachineSpec:
    """Guesses where the final 'ab' starts."""
    return MachineSpec(
        kind=MachineKind.NONDETERMINISTIC,
        states={"s", "p", "f"},
        alphabet={"a", "b"},
        transitions={
            ("s", "a"): {"s", "p"},
            ("s", "b"): {"s"},
            ("p", "b"): {"f"},
        },
        start_state="s",
        accept_states={"f"},
    )


def epsilon_chain_nfa() -> MachineSpec:
    """Epsilon cycle 0 -> 1 -> 2 -> 0 plus an unreachable state 9."""
    return MachineSpec(
        kind=MachineKind.NONDETERMINISTIC,
        states={0, 1, 2, 3, 9},
        alphabet={"t"},
        transitions={
            (0, EPSILON): {1},
            (1, EPSILON): {2},
            (2, EPSILON): {0},
            (2, "t"): {3},
            (9, EPSILON): {0},
        },
        start_state=0,
        accept_states={3},
    )


def branching_mealy_nfa() -> MachineSpec:
    """From s, reading 'x' forks into l and r with different outputs."""
    return MachineSpec(
        kind=MachineKind.NONDETERMINISTIC,
        states={"s", "l", "r"},
        alphabet={"x", "y"},
        transitions={
            ("s", "x"): {"l", "r"},
            ("l", "y"): {"l"},
            ("r", "y"): {"s"},
        },
        start_state="s",
        outputs={"L", "R", "0", "1"},
        mealy={
            ("s", "x"): "L",
            ("l", "y"): "0",
            ("r", "y"): "1",
        },
    )


def branching_moore_nfa() -> MachineSpec:
    return MachineSpec(
        kind=MachineKind.NONDETERMINISTIC,
        states={"s", "l", "r"},
        alphabet={"x", "y"},
        transitions={
            ("s", "x"): {"l", "r"},
            ("l", "y"): {"l"},
            ("r", "y"): {"s"},
        },
        start_state="s",
        outputs={"S", "L", "R"},
        moore={"s": "S", "l": "L", "r": "R"},
    )
