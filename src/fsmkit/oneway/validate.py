import logging
from collections.abc import Mapping, Set
from typing import Any

from fsmkit.core.errors import (
    EpsilonNotPermitted,
    MalformedTransitionTable,
    TableErrorKind,
)
from fsmkit.core.models import EPSILON, MachineKind

_LOGGER = logging.getLogger(__name__)


def _is_member(value: Any, values: Set[Any]) -> bool:
    try:
        return value in values
    except TypeError:
        return False


def _split_key(key: Any) -> tuple[Any, Any]:
    if not isinstance(key, tuple) or len(key) != 2:
        raise MalformedTransitionTable(
            TableErrorKind.BAD_KEY,
            f"transition key {key!r} is not a (state, symbol) pair",
        )
    return key


def _verify_deterministic(
    states: Set[Any],
    alphabet: Set[Any],
    transitions: Mapping[Any, Any],
) -> None:
    expected = len(states) * len(alphabet)
    if len(transitions) != expected:
        raise MalformedTransitionTable(
            TableErrorKind.INCOMPLETE,
            f"deterministic transition table has {len(transitions)} "
            f"entries; expected one per state and symbol ({expected})",
        )

    for key, target in transitions.items():
        state, symbol = _split_key(key)
        if state not in states:
            raise MalformedTransitionTable(
                TableErrorKind.UNKNOWN_STATE,
                f"transition key {key!r} names unknown state {state!r}",
            )
        if symbol is EPSILON:
            raise EpsilonNotPermitted(
                f"deterministic machines cannot have epsilon transitions "
                f"(from state {state!r})"
            )
        if symbol not in alphabet:
            raise MalformedTransitionTable(
                TableErrorKind.UNKNOWN_SYMBOL,
                f"transition key {key!r} names unknown symbol {symbol!r}",
            )
        if not _is_member(target, states):
            raise MalformedTransitionTable(
                TableErrorKind.UNKNOWN_TARGET,
                f"transition {key!r} leads to unknown state {target!r}",
            )


def _verify_nondeterministic(
    states: Set[Any],
    alphabet: Set[Any],
    transitions: Mapping[Any, Any],
    allow_epsilon: bool,
) -> bool:
    has_epsilon = False
    for key, targets in transitions.items():
        state, symbol = _split_key(key)
        if state not in states:
            raise MalformedTransitionTable(
                TableErrorKind.UNKNOWN_STATE,
                f"transition key {key!r} names unknown state {state!r}",
            )
        if symbol is EPSILON:
            if not allow_epsilon:
                raise EpsilonNotPermitted(
                    "transducers cannot have epsilon transitions "
                    f"(from state {state!r})"
                )
            has_epsilon = True
        elif symbol not in alphabet:
            raise MalformedTransitionTable(
                TableErrorKind.UNKNOWN_SYMBOL,
                f"transition key {key!r} names unknown symbol {symbol!r}",
            )
        if not isinstance(targets, Set) or not targets <= states:
            raise MalformedTransitionTable(
                TableErrorKind.NOT_A_SUBSET,
                f"transition {key!r} leads to {targets!r}, which is not a "
                "subset of the states",
            )
    return has_epsilon


def verify_transitions(
    kind: MachineKind,
    states: Set[Any],
    alphabet: Set[Any],
    transitions: Mapping[Any, Any],
    *,
    allow_epsilon: bool = True,
) -> bool:
    """Check a transition table against its states and alphabet.

    Deterministic tables must be total functions from every (state, symbol)
    pair to a state. Nondeterministic tables may be partial and map keys to
    subsets of the states; epsilon keys are accepted only when
    `allow_epsilon` is set (acceptors).

    Returns whether the table has epsilon transitions. Raises
    MalformedTransitionTable (or EpsilonNotPermitted) on the first problem.
    """
    if kind == MachineKind.DETERMINISTIC:
        _verify_deterministic(states, alphabet, transitions)
        has_epsilon = False
    else:
        has_epsilon = _verify_nondeterministic(
            states, alphabet, transitions, allow_epsilon
        )
    _LOGGER.debug(
        "verified %s transition table: %d entries, epsilon=%s",
        kind.value,
        len(transitions),
        has_epsilon,
    )
    return has_epsilon


def verify_translations(
    states: Set[Any],
    transitions: Mapping[Any, Any],
    outputs: Set[Any],
    mealy: Mapping[Any, Any] | None,
    moore: Mapping[Any, Any] | None,
) -> None:
    if mealy is not None and moore is not None:
        raise ValueError("a machine takes at most one of mealy or moore")
    if mealy is not None:
        if set(mealy) != set(transitions):
            raise ValueError(
                "mealy translation keys must equal the transition keys"
            )
        translations = mealy
    elif moore is not None:
        if not outputs:
            raise ValueError("moore machines need at least one output")
        if set(moore) != set(states):
            raise ValueError("moore translation keys must equal the states")
        translations = moore
    else:
        return

    for key, output in translations.items():
        if not _is_member(output, outputs):
            raise ValueError(
                f"translation of {key!r} is {output!r}, which is not one "
                "of the outputs"
            )
