from collections.abc import Mapping, Set
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    model_validator,
)

from fsmkit.core.models import DEAD, EPSILON, MachineKind
from fsmkit.oneway.validate import verify_transitions, verify_translations

_TABLE_FIELDS = ("transitions", "mealy", "moore")
_RESERVED = (EPSILON, DEAD)


class MachineRole(str, Enum):
    ACCEPTOR = "acceptor"
    MEALY = "mealy"
    MOORE = "moore"


def _freeze_targets(value: Any) -> Any:
    if isinstance(value, (Set, list)):
        try:
            return frozenset(value)
        except TypeError:
            # Left as is; the validator reports it as NOT_A_SUBSET.
            return value
    return value


def _frozen_items(
    table: Mapping[Any, Any] | None,
) -> frozenset[Any] | None:
    if table is None:
        return None
    return frozenset(table.items())


def _reject_bool_range_bounds(
    data: Any, field_names: tuple[str, ...]
) -> None:
    if not isinstance(data, dict):
        return

    for field_name in field_names:
        value = data.get(field_name)
        if not isinstance(value, (tuple, list)) or len(value) != 2:
            continue
        low, high = value
        if isinstance(low, bool) or isinstance(high, bool):
            raise ValueError(
                f"{field_name}: bool is not allowed for int range bounds"
            )


class MachineSpec(BaseModel):
    """Immutable description of a one-way finite-state machine.

    `transitions` maps `(state, symbol)` keys (or `(state, EPSILON)` for
    nondeterministic acceptors) to a state when deterministic, or to a set
    of states when nondeterministic. A machine with `mealy` or `moore`
    translations is a transducer; `accept_states` drives acceptance.
    """

    model_config = ConfigDict(frozen=True)

    kind: MachineKind
    states: frozenset[Any] = Field(min_length=1)
    alphabet: frozenset[Any]
    transitions: Any = Field(description="Read-only transition table")
    start_state: Any
    accept_states: frozenset[Any] = Field(default_factory=frozenset)
    outputs: frozenset[Any] | None = None
    mealy: Any = Field(
        default=None, description="Output per transition key"
    )
    moore: Any = Field(default=None, description="Output per state")

    _has_epsilon: bool = PrivateAttr(default=False)

    @model_validator(mode="before")
    @classmethod
    def freeze_tables(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        nondeterministic = data.get("kind") in (
            MachineKind.NONDETERMINISTIC,
            MachineKind.NONDETERMINISTIC.value,
        )
        for name in _TABLE_FIELDS:
            table = data.get(name)
            if table is None:
                continue
            if not isinstance(table, Mapping):
                raise ValueError(f"{name} must be a mapping")
            if name == "transitions" and nondeterministic:
                table = {
                    key: _freeze_targets(targets)
                    for key, targets in table.items()
                }
            data[name] = MappingProxyType(dict(table))
        return data

    @model_validator(mode="after")
    def validate_spec(self) -> "MachineSpec":
        for marker in _RESERVED:
            if marker in self.states or marker in self.alphabet:
                raise ValueError(f"{marker.name} cannot be a state or symbol")
        if None in self.alphabet:
            raise ValueError("None cannot be an input symbol")
        if self.start_state not in self.states:
            raise ValueError("start_state must be one of the states")
        if not self.accept_states <= self.states:
            raise ValueError("accept_states must be a subset of the states")
        if self.is_transducer and self.outputs is None:
            raise ValueError("transducers need a set of outputs")

        self._has_epsilon = verify_transitions(
            self.kind,
            self.states,
            self.alphabet,
            self.transitions,
            allow_epsilon=not self.is_transducer,
        )
        verify_translations(
            self.states,
            self.transitions,
            self.outputs or frozenset(),
            self.mealy,
            self.moore,
        )
        return self

    def __hash__(self) -> int:
        return hash(
            (
                self.kind,
                self.states,
                self.alphabet,
                _frozen_items(self.transitions),
                self.start_state,
                self.accept_states,
                self.outputs,
                _frozen_items(self.mealy),
                _frozen_items(self.moore),
            )
        )

    @property
    def has_epsilon(self) -> bool:
        return self._has_epsilon

    @property
    def is_deterministic(self) -> bool:
        return self.kind == MachineKind.DETERMINISTIC

    @property
    def is_transducer(self) -> bool:
        return self.mealy is not None or self.moore is not None

    @property
    def role(self) -> MachineRole:
        if self.mealy is not None:
            return MachineRole.MEALY
        if self.moore is not None:
            return MachineRole.MOORE
        return MachineRole.ACCEPTOR


class SamplerAxes(BaseModel):
    kinds: list[MachineKind] = Field(
        default_factory=lambda: list(MachineKind)
    )
    roles: list[MachineRole] = Field(
        default_factory=lambda: list(MachineRole)
    )
    n_states_range: tuple[int, int] = Field(default=(1, 6))
    alphabet_size_range: tuple[int, int] = Field(default=(1, 3))
    n_outputs_range: tuple[int, int] = Field(default=(1, 3))
    edge_probability: float = Field(default=0.6, ge=0.0, le=1.0)
    epsilon_probability: float = Field(default=0.25, ge=0.0, le=1.0)
    accept_probability: float = Field(default=0.35, ge=0.0, le=1.0)

    @model_validator(mode="before")
    @classmethod
    def validate_input_axes(cls, data: Any) -> Any:
        _reject_bool_range_bounds(
            data,
            ("n_states_range", "alphabet_size_range", "n_outputs_range"),
        )
        return data

    @model_validator(mode="after")
    def validate_axes(self) -> "SamplerAxes":
        if not self.kinds:
            raise ValueError("kinds must not be empty")
        if not self.roles:
            raise ValueError("roles must not be empty")

        for name in (
            "n_states_range",
            "alphabet_size_range",
            "n_outputs_range",
        ):
            lo, hi = getattr(self, name)
            if lo > hi:
                raise ValueError(f"{name}: low ({lo}) must be <= high ({hi})")

        if self.n_states_range[0] < 1:
            raise ValueError("n_states_range: low must be >= 1")
        if self.alphabet_size_range[0] < 0:
            raise ValueError("alphabet_size_range: low must be >= 0")
        if self.n_outputs_range[0] < 1:
            raise ValueError("n_outputs_range: low must be >= 1")

        return self
