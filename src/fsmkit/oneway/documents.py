from pathlib import Path
from typing import Any

import srsly
from pydantic import BaseModel, ConfigDict, Field, model_validator

from fsmkit.core.models import EPSILON, MachineKind
from fsmkit.oneway.models import MachineSpec

Scalar = str | int


def _sort_key(value: Any) -> tuple[str, str]:
    return (type(value).__name__, str(value))


class TransitionRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    state: Scalar
    symbol: Scalar | None = None
    epsilon: bool = False
    target: Scalar | None = None
    targets: list[Scalar] | None = None

    @model_validator(mode="after")
    def validate_record(self) -> "TransitionRecord":
        if self.epsilon == (self.symbol is not None):
            raise ValueError(
                "a transition needs exactly one of symbol or epsilon"
            )
        if (self.target is None) == (self.targets is None):
            raise ValueError(
                "a transition needs exactly one of target or targets"
            )
        return self

    @property
    def key(self) -> tuple[Any, Any]:
        return (self.state, EPSILON if self.epsilon else self.symbol)


class MealyRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    state: Scalar
    symbol: Scalar
    output: Scalar


class MooreRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    state: Scalar
    output: Scalar


class MachineDocument(BaseModel):
    """JSON-friendly form of a MachineSpec.

    States, symbols and outputs must be str or int scalars.
    """

    model_config = ConfigDict(extra="forbid")

    kind: MachineKind
    states: list[Scalar] = Field(min_length=1)
    alphabet: list[Scalar]
    start_state: Scalar
    accept_states: list[Scalar] = Field(default_factory=list)
    transitions: list[TransitionRecord]
    outputs: list[Scalar] | None = None
    mealy: list[MealyRecord] | None = None
    moore: list[MooreRecord] | None = None

    def _transition_table(self) -> dict[tuple[Any, Any], Any]:
        table: dict[tuple[Any, Any], Any] = {}
        for record in self.transitions:
            key = record.key
            if key in table:
                raise ValueError(f"duplicate transition for {key!r}")
            if self.kind == MachineKind.DETERMINISTIC:
                if record.target is None:
                    raise ValueError(
                        "deterministic transitions take a single target"
                    )
                table[key] = record.target
            elif record.targets is not None:
                table[key] = frozenset(record.targets)
            else:
                table[key] = frozenset({record.target})
        return table

    def to_spec(self) -> MachineSpec:
        fields: dict[str, Any] = {}
        if self.outputs is not None:
            fields["outputs"] = frozenset(self.outputs)
        if self.mealy is not None:
            fields["mealy"] = {
                (record.state, record.symbol): record.output
                for record in self.mealy
            }
        if self.moore is not None:
            fields["moore"] = {
                record.state: record.output for record in self.moore
            }
        return MachineSpec(
            kind=self.kind,
            states=frozenset(self.states),
            alphabet=frozenset(self.alphabet),
            transitions=self._transition_table(),
            start_state=self.start_state,
            accept_states=frozenset(self.accept_states),
            **fields,
        )

    @classmethod
    def from_spec(cls, spec: MachineSpec) -> "MachineDocument":
        records: list[TransitionRecord] = []
        for (state, symbol), value in sorted(
            spec.transitions.items(),
            key=lambda item: (_sort_key(item[0][0]), _sort_key(item[0][1])),
        ):
            fields: dict[str, Any] = {"state": state}
            if symbol is EPSILON:
                fields["epsilon"] = True
            else:
                fields["symbol"] = symbol
            if spec.is_deterministic:
                fields["target"] = value
            else:
                fields["targets"] = sorted(value, key=_sort_key)
            records.append(TransitionRecord(**fields))

        mealy = None
        if spec.mealy is not None:
            mealy = [
                MealyRecord(state=state, symbol=symbol, output=output)
                for (state, symbol), output in sorted(
                    spec.mealy.items(),
                    key=lambda item: (
                        _sort_key(item[0][0]),
                        _sort_key(item[0][1]),
                    ),
                )
            ]
        moore = None
        if spec.moore is not None:
            moore = [
                MooreRecord(state=state, output=output)
                for state, output in sorted(
                    spec.moore.items(), key=lambda item: _sort_key(item[0])
                )
            ]

        return cls(
            kind=spec.kind,
            states=sorted(spec.states, key=_sort_key),
            alphabet=sorted(spec.alphabet, key=_sort_key),
            start_state=spec.start_state,
            accept_states=sorted(spec.accept_states, key=_sort_key),
            transitions=records,
            outputs=(
                None
                if spec.outputs is None
                else sorted(spec.outputs, key=_sort_key)
            ),
            mealy=mealy,
            moore=moore,
        )


def load_machine(path: Path) -> MachineSpec:
    data = srsly.read_json(path)
    return MachineDocument.model_validate(data).to_spec()


def dump_machine(spec: MachineSpec, path: Path) -> None:
    document = MachineDocument.from_spec(spec)
    srsly.write_json(
        path, document.model_dump(mode="json", exclude_none=True)
    )
