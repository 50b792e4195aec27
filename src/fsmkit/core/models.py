from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Epsilon(Enum):
    """Marker for a transition taken without reading a symbol."""

    EPSILON = "epsilon"


class Halt(Enum):
    """Marker for the configuration reached when no transition exists."""

    DEAD = "dead"


EPSILON = Epsilon.EPSILON
DEAD = Halt.DEAD


class MachineKind(str, Enum):
    DETERMINISTIC = "deterministic"
    NONDETERMINISTIC = "nondeterministic"


class Step(BaseModel):
    """One recorded step: `before` read `symbol` and moved to `after`.

    Deterministic configurations are a single state, nondeterministic ones
    a frozenset of states. Either may be `DEAD`. Step 0 reads no symbol.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Position in the computation")
    before: Any = Field(description="Configuration before the step")
    symbol: Any = Field(
        default=None, description="Symbol read; None for step 0"
    )
    after: Any = Field(description="Configuration after the step")

    @property
    def is_initial(self) -> bool:
        return self.index == 0

    @property
    def halted(self) -> bool:
        return self.after is DEAD

    def triple(self) -> tuple[Any, Any, Any]:
        return (self.before, self.symbol, self.after)


class Computation(BaseModel):
    """Complete record of one run of a machine over one input."""

    model_config = ConfigDict(frozen=True)

    kind: MachineKind
    steps: tuple[Step, ...] = Field(min_length=1)

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def initial(self) -> Any:
        return self.steps[0].after

    @property
    def final(self) -> Any:
        return self.steps[-1].after

    @property
    def halted(self) -> bool:
        return self.final is DEAD

    @property
    def symbols_read(self) -> tuple[Any, ...]:
        return tuple(step.symbol for step in self.steps[1:])

    def triples(self) -> list[tuple[Any, Any, Any]]:
        return [step.triple() for step in self.steps]
