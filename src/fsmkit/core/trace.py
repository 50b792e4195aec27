from typing import Any

from pydantic import BaseModel, Field


class TraceStep(BaseModel):
    """Single choice made while sampling a machine."""

    step: str = Field(description="Step identifier, e.g., 'sample_kind'")
    choice: str = Field(description="Human-readable description of the choice")
    value: Any = Field(description="The actual sampled value (serializable)")


class SamplingTrace(BaseModel):
    """Ordered record of every choice behind one sampled machine."""

    seed: int | None = Field(default=None, description="Seed, when known")
    steps: list[TraceStep] = Field(
        default_factory=list, description="Ordered list of sampling steps"
    )


def trace_step(
    trace: list[TraceStep] | None, step: str, choice: str, value: Any
) -> None:
    if trace is not None:
        trace.append(TraceStep(step=step, choice=choice, value=value))
