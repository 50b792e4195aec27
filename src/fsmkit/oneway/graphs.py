"""Read-only graph views of machines and finished computations.

Nothing here is built while stepping: projections are derived once from a
complete table or Computation and are frozen afterwards.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fsmkit.core.models import DEAD, EPSILON, Computation, MachineKind
from fsmkit.oneway.closure import epsilon_closure
from fsmkit.oneway.models import MachineSpec


class DiagramEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: Any
    target: Any
    symbol: Any = None
    epsilon: bool = False


class StateDiagram(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Any
    vertices: frozenset[Any]
    accept_vertices: frozenset[Any]
    edges: tuple[DiagramEdge, ...]

    def out_edges(self, state: Any) -> list[DiagramEdge]:
        return [edge for edge in self.edges if edge.source == state]


class TraceVertex(BaseModel):
    """A state occupied at one step; DEAD marks a branch that died."""

    model_config = ConfigDict(frozen=True)

    step: int = Field(ge=0)
    state: Any


class TraceEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: TraceVertex
    target: TraceVertex
    symbol: Any


class ComputationTrace(BaseModel):
    """Path (deterministic) or branching graph (nondeterministic) of a run.

    `triples` keeps each step's (before, symbol, after) in traversal order.
    """

    model_config = ConfigDict(frozen=True)

    kind: MachineKind
    roots: tuple[TraceVertex, ...]
    vertices: frozenset[TraceVertex]
    edges: tuple[TraceEdge, ...]
    accept_vertices: frozenset[TraceVertex]
    triples: tuple[tuple[Any, Any, Any], ...]

    @property
    def is_linear(self) -> bool:
        return self.kind == MachineKind.DETERMINISTIC


def state_diagram(spec: MachineSpec) -> StateDiagram:
    edges: list[DiagramEdge] = []
    for (state, symbol), value in spec.transitions.items():
        targets = [value] if spec.is_deterministic else value
        for target in targets:
            if symbol is EPSILON:
                edge = DiagramEdge(source=state, target=target, epsilon=True)
            else:
                edge = DiagramEdge(source=state, target=target, symbol=symbol)
            edges.append(edge)
    return StateDiagram(
        start=spec.start_state,
        vertices=spec.states,
        accept_vertices=spec.accept_states,
        edges=tuple(edges),
    )


def _linear_edges(computation: Computation) -> list[TraceEdge]:
    edges: list[TraceEdge] = []
    for step in computation.steps[1:]:
        edges.append(
            TraceEdge(
                source=TraceVertex(step=step.index - 1, state=step.before),
                target=TraceVertex(step=step.index, state=step.after),
                symbol=step.symbol,
            )
        )
    return edges


def _branch_edges(
    spec: MachineSpec, computation: Computation
) -> list[TraceEdge]:
    edges: list[TraceEdge] = []
    for step in computation.steps[1:]:
        if step.before is DEAD:
            edges.append(
                TraceEdge(
                    source=TraceVertex(step=step.index - 1, state=DEAD),
                    target=TraceVertex(step=step.index, state=DEAD),
                    symbol=step.symbol,
                )
            )
            continue

        for state in step.before:
            source = TraceVertex(step=step.index - 1, state=state)
            direct = spec.transitions.get((state, step.symbol), frozenset())
            targets = epsilon_closure(spec, direct) or {DEAD}
            for target in targets:
                edges.append(
                    TraceEdge(
                        source=source,
                        target=TraceVertex(step=step.index, state=target),
                        symbol=step.symbol,
                    )
                )
    return edges


def trace(spec: MachineSpec, computation: Computation) -> ComputationTrace:
    """Project a finished computation of `spec` into a trace graph."""
    if computation.kind == MachineKind.DETERMINISTIC:
        roots = (TraceVertex(step=0, state=computation.initial),)
        edges = _linear_edges(computation)
    else:
        roots = tuple(
            TraceVertex(step=0, state=state) for state in computation.initial
        )
        edges = _branch_edges(spec, computation)

    vertices = set(roots)
    for edge in edges:
        vertices.add(edge.source)
        vertices.add(edge.target)
    accept_vertices = frozenset(
        vertex
        for vertex in vertices
        if vertex.state is not DEAD and vertex.state in spec.accept_states
    )
    return ComputationTrace(
        kind=computation.kind,
        roots=roots,
        vertices=frozenset(vertices),
        edges=tuple(edges),
        accept_vertices=accept_vertices,
        triples=tuple(computation.triples()),
    )
