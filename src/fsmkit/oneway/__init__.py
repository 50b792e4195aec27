"""oneway family: one-way finite-state acceptors and transducers."""

from fsmkit.oneway.closure import epsilon_closure, epsilon_closure_of_state
from fsmkit.oneway.compute import compute
from fsmkit.oneway.documents import MachineDocument, dump_machine, load_machine
from fsmkit.oneway.eval import (
    accepts,
    classify,
    is_accepting,
    recognizes,
    transduce,
    transduce_computation,
)
from fsmkit.oneway.graphs import ComputationTrace, StateDiagram, state_diagram
from fsmkit.oneway.graphs import trace as trace_computation
from fsmkit.oneway.models import MachineRole, MachineSpec, SamplerAxes
from fsmkit.oneway.reachability import reachable_states, witness_inputs
from fsmkit.oneway.sampler import sample_machine
from fsmkit.oneway.step import deterministic_step, nondeterministic_step
from fsmkit.oneway.validate import verify_transitions, verify_translations

__all__ = [
    "ComputationTrace",
    "MachineDocument",
    "MachineRole",
    "MachineSpec",
    "SamplerAxes",
    "StateDiagram",
    "accepts",
    "classify",
    "compute",
    "deterministic_step",
    "dump_machine",
    "epsilon_closure",
    "epsilon_closure_of_state",
    "is_accepting",
    "load_machine",
    "nondeterministic_step",
    "reachable_states",
    "recognizes",
    "sample_machine",
    "state_diagram",
    "trace_computation",
    "transduce",
    "transduce_computation",
    "verify_transitions",
    "verify_translations",
    "witness_inputs",
]
