import random

import pytest
from helpers import (
    branching_mealy_nfa,
    ends_in_ab_nfa,
    epsilon_chain_nfa,
    epsilon_nfa,
    parity_dfa,
)

from fsmkit.core.models import DEAD
from fsmkit.oneway.compute import compute
from fsmkit.oneway.models import MachineSpec
from fsmkit.oneway.reachability import reachable_states, witness_inputs
from fsmkit.oneway.sampler import sample_machine


def _assert_witnesses_reach(spec: MachineSpec) -> None:
    for state, symbols in witness_inputs(spec).items():
        final = compute(spec, symbols).final
        assert final is not DEAD
        if spec.is_deterministic:
            assert final == state
        else:
            assert state in final


class TestReachableStates:
    def test_parity(self) -> None:
        assert reachable_states(parity_dfa()) == {"q0", "q1"}

    def test_unreachable_state_is_excluded(self) -> None:
        assert reachable_states(epsilon_chain_nfa()) == {0, 1, 2, 3}

    def test_epsilon_edges_count(self) -> None:
        assert reachable_states(epsilon_nfa()) == {"a", "b", "c"}

    def test_start_state_is_always_reachable(self) -> None:
        spec = parity_dfa(alphabet=set(), transitions={})
        assert reachable_states(spec) == {"q0"}

    def test_nondeterministic_partial_table(self) -> None:
        assert reachable_states(branching_mealy_nfa()) == {"s", "l", "r"}


class TestWitnessInputs:
    def test_start_closure_needs_no_input(self) -> None:
        witnesses = witness_inputs(epsilon_chain_nfa())
        assert witnesses[0] == ()
        assert witnesses[1] == ()
        assert witnesses[2] == ()
        assert witnesses[3] == ("t",)

    def test_shortest_witness(self) -> None:
        witnesses = witness_inputs(ends_in_ab_nfa())
        assert witnesses == {"s": (), "p": ("a",), "f": ("a", "b")}

    def test_witnesses_reach_their_states(self) -> None:
        for spec in [
            parity_dfa(),
            epsilon_nfa(),
            epsilon_chain_nfa(),
            ends_in_ab_nfa(),
        ]:
            _assert_witnesses_reach(spec)

    @pytest.mark.slow
    def test_witnesses_reach_their_states_on_sampled_machines(
        self,
    ) -> None:
        rng = random.Random(5)
        for _ in range(200):
            _assert_witnesses_reach(sample_machine(rng=rng))
