from pathlib import Path

import pytest
import srsly
from helpers import epsilon_nfa, parity_dfa, parity_mealy, parity_moore
from pydantic import ValidationError

from fsmkit.core.errors import MalformedTransitionTable
from fsmkit.core.models import EPSILON, MachineKind
from fsmkit.oneway.documents import (
    MachineDocument,
    TransitionRecord,
    dump_machine,
    load_machine,
)
from fsmkit.oneway.eval import accepts, transduce


def _parity_document() -> dict:
    return {
        "kind": "deterministic",
        "states": ["q0", "q1"],
        "alphabet": [0, 1],
        "start_state": "q0",
        "accept_states": ["q1"],
        "transitions": [
            {"state": "q0", "symbol": 0, "target": "q0"},
            {"state": "q0", "symbol": 1, "target": "q1"},
            {"state": "q1", "symbol": 0, "target": "q1"},
            {"state": "q1", "symbol": 1, "target": "q0"},
        ],
    }


class TestTransitionRecord:
    def test_epsilon_key(self) -> None:
        record = TransitionRecord(state="a", epsilon=True, targets=["b"])
        assert record.key == ("a", EPSILON)

    def test_symbol_and_epsilon_are_exclusive(self) -> None:
        with pytest.raises(ValidationError, match="symbol or epsilon"):
            TransitionRecord(state="a", symbol="x", epsilon=True, target="b")

    def test_needs_a_symbol(self) -> None:
        with pytest.raises(ValidationError, match="symbol or epsilon"):
            TransitionRecord(state="a", target="b")

    def test_target_and_targets_are_exclusive(self) -> None:
        with pytest.raises(ValidationError, match="target or targets"):
            TransitionRecord(
                state="a", symbol="x", target="b", targets=["b"]
            )


class TestMachineDocument:
    def test_to_spec(self) -> None:
        spec = MachineDocument.model_validate(_parity_document()).to_spec()
        assert spec.kind == MachineKind.DETERMINISTIC
        assert accepts(spec, [1])
        assert not accepts(spec, [1, 1])

    def test_unknown_fields_are_rejected(self) -> None:
        data = _parity_document()
        data["comment"] = "parity"
        with pytest.raises(ValidationError):
            MachineDocument.model_validate(data)

    def test_duplicate_transition(self) -> None:
        data = _parity_document()
        data["transitions"].append(
            {"state": "q0", "symbol": 0, "target": "q1"}
        )
        document = MachineDocument.model_validate(data)
        with pytest.raises(ValueError, match="duplicate transition"):
            document.to_spec()

    def test_deterministic_rejects_target_sets(self) -> None:
        data = _parity_document()
        data["transitions"][0] = {
            "state": "q0",
            "symbol": 0,
            "targets": ["q0"],
        }
        document = MachineDocument.model_validate(data)
        with pytest.raises(ValueError, match="single target"):
            document.to_spec()

    def test_incomplete_table(self) -> None:
        data = _parity_document()
        data["transitions"].pop()
        document = MachineDocument.model_validate(data)
        with pytest.raises(MalformedTransitionTable):
            document.to_spec()

    def test_nondeterministic_single_target(self) -> None:
        data = {
            "kind": "nondeterministic",
            "states": ["a", "b"],
            "alphabet": ["x"],
            "start_state": "a",
            "transitions": [
                {"state": "a", "symbol": "x", "target": "b"},
            ],
        }
        spec = MachineDocument.model_validate(data).to_spec()
        assert spec.transitions[("a", "x")] == frozenset({"b"})

    def test_from_spec_is_sorted(self) -> None:
        document = MachineDocument.from_spec(parity_dfa())
        assert document.states == ["q0", "q1"]
        assert document.alphabet == [0, 1]
        assert [record.key for record in document.transitions] == [
            ("q0", 0),
            ("q0", 1),
            ("q1", 0),
            ("q1", 1),
        ]


class TestLoadAndDump:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "parity.json"
        srsly.write_json(path, _parity_document())
        spec = load_machine(path)
        assert spec.accept_states == {"q1"}
        assert spec.transitions[("q0", 1)] == "q1"

    @pytest.mark.parametrize(
        "make_spec", [parity_dfa, parity_mealy, parity_moore, epsilon_nfa]
    )
    def test_dump_then_load(self, tmp_path: Path, make_spec) -> None:
        spec = make_spec()
        path = tmp_path / "machine.json"
        dump_machine(spec, path)
        loaded = load_machine(path)
        assert MachineDocument.from_spec(loaded) == (
            MachineDocument.from_spec(spec)
        )
        assert loaded.has_epsilon == spec.has_epsilon

    def test_dumped_transducer_still_translates(self, tmp_path: Path) -> None:
        path = tmp_path / "mealy.json"
        dump_machine(parity_mealy(), path)
        assert transduce(load_machine(path), [1, 1]) == ["odd", "even"]

    def test_dump_omits_missing_translations(self, tmp_path: Path) -> None:
        path = tmp_path / "nfa.json"
        dump_machine(epsilon_nfa(), path)
        data = srsly.read_json(path)
        assert "mealy" not in data
        assert "moore" not in data
        assert {"state": "a", "epsilon": True, "targets": ["b"]} in (
            data["transitions"]
        )
