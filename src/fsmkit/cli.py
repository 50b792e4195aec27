import random
from collections.abc import Iterable
from pathlib import Path
from typing import Annotated, Any

import srsly
import typer

from fsmkit.core.errors import FsmError
from fsmkit.core.models import DEAD, Computation, MachineKind
from fsmkit.core.trace import SamplingTrace, TraceStep
from fsmkit.oneway.compute import compute
from fsmkit.oneway.documents import dump_machine, load_machine
from fsmkit.oneway.eval import (
    is_accepting,
    recognizes,
    transduce_computation,
)
from fsmkit.oneway.models import MachineRole, MachineSpec, SamplerAxes
from fsmkit.oneway.reachability import reachable_states
from fsmkit.oneway.sampler import sample_machine

app = typer.Typer(help="Run one-way finite-state machines.")


def _sort_key(value: Any) -> tuple[str, str]:
    return (type(value).__name__, str(value))


def _load_or_exit(path: Path) -> MachineSpec:
    try:
        return load_machine(path)
    except (OSError, ValueError, FsmError) as err:
        typer.echo(f"Error: {path}: {err}", err=True)
        raise typer.Exit(1) from err


def _parse_symbols(
    raw: str, separator: str, alphabet: Iterable[Any]
) -> list[Any]:
    """Split `raw` and map each token to the alphabet symbol it names.

    Tokens naming no symbol are kept as strings; the machine halts on them.
    """
    if raw == "":
        return []
    by_name = {str(symbol): symbol for symbol in alphabet}
    return [by_name.get(token, token) for token in raw.split(separator)]


def _format_configuration(configuration: Any) -> str:
    if configuration is DEAD:
        return "DEAD"
    if isinstance(configuration, frozenset):
        states = sorted(configuration, key=_sort_key)
        return "{" + ", ".join(str(state) for state in states) + "}"
    return str(configuration)


def _json_configuration(configuration: Any) -> Any:
    if configuration is DEAD:
        return None
    if isinstance(configuration, frozenset):
        return sorted(configuration, key=_sort_key)
    return configuration


def _json_transduction(transduction: Any) -> Any:
    if isinstance(transduction, frozenset):
        return sorted(
            (list(outputs) for outputs in transduction),
            key=lambda outputs: [_sort_key(output) for output in outputs],
        )
    return transduction


def _render_computation(computation: Computation) -> list[str]:
    lines = []
    for step in computation.steps:
        after = _format_configuration(step.after)
        if step.is_initial:
            lines.append(f"  0: start -> {after}")
            continue
        before = _format_configuration(step.before)
        lines.append(f"  {step.index}: {before} --{step.symbol}--> {after}")
    return lines


@app.command()
def validate(
    machine: Annotated[Path, typer.Argument(help="Machine JSON file")],
) -> None:
    """Check that a machine file describes a valid machine."""
    spec = _load_or_exit(machine)
    epsilon = "yes" if spec.has_epsilon else "no"
    typer.echo(
        f"OK: {spec.kind.value} {spec.role.value}, "
        f"{len(spec.states)} states, {len(spec.alphabet)} symbols, "
        f"epsilon: {epsilon}"
    )


@app.command()
def run(
    machine: Annotated[Path, typer.Argument(help="Machine JSON file")],
    input_symbols: Annotated[
        str,
        typer.Option("--input", "-i", help="Input symbols, e.g. 'a,b,a'"),
    ] = "",
    separator: Annotated[
        str, typer.Option("--separator", help="Symbol separator")
    ] = ",",
    as_json: Annotated[
        bool, typer.Option("--json", help="Print a JSON object")
    ] = False,
) -> None:
    """Compute a machine on one input and show every step."""
    spec = _load_or_exit(machine)
    symbols = _parse_symbols(input_symbols, separator, spec.alphabet)
    computation = compute(spec, symbols)
    accepted = is_accepting(spec, computation.final)
    transduction: list[Any] | frozenset[tuple[Any, ...]] | None = None
    if spec.is_transducer:
        transduction = transduce_computation(spec, computation)

    if as_json:
        payload: dict[str, Any] = {
            "kind": spec.kind.value,
            "steps": [
                {
                    "index": step.index,
                    "before": _json_configuration(step.before),
                    "symbol": step.symbol,
                    "after": _json_configuration(step.after),
                }
                for step in computation.steps
            ],
            "final": _json_configuration(computation.final),
            "halted": computation.halted,
            "accepted": accepted,
        }
        if transduction is not None:
            payload["transduction"] = _json_transduction(transduction)
        typer.echo(srsly.json_dumps(payload))
        return

    typer.echo(f"{spec.kind.value} {spec.role.value}: {len(symbols)} symbols")
    for line in _render_computation(computation):
        typer.echo(line)
    typer.echo(f"final: {_format_configuration(computation.final)}")
    typer.echo(f"accepted: {'yes' if accepted else 'no'}")
    if transduction is not None:
        rendered = srsly.json_dumps(_json_transduction(transduction))
        typer.echo(f"transduction: {rendered}")


@app.command()
def recognize(
    machine: Annotated[Path, typer.Argument(help="Machine JSON file")],
    inputs: Annotated[
        list[str] | None,
        typer.Option(
            "--input", "-i", help="Input symbols; repeat for each input"
        ),
    ] = None,
    separator: Annotated[
        str, typer.Option("--separator", help="Symbol separator")
    ] = ",",
) -> None:
    """Check whether a machine accepts every given input."""
    spec = _load_or_exit(machine)
    parsed = [
        _parse_symbols(raw, separator, spec.alphabet) for raw in inputs or []
    ]
    recognized = recognizes(spec, parsed)
    typer.echo(f"recognized: {'yes' if recognized else 'no'}")
    if not recognized:
        raise typer.Exit(1)


@app.command()
def reachable(
    machine: Annotated[Path, typer.Argument(help="Machine JSON file")],
) -> None:
    """List the states reachable from the start state."""
    spec = _load_or_exit(machine)
    states = sorted(reachable_states(spec), key=_sort_key)
    typer.echo(f"{len(states)} of {len(spec.states)} states reachable")
    for state in states:
        typer.echo(f"  {state}")


@app.command()
def sample(
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Output JSON file")
    ],
    seed: Annotated[
        int | None, typer.Option("--seed", "-s", help="Random seed")
    ] = None,
    kind: Annotated[
        MachineKind | None,
        typer.Option("--kind", help="deterministic or nondeterministic"),
    ] = None,
    role: Annotated[
        MachineRole | None,
        typer.Option("--role", help="acceptor, mealy or moore"),
    ] = None,
    show_trace: Annotated[
        bool, typer.Option("--trace", help="Print the sampling choices")
    ] = False,
) -> None:
    """Sample a random valid machine and write it as JSON."""
    axes_fields: dict[str, Any] = {}
    if kind is not None:
        axes_fields["kinds"] = [kind]
    if role is not None:
        axes_fields["roles"] = [role]
    axes = SamplerAxes(**axes_fields)

    steps: list[TraceStep] = []
    spec = sample_machine(axes, random.Random(seed), trace=steps)
    try:
        dump_machine(spec, output)
    except OSError as err:
        typer.echo(f"Error: {output}: {err}", err=True)
        raise typer.Exit(1) from err

    typer.echo(
        f"Wrote {spec.kind.value} {spec.role.value} with "
        f"{len(spec.states)} states to {output}"
    )
    if show_trace:
        sampling = SamplingTrace(seed=seed, steps=steps)
        typer.echo(srsly.json_dumps(sampling.model_dump(), indent=2))


if __name__ == "__main__":
    app()
