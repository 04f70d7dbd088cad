#!/usr/bin/env python3
"""
Steady State Search Example

This example walks through the core of stillpoint on small regulatory
networks.

It shows:
1. Model definition with the builder DSL
2. Reading a model file
3. Resumable enumeration with SpaceSolver
4. Summaries of the steady states found
"""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from stillpoint import ModelBuilder, SearchConfig, SpaceSolver, SteadySpace, read_model, solve
from stillpoint.core.operators import capped
from stillpoint.utils.metrics import steady_state_summary

MODELS = Path(__file__).parent / "models"

console = Console()


def build_toggle_switch():
    """Two genes repressing each other, one of them with an extra level."""
    builder = ModelBuilder("toggle")
    lac = builder.species("LacI", 2)
    tet = builder.species("TetR", 1)

    # LacI reaches level 2 without TetR and drops to level 1 while TetR is on
    builder.rule(lac, ~tet.on | capped(1, tet.on))
    builder.rule(tet, lac < 2)

    return builder.build()


def states_table(model, states):
    table = Table(title=f"Steady states of {model.name}")
    for name, bound in zip(model.names, model.bounds):
        table.add_column(f"{name} (0..{bound})", justify="center")
    for state in states:
        table.add_row(*(str(level) for level in state))
    return table


def demonstrate_builder():
    console.print("\n[bold cyan]Model built with the DSL[/bold cyan]\n")

    model = build_toggle_switch()
    console.print(model.describe())
    console.print(states_table(model, solve(model)))


def demonstrate_resumable_search():
    console.print("\n[bold cyan]Resumable search[/bold cyan]\n")

    model = read_model(MODELS / "lambda_switch.txt")
    solver = SpaceSolver(SteadySpace.from_model(model))

    first = solver.next()
    console.print(f"[yellow]First steady state:[/yellow] {first}")
    console.print(f"  • Statistics so far: {solver.statistics.to_dict()}")

    rest = list(solver)
    console.print(f"[yellow]Remaining steady states:[/yellow] {rest}")
    console.print(f"  • Exhausted: {solver.exhausted}")

    summary = steady_state_summary([first, *rest], model, solver.statistics)
    console.print(
        Panel.fit(
            f"[bold]{model.name}[/bold]\n\n"
            f"Steady states: {summary['steady_states']} of {summary['state_space_size']}\n"
            f"Fixed species: {', '.join(summary['fixed_species']) or 'none'}\n"
            f"Candidates tried: {summary['candidates']}\n"
            f"Prune rate: {summary['prune_rate']:.1%}",
            title="Summary",
        )
    )


def demonstrate_limits():
    console.print("\n[bold cyan]Limited search[/bold cyan]\n")

    model = read_model(MODELS / "cell_cycle.txt")
    config = SearchConfig(max_results=1, time_budget=5.0)
    console.print(states_table(model, solve(model, config)))


def main():
    try:
        demonstrate_builder()
        demonstrate_resumable_search()
        demonstrate_limits()
    except Exception as e:
        console.print(f"\n[red]Error during demonstration: {e}[/red]\n")
        raise


if __name__ == "__main__":
    main()
