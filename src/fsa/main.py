from typing import IO, Optional

import click

from fsa.automaton import Automaton, InvalidAutomaton
from fsa.builder import Conflict, IncrementalBuilder
from fsa.equivalence import columns_equivalent, isomorphic
from fsa.hopcroft import minimize
from fsa.loader import AutomatonSyntaxError, dumps, load, read_examples
from fsa.render import render
from fsa.utils import UNSET, Block, FsaFlag


def echo_trace(name: str, block: Block) -> None:
    click.echo(f"{name} = {{{' '.join(map(str, sorted(block)))}}}", err=True)


def _flags(debug: bool, render_dir: Optional[str]) -> FsaFlag:
    flags = FsaFlag.NOFLAG
    if debug:
        flags |= FsaFlag.DEBUG
    if render_dir is not None:
        flags |= FsaFlag.RENDER
    return flags


def _load(path: str) -> Automaton:
    try:
        return load(path)
    except AutomatonSyntaxError as e:
        raise click.ClickException(f"{path}: {e}")


@click.group(name="fsa", help="Learn, minimize and compare deterministic finite automata")
def entry():
    pass


@entry.command(help="Build an automaton from '+ word' and '- word' example lines")
@click.option(
    "--input-file", "-i", type=click.File(), default="-", help="Example lines"
)
@click.option(
    "--out",
    "-o",
    type=click.File("w"),
    default="-",
    help="Where to write the minimized automaton",
)
@click.option(
    "--render",
    "-r",
    "render_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Render the hypothesis after every example into this directory",
)
@click.option(
    "--debug",
    "-g",
    is_flag=True,
    show_default=True,
    default=False,
    help="Turn on debug mode",
)
def learn(input_file: IO, out: IO, render_dir: Optional[str], debug: bool):
    flags = _flags(debug, render_dir)
    trace = echo_trace if flags.should_trace() else None

    def after_example(builder: IncrementalBuilder):
        if flags.should_render():
            render(builder.automaton, "out_a", render_dir)
            render(builder.snapshot(trace), "out", render_dir)

    builder = IncrementalBuilder()
    try:
        builder.extend(read_examples(input_file), flags, after_example)
    except AutomatonSyntaxError as e:
        raise click.ClickException(str(e))
    except Conflict as e:
        click.echo(f"Conflict! {e}")
        raise click.exceptions.Exit(1)

    if builder.automaton.start_state == UNSET:
        raise click.ClickException("no examples were given")
    click.echo(dumps(builder.snapshot(trace)), file=out, nl=False)


@entry.command(help="Minimize two automata and compare the results")
@click.argument("first", type=click.Path(exists=True, dir_okay=False))
@click.argument("second", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--render",
    "-r",
    "render_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Render the automata and their minimized forms into this directory",
)
@click.option(
    "--strict",
    "-s",
    is_flag=True,
    show_default=True,
    default=False,
    help="Require a state renumbering that preserves acceptance",
)
@click.option(
    "--debug",
    "-g",
    is_flag=True,
    show_default=True,
    default=False,
    help="Turn on debug mode",
)
def compare(
    first: str, second: str, render_dir: Optional[str], strict: bool, debug: bool
):
    flags = _flags(debug, render_dir)
    trace = echo_trace if flags.should_trace() else None

    a1, a2 = _load(first), _load(second)
    click.echo(a1.dump())
    click.echo("------------")
    click.echo(a2.dump())
    click.echo("\n-----------------------\n")

    try:
        a1_min, a2_min = minimize(a1, trace=trace), minimize(a2, trace=trace)
    except InvalidAutomaton as e:
        raise click.ClickException(str(e))

    click.echo(a1_min.dump())
    click.echo("------------")
    click.echo(a2_min.dump())
    click.echo()

    if flags.should_render():
        for name, automaton in (
            ("a1", a1),
            ("a2", a2),
            ("a1_min", a1_min),
            ("a2_min", a2_min),
        ):
            render(automaton, name, render_dir)

    equal = isomorphic if strict else columns_equivalent
    click.echo("Equal" if equal(a1_min, a2_min) else "Not equal")


if __name__ == "__main__":
    entry()
