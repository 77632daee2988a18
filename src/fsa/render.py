from os import PathLike
from typing import Optional, Union

import graphviz

from fsa.automaton import Automaton
from fsa.utils import UNSET


def to_digraph(automaton: Automaton, name: str = "a") -> graphviz.Digraph:
    """
    Draw the automaton, accepting states get a double circle and an arrow from an
    invisible node points at the start state. Unset transitions are left out.
    """
    dot = graphviz.Digraph(name, format="svg", engine="dot")
    dot.attr("graph", rankdir="LR")
    dot.attr("node", fontname="verdana")
    dot.attr("edge", fontname="verdana")

    for label, state in automaton.states.items():
        dot.node(
            label,
            label=label,
            shape="doublecircle" if automaton.accepting[state] else "circle",
        )

    for state, row in enumerate(automaton.transitions):
        for symbol, target in enumerate(row):
            if target == UNSET:
                continue
            dot.edge(
                automaton.states.label(state),
                automaton.states.label(target),
                label=automaton.alphabet.label(symbol),
            )

    if automaton.start_state != UNSET:
        dot.node("__start__", label="", shape="none", width="0", height="0")
        dot.edge(
            "__start__", automaton.states.label(automaton.start_state), arrowhead="vee"
        )
    return dot


def render(
    automaton: Automaton,
    filename: str,
    directory: Optional[Union[str, PathLike]] = None,
    view: bool = False,
) -> str:
    """Write the dot source and the svg produced by the ``dot`` executable, returns the svg path"""
    return to_digraph(automaton, filename).render(
        filename=filename, directory=directory, view=view
    )
