"""
Reading and writing the plain text description of an automaton

The first line lists the alphabet, every following line describes one state

    a b
    * q0 -> q1 q0
    ! q1 -> q1 q0

``*`` marks the start state, ``!`` marks an accepting state and the targets follow the
order of the alphabet. Example words for the builder are single lines such as ``+ a b``.
"""

from os import PathLike
from typing import Final, Iterable, Iterator, Union

from fsa.automaton import Automaton, InvalidAutomaton
from fsa.utils import UNSET, Polarity

START_MARKER: Final[str] = "*"
ACCEPT_MARKER: Final[str] = "!"
ARROW: Final[str] = "->"


class AutomatonSyntaxError(Exception):
    def __init__(self, message: str, lineno: int = 0):
        self.lineno = lineno
        super().__init__(f"line {lineno}: {message}" if lineno else message)


def _parse_state_line(automaton: Automaton, tokens: list[str], lineno: int) -> int:
    is_start = is_final = False
    while tokens and tokens[0] in (START_MARKER, ACCEPT_MARKER):
        if tokens[0] == START_MARKER:
            is_start = True
        else:
            is_final = True
        tokens = tokens[1:]

    if len(tokens) < 2 or tokens[1] != ARROW:
        raise AutomatonSyntaxError(f"expected '<state> {ARROW} <targets>'", lineno)
    name, _, *targets = tokens
    if len(targets) != automaton.n_symbols:
        raise AutomatonSyntaxError(
            f"expected {automaton.n_symbols} targets for {name!r}, got {len(targets)}",
            lineno,
        )

    state = automaton.add_state(name)
    for symbol, target in enumerate(targets):
        automaton.set_transition(state, symbol, automaton.add_state(target))
    if is_final:
        automaton.set_accepting(state)
    if is_start:
        if automaton.start_state != UNSET:
            raise AutomatonSyntaxError(f"second start state {name!r}", lineno)
        automaton.set_start(state)
    return state


def loads(text: str) -> Automaton:
    """
    Parse the text description of an automaton

    The first line is always the alphabet, even when it is blank. States are numbered
    in the order they are first mentioned, either as the state of a line or as a
    target. Without a ``*`` line the first described state is the start.

    Examples
    --------
    >>> a = loads('''a b
    ... * p -> q p
    ... ! q -> q p''')
    >>> a.n_states, a.start_state, sorted(a.accepting_states)
    (2, 0, [1])
    >>> a.accepts('aba'), a.accepts('ab')
    (True, False)
    """
    automaton = None
    first_state = UNSET
    for lineno, line in enumerate(text.splitlines(), 1):
        tokens = line.split()
        if automaton is None:
            # a blank first line is an empty alphabet
            automaton = Automaton(tokens)
            continue
        if not tokens:
            continue
        state = _parse_state_line(automaton, tokens, lineno)
        if first_state == UNSET:
            first_state = state

    if automaton is None:
        raise AutomatonSyntaxError("expected an alphabet on the first line")
    if automaton.start_state == UNSET and first_state != UNSET:
        automaton.set_start(first_state)
    return automaton


def load(path: Union[str, PathLike]) -> Automaton:
    with open(path, encoding="utf-8") as f:
        return loads(f.read())


def dumps(automaton: Automaton) -> str:
    """
    Write a complete automaton in the format read by ``loads``

    Raises
    ------
    InvalidAutomaton
        If a transition is unset, the format has no way to express it
    """
    if not automaton.is_complete():
        raise InvalidAutomaton("only complete automata can be written out")

    lines = [" ".join(automaton.alphabet)]
    for state, row in enumerate(automaton.transitions):
        tokens = []
        if state == automaton.start_state:
            tokens.append(START_MARKER)
        if automaton.accepting[state]:
            tokens.append(ACCEPT_MARKER)
        tokens.append(automaton.states.label(state))
        tokens.append(ARROW)
        tokens.extend(map(automaton.states.label, row))
        lines.append(" ".join(tokens))
    return "\n".join(lines) + "\n"


def parse_example(line: str, lineno: int = 0) -> tuple[Polarity, tuple[str, ...]]:
    """
    >>> parse_example('+ a b a')
    (<Polarity.ACCEPT: '+'>, ('a', 'b', 'a'))
    >>> parse_example('-')
    (<Polarity.REJECT: '-'>, ())
    """
    marker, *word = line.split() or [""]
    try:
        polarity = Polarity.from_marker(marker)
    except ValueError:
        raise AutomatonSyntaxError(
            f"expected '+' or '-' at the start of {line.strip()!r}", lineno
        ) from None
    return polarity, tuple(word)


def read_examples(lines: Iterable[str]) -> Iterator[tuple[Polarity, tuple[str, ...]]]:
    """Parse example lines, blank lines are skipped"""
    for lineno, line in enumerate(lines, 1):
        if line.strip():
            yield parse_example(line, lineno)
