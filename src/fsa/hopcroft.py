"""
Hopcroft's algorithm, https://en.wikipedia.org/wiki/DFA_minimization#Hopcroft's_algorithm

P := {F, Q \\ F}
W := {F, Q \\ F}

while (W is not empty) do
    choose and remove a set A from W
    for each c in Σ do
        let X be the set of Q for which a transition on c leads to a state in A
        for each set Y in P for which X ∩ Y is nonempty and Y \\ X is nonempty do
            replace Y in P by the two sets X ∩ Y and Y \\ X
            if Y is in W
                replace Y in W by the same two sets
            else
                if |X ∩ Y| <= |Y \\ X|
                    add X ∩ Y to W
                else
                    add Y \\ X to W
"""

from typing import Callable, Optional

from more_itertools import first_true

from fsa.automaton import Automaton, InvalidAutomaton
from fsa.utils import UNSET, Block

Trace = Callable[[str, Block], None]


def _waiting_order(block: Block) -> tuple[int, list[int]]:
    # smallest block first, ties broken by the sorted members
    return len(block), sorted(block)


def _predecessors(automaton: Automaton) -> list[list[list[int]]]:
    """inverse[c][q] lists the states with a c-transition into q"""
    inverse = [[[] for _ in range(automaton.n_states)] for _ in automaton.alphabet]
    for state, row in enumerate(automaton.transitions):
        for symbol, target in enumerate(row):
            inverse[symbol][target].append(state)
    return inverse


def hopcroft(automaton: Automaton, trace: Optional[Trace] = None) -> list[Block]:
    """
    Partition the states of a complete automaton into equivalence classes

    Parameters
    ----------
    automaton: Automaton
        A complete automaton, it is only read
    trace: Optional[Trace]
        Called with ("A", block) for every block taken from the work queue and with
        ("X", states) and ("Y", block) for every block which gets split

    Returns
    -------
    list[Block]
        The blocks of the coarsest stable partition, ordered by their smallest member

    Examples
    --------
    >>> a = Automaton(['a'])
    >>> for label in 'pqr':
    ...     _ = a.add_state(label, accepting=label != 'p')
    >>> a.set_start(0)
    >>> for state, target in [(0, 1), (1, 2), (2, 2)]:
    ...     a.set_transition(state, 0, target)
    >>> hopcroft(a)
    [frozenset({0}), frozenset({1, 2})]
    """
    accepting = frozenset(automaton.accepting_states)
    rejecting = frozenset(range(automaton.n_states)) - accepting

    partition: set[Block] = {block for block in (accepting, rejecting) if block}
    waiting: set[Block] = set(partition)
    inverse = _predecessors(automaton)

    while waiting:
        splitter = min(waiting, key=_waiting_order)
        waiting.remove(splitter)
        if trace is not None:
            trace("A", splitter)

        for predecessors in inverse:
            image = frozenset(
                state for target in splitter for state in predecessors[target]
            )
            if not image:
                continue

            for block in sorted(partition, key=min):
                intersection, difference = block & image, block - image
                if not intersection or not difference:
                    continue

                if trace is not None:
                    trace("X", image)
                    trace("Y", block)

                partition.remove(block)
                partition.update((intersection, difference))

                if block in waiting:
                    waiting.remove(block)
                    waiting.update((intersection, difference))
                elif len(intersection) <= len(difference):
                    waiting.add(intersection)
                else:
                    waiting.add(difference)

    return sorted(partition, key=min)


def _check_minimizable(automaton: Automaton) -> None:
    if not 0 <= automaton.start_state < automaton.n_states:
        raise InvalidAutomaton(
            f"start state {automaton.start_state} is not one of the "
            f"{automaton.n_states} registered states"
        )
    if (unset := first_true(automaton.unset_transitions(), default=None)) is not None:
        state, symbol = unset
        raise InvalidAutomaton(
            f"transition from {automaton.states.label(state)!r} on "
            f"{automaton.alphabet.label(symbol)!r} is not set, complete the automaton first"
        )


def minimize(automaton: Automaton, trace: Optional[Trace] = None) -> Automaton:
    """
    Build the quotient of `automaton` by Hopcroft's partition

    The input is left untouched. Block i of the partition becomes state i, labelled "i",
    and takes the transitions and the acceptance of its smallest member.

    Raises
    ------
    InvalidAutomaton
        If the start state is not registered or some transition is unset
    """
    _check_minimizable(automaton)

    blocks = hopcroft(automaton, trace)
    block_of = {state: index for index, block in enumerate(blocks) for state in block}

    minimal = Automaton(automaton.alphabet)
    for index, block in enumerate(blocks):
        minimal.add_state(str(index), accepting=automaton.accepting[min(block)])

    for index, block in enumerate(blocks):
        for symbol, target in enumerate(automaton.transitions[min(block)]):
            minimal.set_transition(index, symbol, block_of[target])

    if (start := block_of.get(automaton.start_state, UNSET)) == UNSET:
        raise InvalidAutomaton(f"no block contains start state {automaton.start_state}")
    minimal.set_start(start)
    return minimal
