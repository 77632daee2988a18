from collections import deque

from fsa.automaton import Automaton
from fsa.utils import UNSET


def _columns(automaton: Automaton) -> list[tuple[int, ...]]:
    return [
        tuple(row[symbol] for row in automaton.transitions)
        for symbol in range(automaton.n_symbols)
    ]


def columns_equivalent(first: Automaton, second: Automaton) -> bool:
    """
    Compare two minimized automata by the shape of their transition tables

    The automata are reported equal when they have as many symbols and as many states,
    and every column of the first table (the targets of one symbol, read top to bottom)
    also appears somewhere among the columns of the second.

    Notes
    -----
    This is a necessary condition for the automata to accept the same language, not a
    sufficient one. Accepting flags and symbol labels are not compared, a column of the
    second table may match several columns of the first, and nothing checks that one
    renumbering of the states makes all the columns agree at once. Use ``isomorphic``
    when the full structural check is needed.

    Examples
    --------
    >>> a, b = Automaton(['x', 'y']), Automaton(['y', 'x'])
    >>> for automaton in (a, b):
    ...     automaton.set_start(automaton.add_state('0'))
    ...     _ = automaton.add_state('1')
    >>> a.transitions = [[1, 0], [1, 1]]
    >>> b.transitions = [[0, 1], [1, 1]]
    >>> columns_equivalent(a, b)
    True
    >>> b.transitions = [[0, 0], [1, 1]]
    >>> columns_equivalent(a, b)
    False
    """
    if first.n_symbols != second.n_symbols or first.n_states != second.n_states:
        return False
    candidates = set(_columns(second))
    return all(column in candidates for column in _columns(first))


def isomorphic(first: Automaton, second: Automaton) -> bool:
    """
    Check that some renumbering of the states turns `first` into `second`

    Symbols are matched by label. States are paired by walking both automata in lockstep
    from their start states, the pairing must be one to one and preserve acceptance.
    Unreachable states only count towards the state totals, which must agree. Two
    automata without a start state are compared table for table.
    """
    if first.n_states != second.n_states:
        return False
    if set(first.alphabet) != set(second.alphabet):
        return False
    if UNSET in (first.start_state, second.start_state):
        return (
            first.start_state == second.start_state
            and list(first.alphabet) == list(second.alphabet)
            and first.transitions == second.transitions
            and first.accepting == second.accepting
        )

    labels = [
        (first.alphabet.index(label), second.alphabet.index(label))
        for label in first.alphabet
    ]
    mapping = {first.start_state: second.start_state}
    image = {second.start_state}
    queue = deque([first.start_state])

    while queue:
        p = queue.popleft()
        q = mapping[p]
        if first.accepting[p] != second.accepting[q]:
            return False

        for symbol1, symbol2 in labels:
            p_next = first.transitions[p][symbol1]
            q_next = second.transitions[q][symbol2]
            if (p_next == UNSET) != (q_next == UNSET):
                return False
            if p_next == UNSET:
                continue
            if p_next in mapping:
                if mapping[p_next] != q_next:
                    return False
            elif q_next in image:
                return False
            else:
                mapping[p_next] = q_next
                image.add(q_next)
                queue.append(p_next)

    return True
