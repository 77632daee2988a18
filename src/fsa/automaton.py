from itertools import product
from typing import Iterable, Iterator, Optional

from more_itertools import first_true

from fsa.utils import UNSET, LabelIndex


class UnknownIndex(IndexError):
    ...


class InvalidAutomaton(ValueError):
    ...


class Automaton:
    """Formally, a DFA is a 5-tuple (Q, Σ, q0, F, δ) where
        • Q is finite set of states;
        • Σ is alphabet of input symbols;
        • q0 is start state;
        • F is subset of Q giving the ``accept`` states;
        and
        • δ is the transition function, it maps Q × Σ to Q.

    States and symbols are addressed by dense integer indices. Their string labels
    live in two ``LabelIndex`` bijections, the transition table is a dense matrix
    with one row of |Σ| targets per state. A target of ``UNSET`` means that no
    transition has been defined yet.

    Examples
    --------
    >>> a = Automaton(['a', 'b'])
    >>> q0, q1 = a.add_state('q0'), a.add_state('q1', accepting=True)
    >>> a.set_start(q0)
    >>> a.set_transition(q0, a.alphabet.index('a'), q1)
    >>> a.accepts(['a'])
    True
    >>> a.accepts(['b'])
    False
    >>> a.is_complete()
    False
    """

    __slots__ = ("alphabet", "states", "transitions", "accepting", "start_state")

    def __init__(self, alphabet: Iterable[str] = ()):
        self.alphabet = LabelIndex(alphabet)
        self.states = LabelIndex()
        self.transitions: list[list[int]] = []
        self.accepting: list[bool] = []
        self.start_state: int = UNSET

    @property
    def n_states(self) -> int:
        return len(self.transitions)

    @property
    def n_symbols(self) -> int:
        return len(self.alphabet)

    @property
    def accepting_states(self) -> set[int]:
        return {state for state, accepts in enumerate(self.accepting) if accepts}

    def _check_state(self, state: int) -> None:
        if not 0 <= state < self.n_states:
            raise UnknownIndex(f"state index should be 0 <= {state} < {self.n_states}")

    def _check_symbol(self, symbol: int) -> None:
        if not 0 <= symbol < self.n_symbols:
            raise UnknownIndex(
                f"symbol index should be 0 <= {symbol} < {self.n_symbols}"
            )

    def add_symbol(self, label: str) -> int:
        if label in self.alphabet:
            return self.alphabet.add(label)
        for row in self.transitions:
            row.append(UNSET)
        return self.alphabet.add(label)

    def add_state(self, label: str, accepting: bool = False) -> int:
        if label in self.states:
            return self.states.add(label)
        self.transitions.append([UNSET] * self.n_symbols)
        self.accepting.append(accepting)
        return self.states.add(label)

    def set_start(self, state: int) -> None:
        self._check_state(state)
        self.start_state = state

    def transition(self, state: int, symbol: int) -> int:
        self._check_state(state)
        self._check_symbol(symbol)
        return self.transitions[state][symbol]

    def set_transition(self, state: int, symbol: int, target: int) -> None:
        self._check_state(state)
        self._check_symbol(symbol)
        self._check_state(target)
        self.transitions[state][symbol] = target

    def is_accepting(self, state: int) -> bool:
        self._check_state(state)
        return self.accepting[state]

    def set_accepting(self, state: int, accepts: bool = True) -> None:
        self._check_state(state)
        self.accepting[state] = accepts

    def unset_transitions(self) -> Iterator[tuple[int, int]]:
        for state, row in enumerate(self.transitions):
            for symbol, target in enumerate(row):
                if target == UNSET:
                    yield state, symbol

    def is_complete(self) -> bool:
        return first_true(self.unset_transitions(), default=None) is None

    def complete(self, default: Optional[int] = None) -> int:
        """
        Replace every unset transition with a transition to `default`

        Parameters
        ----------
        default: Optional[int]
            The target of the patched transitions, the start state if not given

        Returns
        -------
        int
            The number of transitions which were patched

        Raises
        ------
        UnknownIndex
            If `default` (or the start state when `default` is omitted) is not a registered state
        """
        if default is None:
            default = self.start_state
        self._check_state(default)

        patched = 0
        for state, symbol in list(self.unset_transitions()):
            self.transitions[state][symbol] = default
            patched += 1
        return patched

    def complete_with_sink(self, label: str = "sink") -> int:
        """
        Route every unset transition to a fresh rejecting state which loops on every symbol

        A state already called `label` is left alone, the sink gets the first free label
        among `label`, `label1`, `label2`, ...
        """
        fresh, suffix = label, 0
        while fresh in self.states:
            suffix += 1
            fresh = f"{label}{suffix}"
        sink = self.add_state(fresh)
        self.transitions[sink] = [sink] * self.n_symbols
        self.complete(sink)
        return sink

    def run(self, word: Iterable[str]) -> Optional[int]:
        """Return the state reached after reading `word`, None if the walk falls off the automaton"""
        state = self.start_state
        if state == UNSET:
            return None
        for label in word:
            symbol = self.alphabet.index(label)
            if symbol is None:
                return None
            state = self.transitions[state][symbol]
            if state == UNSET:
                return None
        return state

    def accepts(self, word: Iterable[str]) -> bool:
        state = self.run(word)
        return state is not None and self.accepting[state]

    def words(self, max_length: int) -> Iterator[tuple[str, ...]]:
        """All the words over the alphabet of length at most `max_length`, shortest first"""
        for length in range(max_length + 1):
            yield from product(self.alphabet, repeat=length)

    def copy(self) -> "Automaton":
        duplicate = Automaton()
        duplicate.alphabet = self.alphabet.copy()
        duplicate.states = self.states.copy()
        duplicate.transitions = [row[:] for row in self.transitions]
        duplicate.accepting = self.accepting[:]
        duplicate.start_state = self.start_state
        return duplicate

    def dump(self) -> str:
        """
        A human readable table of the automaton

        >>> a = Automaton(['x'])
        >>> a.set_start(a.add_state('p', accepting=True))
        >>> a.set_transition(0, 0, 0)
        >>> print(a.dump())
        (x,0)
        (p,0)
        0 ! *
        """
        lines = [
            " ".join(f"({label},{index})" for label, index in self.alphabet.items()),
            " ".join(f"({label},{index})" for label, index in self.states.items()),
        ]
        for state, row in enumerate(self.transitions):
            cells = list(map(str, row))
            if self.accepting[state]:
                cells.append("!")
            if state == self.start_state:
                cells.append("*")
            lines.append(" ".join(cells))
        return "\n".join(lines)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(states={list(self.states)}, "
            f"symbols={list(self.alphabet)}, "
            f"start_state={self.start_state}, "
            f"transitions={self.transitions}, "
            f"accept_states={sorted(self.accepting_states)})"
        )
