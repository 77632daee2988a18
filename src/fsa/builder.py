from typing import Callable, Iterable, Optional, Sequence

from tqdm import tqdm

from fsa.automaton import Automaton
from fsa.hopcroft import Trace, minimize
from fsa.utils import UNSET, FsaFlag, Polarity


class Conflict(Exception):
    def __init__(self, polarity: Polarity, word: Sequence[str], state: int):
        self.polarity = polarity
        self.word = tuple(word)
        self.state = state
        super().__init__(
            f"word {' '.join(self.word)!r} must be "
            f"{'accepted' if polarity.accepts else 'rejected'} "
            f"but state {state} was already decided otherwise"
        )


class IncrementalBuilder:
    """
    Grows a DFA from labelled example words

    Every word is walked from the start state, a missing transition allocates a new state
    on the spot, so the automaton grows like a trie. The state a word terminates at becomes
    ``decided``: its acceptance is fixed and an example of the opposite polarity ending
    there is reported as a ``Conflict``.

    Examples
    --------
    >>> builder = IncrementalBuilder()
    >>> builder.add(Polarity.ACCEPT, ['a', 'b'])
    2
    >>> builder.add(Polarity.REJECT, ['a'])
    1
    >>> builder.automaton.accepts(['a', 'b']), builder.automaton.accepts(['a'])
    (True, False)
    >>> builder.add(Polarity.ACCEPT, ['a'])
    Traceback (most recent call last):
        ...
    fsa.builder.Conflict: word 'a' must be accepted but state 1 was already decided otherwise
    """

    def __init__(self, automaton: Optional[Automaton] = None):
        self.automaton = Automaton() if automaton is None else automaton
        self.decided: set[int] = set()

    def _new_state(self, polarity: Polarity) -> int:
        return self.automaton.add_state(
            str(self.automaton.n_states), accepting=polarity.accepts
        )

    def _start(self, polarity: Polarity) -> int:
        if self.automaton.start_state == UNSET:
            self.automaton.set_start(self._new_state(polarity))
        return self.automaton.start_state

    def add(self, polarity: Polarity, word: Sequence[str]) -> int:
        """
        Extend the automaton so that it accepts or rejects `word`

        Parameters
        ----------
        polarity: Polarity
            Whether `word` must be accepted or rejected
        word: Sequence[str]
            The symbols of the word, unseen symbols are added to the alphabet

        Returns
        -------
        int
            The state the word terminates at

        Raises
        ------
        Conflict
            If the terminal state was decided with the opposite polarity by an earlier word.
            The states and transitions allocated while walking the word are kept.
        """
        automaton = self.automaton
        for label in word:
            automaton.add_symbol(label)

        state = self._start(polarity)
        for label in word:
            symbol = automaton.alphabet.index(label)
            if (target := automaton.transitions[state][symbol]) == UNSET:
                target = self._new_state(polarity)
                automaton.set_transition(state, symbol, target)
            state = target

        if state in self.decided and automaton.accepting[state] != polarity.accepts:
            raise Conflict(polarity, word, state)
        automaton.set_accepting(state, polarity.accepts)
        self.decided.add(state)
        return state

    def extend(
        self,
        examples: Iterable[tuple[Polarity, Sequence[str]]],
        flags: FsaFlag = FsaFlag.NOFLAG,
        callback: Optional[Callable[["IncrementalBuilder"], None]] = None,
    ) -> "IncrementalBuilder":
        """Feed every example to ``add``, stopping at the first conflict"""
        show_progress = flags.should_trace()
        if show_progress:
            examples = tqdm(examples, unit="word")
        for polarity, word in examples:
            self.add(polarity, word)
            if callback is not None:
                callback(self)
        return self

    def snapshot(self, trace: Optional[Trace] = None) -> Automaton:
        """
        The minimal automaton of the current hypothesis

        A copy of the automaton has its unset transitions routed to the start state before
        being minimized, the builder's own automaton is left untouched.
        """
        patched = self.automaton.copy()
        patched.complete(patched.start_state)
        return minimize(patched, trace=trace)

    def accepts(self, word: Sequence[str]) -> bool:
        return self.automaton.accepts(word)
