import pytest

from fsa.automaton import Automaton
from fsa.equivalence import columns_equivalent, isomorphic
from fsa.hopcroft import minimize
from fsa.loader import loads

ENDS_WITH_AB_REDUNDANT = """a b
* p -> q p
q -> s r
! r -> q p
s -> q r
"""

ENDS_WITH_AB = """a b
* p -> q p
q -> q r
! r -> q p
"""

ENDS_WITH_A = """a b
* p -> q p
! q -> q p
"""

# same table as ENDS_WITH_AB, only the start state accepts
SAME_TABLE_OTHER_ACCEPTING = """a b
* ! p -> q p
q -> q r
r -> q p
"""


def minimized(text: str) -> Automaton:
    return minimize(loads(text))


def test_redundant_and_minimal_descriptions_are_equal():
    a1, a2 = minimized(ENDS_WITH_AB_REDUNDANT), minimized(ENDS_WITH_AB)
    assert a1.n_states == a2.n_states == 3
    assert columns_equivalent(a1, a2)
    assert columns_equivalent(a2, a1)
    assert isomorphic(a1, a2)


@pytest.mark.parametrize("text", [ENDS_WITH_AB_REDUNDANT, ENDS_WITH_AB, ENDS_WITH_A])
def test_automaton_is_equal_to_itself(text):
    assert columns_equivalent(minimized(text), minimized(text))
    assert isomorphic(minimized(text), minimized(text))


def test_different_state_counts_are_not_equal():
    assert not columns_equivalent(minimized(ENDS_WITH_AB), minimized(ENDS_WITH_A))
    assert not isomorphic(minimized(ENDS_WITH_AB), minimized(ENDS_WITH_A))


def test_different_symbol_counts_are_not_equal():
    a1 = minimized(ENDS_WITH_A)
    a2 = minimized("a b c\n* p -> q p p\n! q -> q p p\n")
    assert a1.n_states == a2.n_states
    assert not columns_equivalent(a1, a2)
    assert not columns_equivalent(a2, a1)


def test_column_shapes_ignore_acceptance():
    a1, a2 = minimized(ENDS_WITH_AB), minimized(SAME_TABLE_OTHER_ACCEPTING)
    assert a1.transitions == a2.transitions
    assert a1.accepting != a2.accepting
    assert columns_equivalent(a1, a2)
    assert not isomorphic(a1, a2)


def test_columns_may_be_permuted():
    a1 = minimized(ENDS_WITH_AB)
    a2 = minimized("b a\n* p -> p q\nq -> r q\n! r -> p q\n")
    assert a1.transitions != a2.transitions
    assert columns_equivalent(a1, a2)
    assert isomorphic(a1, a2)


def test_one_column_may_match_several():
    a1, a2 = Automaton("xy"), Automaton("xy")
    for automaton in (a1, a2):
        automaton.set_start(automaton.add_state("0"))
        automaton.add_state("1")
    a1.transitions = [[1, 1], [0, 0]]
    a2.transitions = [[1, 0], [0, 1]]
    assert columns_equivalent(a1, a2)
    assert not columns_equivalent(a2, a1)


def test_isomorphic_needs_the_same_alphabet():
    a1 = minimized(ENDS_WITH_A)
    a2 = minimized("a c\n* p -> q p\n! q -> q p\n")
    assert columns_equivalent(a1, a2)
    assert not isomorphic(a1, a2)


def test_isomorphic_compares_the_reachable_states():
    a1 = loads("a\n* p -> p\nq -> q\n")
    a2 = loads("a\n* p -> q\nq -> p\n")
    assert not isomorphic(a1, a2)
    assert isomorphic(a1, a1.copy())


def test_isomorphic_without_start_states():
    assert isomorphic(Automaton("a"), Automaton("a"))
    assert not isomorphic(Automaton("a"), minimized(ENDS_WITH_A))


def test_automata_without_start_states_compare_their_tables():
    a1, a2 = Automaton("a"), Automaton("a")
    for automaton in (a1, a2):
        automaton.add_state("0")
        automaton.add_state("1")
    a1.transitions = [[1], [0]]
    a2.transitions = [[1], [0]]
    assert isomorphic(a1, a2)
    a2.accepting = [True, False]
    assert not isomorphic(a1, a2)
    a2.accepting = [False, False]
    a2.transitions = [[0], [1]]
    assert not isomorphic(a1, a2)
