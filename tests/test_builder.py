from itertools import product
from random import randint, sample, seed

import pytest

from fsa.builder import Conflict, IncrementalBuilder
from fsa.utils import UNSET, FsaFlag, Polarity

ACCEPT, REJECT = Polarity.ACCEPT, Polarity.REJECT

seed(3)


def build(*examples: str) -> IncrementalBuilder:
    builder = IncrementalBuilder()
    for example in examples:
        marker, *word = example.split()
        builder.add(Polarity.from_marker(marker), word)
    return builder


def random_examples(n: int) -> list[tuple[Polarity, tuple[str, ...]]]:
    words = [word for length in range(5) for word in product("abc", repeat=length)]
    return [(ACCEPT if randint(0, 1) else REJECT, word) for word in sample(words, n)]


def test_starts_empty():
    builder = IncrementalBuilder()
    assert builder.automaton.n_states == 0
    assert builder.automaton.start_state == UNSET
    assert not builder.decided


def test_trie_growth():
    builder = build("+ a b", "- a c", "+ b")
    a = builder.automaton
    assert list(a.alphabet) == ["a", "b", "c"]
    assert list(a.states) == ["0", "1", "2", "3", "4"]
    assert a.transitions == [
        [1, 4, UNSET],
        [UNSET, 2, 3],
        [UNSET, UNSET, UNSET],
        [UNSET, UNSET, UNSET],
        [UNSET, UNSET, UNSET],
    ]
    assert builder.decided == {2, 3, 4}


def test_new_states_take_the_polarity_of_the_word():
    a = build("- a b c").automaton
    assert a.accepting == [False, False, False, False]
    a = build("+ a b c").automaton
    assert a.accepting == [True, True, True, True]


def test_transit_states_are_not_decided():
    builder = build("+ a b", "- a")
    assert builder.decided == {1, 2}
    assert builder.automaton.accepting[:3] == [True, False, True]


def test_empty_word_decides_the_start_state():
    builder = build("-", "+ a")
    assert builder.decided == {0, 1}
    assert not builder.accepts([])
    assert builder.accepts(["a"])
    with pytest.raises(Conflict):
        builder.add(ACCEPT, [])


@pytest.mark.parametrize(
    "first, second",
    [("+ a b", "- a b"), ("- a b", "+ a b"), ("+", "-"), ("- a", "+ a")],
)
def test_conflict(first, second):
    builder = build(first)
    marker, *word = second.split()
    with pytest.raises(Conflict) as info:
        builder.add(Polarity.from_marker(marker), word)
    assert info.value.word == tuple(word)
    assert info.value.polarity is Polarity.from_marker(marker)
    assert info.value.state in builder.decided


@pytest.mark.parametrize("example", ["+ a b", "- a b", "+", "-"])
def test_repeating_an_example_is_not_a_conflict(example):
    builder = build(example, example)
    assert builder.automaton.n_states == len(example.split())


def test_conflict_keeps_the_new_states_but_not_the_flag():
    builder = build("+ a")
    builder.add(REJECT, ["a", "b"])
    assert builder.automaton.n_states == 3
    with pytest.raises(Conflict):
        builder.add(ACCEPT, ["a", "b"])
    assert not builder.accepts(["a", "b"])

    builder = build("+ a")
    n_states = builder.automaton.n_states
    with pytest.raises(Conflict):
        builder.extend([(ACCEPT, ["b"]), (REJECT, ["a"]), (ACCEPT, ["c"])])
    assert builder.automaton.n_states == n_states + 1
    assert builder.accepts(["a"])
    assert builder.automaton.run(["c"]) is None


def test_a_transit_state_can_later_be_decided_either_way():
    builder = build("+ a b c")
    builder.add(REJECT, ["a", "b"])
    assert not builder.accepts(["a", "b"])
    assert builder.accepts(["a", "b", "c"])


@pytest.mark.parametrize(
    "examples", [random_examples(randint(1, 40)) for _ in range(20)]
)
def test_builder_reproduces_every_example(examples):
    builder = IncrementalBuilder().extend(examples)
    snapshot = builder.snapshot()
    for polarity, word in examples:
        assert builder.accepts(word) == polarity.accepts, word
        assert snapshot.accepts(word) == polarity.accepts, word


def test_snapshot_leaves_the_hypothesis_alone():
    builder = build("+ a a", "- b")
    before = repr(builder.automaton)
    snapshot = builder.snapshot()
    assert repr(builder.automaton) == before
    assert snapshot.is_complete()
    assert snapshot.n_states <= builder.automaton.n_states


def test_snapshot_routes_unknown_continuations_to_the_start():
    # after completion every unseen continuation restarts from the start state
    snapshot = build("+ a", "- b").snapshot()
    assert snapshot.accepts("a") and not snapshot.accepts("b")
    assert snapshot.accepts("ab") == snapshot.accepts("ba") == snapshot.accepts("")


def test_extend_reports_every_step():
    seen = []
    IncrementalBuilder().extend(
        [(ACCEPT, "ab"), (REJECT, "b")],
        callback=lambda builder: seen.append(builder.automaton.n_states),
    )
    assert seen == [3, 4]


def test_extend_with_progress_bar():
    builder = IncrementalBuilder().extend([(ACCEPT, "ab")], FsaFlag.DEBUG)
    assert builder.accepts("ab")
