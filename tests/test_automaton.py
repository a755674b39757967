import pytest

from nfa2dfa.automaton import DFA, EPSILON, NFA, InvalidAutomatonError, canonical


def make_nfa(**overrides) -> NFA:
    fields = dict(
        total_states=3,
        start_state=1,
        accept_states={3},
        alphabet=("a", "b"),
        transitions={1: {EPSILON: {2}}, 2: {"a": {3}}},
    )
    fields.update(overrides)
    return NFA(**fields)


@pytest.mark.parametrize(
    "states,expected",
    [
        pytest.param([], (), id="empty"),
        pytest.param([3, 1, 2], (1, 2, 3), id="unsorted"),
        pytest.param([2, 2, 1, 1], (1, 2), id="duplicates"),
        pytest.param({5, 4}, (4, 5), id="set"),
    ],
)
def test_canonical(states, expected):
    assert canonical(states) == expected


def test_canonical_forms_compare_equal_regardless_of_input_order():
    assert canonical([3, 1, 2, 1]) == canonical((2, 3, 1))


def test_nfa_normalises_its_fields():
    nfa = make_nfa(accept_states=[3, 3], alphabet=["a", "b"])

    assert nfa.accept_states == frozenset({3})
    assert nfa.alphabet == ("a", "b")
    assert nfa.destinations(2, "a") == frozenset({3})
    assert nfa.destinations(3, "a") == frozenset()
    assert nfa.destinations(1, EPSILON) == frozenset({2})
    assert list(nfa.states) == [1, 2, 3]


def test_nfa_is_immutable():
    nfa = make_nfa()
    with pytest.raises(AttributeError):
        nfa.start_state = 2


@pytest.mark.parametrize(
    "overrides",
    [
        pytest.param(dict(total_states=0), id="no states"),
        pytest.param(dict(start_state=4), id="start above range"),
        pytest.param(dict(start_state=0), id="start below range"),
        pytest.param(dict(accept_states={7}), id="accepting out of range"),
        pytest.param(dict(alphabet=("a", "a")), id="duplicate symbol"),
        pytest.param(dict(alphabet=("a", EPSILON)), id="epsilon in alphabet"),
        pytest.param(dict(alphabet=("a", "ε")), id="epsilon alias in alphabet"),
        pytest.param(dict(alphabet=("a", "eps")), id="eps alias in alphabet"),
        pytest.param(dict(start_state=True), id="bool start"),
        pytest.param(dict(accept_states={True}), id="bool accepting"),
        pytest.param(dict(transitions={9: {"a": {1}}}), id="source out of range"),
        pytest.param(dict(transitions={1: {"a": {4}}}), id="destination out of range"),
        pytest.param(dict(transitions={1: {"c": {2}}}), id="undeclared symbol"),
    ],
)
def test_nfa_rejects_malformed_descriptions(overrides):
    with pytest.raises(InvalidAutomatonError):
        make_nfa(**overrides)


def test_invalid_automaton_error_is_a_value_error():
    with pytest.raises(ValueError):
        make_nfa(start_state=10)


def test_empty_accepting_set_is_legal():
    nfa = make_nfa(accept_states=set())
    assert nfa.accept_states == frozenset()


def test_nfa_stats():
    stats = make_nfa().get_stats()

    assert stats["states"] == 3
    assert stats["alphabet_size"] == 2
    assert stats["total_transitions"] == 2
    assert stats["epsilon_transitions"] == 1


def test_dfa_arena_assigns_indices_in_insertion_order():
    dfa = DFA(("a",), {3})

    assert dfa.add_state([2, 1]) == 0
    assert dfa.add_state([3]) == 1
    assert len(dfa) == 2
    assert dfa[0].states == (1, 2)
    assert [st.states for st in dfa] == [(1, 2), (3,)]


def test_dfa_index_of_uses_canonical_form():
    dfa = DFA(("a",))
    dfa.add_state([1, 2, 3])

    assert dfa.index_of([3, 2, 1, 1]) == 0
    assert dfa.index_of([1, 2]) is None


def test_dfa_refuses_duplicate_constituent_sets():
    dfa = DFA(("a",))
    dfa.add_state([1, 2])
    with pytest.raises(InvalidAutomatonError):
        dfa.add_state([2, 1])


def test_dfa_first_unmarked_returns_lowest_index():
    dfa = DFA(("a",))
    for states in ([1], [2], [3]):
        dfa.add_state(states)

    assert dfa.first_unmarked() == 0
    dfa[0].marked = True
    dfa[2].marked = True
    assert dfa.first_unmarked() == 1
    dfa[1].marked = True
    assert dfa.first_unmarked() is None


def test_dfa_accepting_states_intersect_nfa_accepting_set():
    dfa = DFA(("a",), {2, 5})
    dfa.add_state([1])
    dfa.add_state([1, 2])
    dfa.add_state([3, 4])
    dfa.add_state([2, 3, 4, 5])

    assert dfa.accept_states == [1, 3]
    assert not dfa.is_accepting(0)


def test_dfa_accepts_follows_moves():
    dfa = DFA(("a", "b"), {2})
    dfa.add_state([1])
    dfa.add_state([2])
    dfa[0].moves = {"a": 1, "b": None}
    dfa[1].moves = {"a": None, "b": 1}

    assert dfa.accepts("a")
    assert dfa.accepts("abbb")
    assert not dfa.accepts("")
    assert not dfa.accepts("b")
    assert not dfa.accepts("aa")
    assert not dfa.accepts("ac")


def test_empty_dfa_accepts_nothing():
    assert not DFA(("a",)).accepts("")
