from typing import Iterable

from nfa2dfa.automaton import (
    DFA,
    EPSILON,
    NFA,
    ConstructionStep,
    InvalidAutomatonError,
    StateSet,
    canonical,
)


def epsilon_closure(state_set: Iterable[int], nfa: NFA) -> StateSet:
    stack = list(state_set)
    closure = set(stack)

    while stack:
        s = stack.pop()
        for nxt in nfa.destinations(s, EPSILON):
            if nxt not in closure:
                closure.add(nxt)
                stack.append(nxt)

    return canonical(closure)


def move(state_set: Iterable[int], symbol: str, nfa: NFA) -> StateSet:
    if symbol not in nfa.alphabet:
        raise InvalidAutomatonError(
            f"Cannot move on '{symbol}': not in alphabet {list(nfa.alphabet)}"
        )

    result = set()

    for s in state_set:
        result |= nfa.destinations(s, symbol)

    return canonical(result)


def subset_construction(nfa: NFA) -> DFA:
    """Build the DFA whose states are the reachable closed sets of NFA states.

    States are numbered in discovery order: the lowest unmarked state is
    processed first and symbols are tried in alphabet order, so the numbering
    is reproducible. Every closure and move is appended to ``dfa.steps``.
    """
    dfa = DFA(nfa.alphabet, nfa.accept_states)

    start_closure = epsilon_closure([nfa.start_state], nfa)
    dfa.add_state(start_closure)
    dfa.steps.append(ConstructionStep(None, None, (nfa.start_state,), start_closure, 0, True))

    k = dfa.first_unmarked()
    while k is not None:
        current = dfa[k]
        current.marked = True

        for a in nfa.alphabet:
            moved = move(current.states, a, nfa)
            if not moved:
                current.moves[a] = None
                dfa.steps.append(ConstructionStep(k, a, moved, (), None))
                continue

            U = epsilon_closure(moved, nfa)
            j = dfa.index_of(U)
            created = j is None
            if created:
                j = dfa.add_state(U)

            current.moves[a] = j
            dfa.steps.append(ConstructionStep(k, a, moved, U, j, created))

        k = dfa.first_unmarked()

    return dfa


def nfa_accepts(nfa: NFA, word: Iterable[str]) -> bool:
    current = epsilon_closure([nfa.start_state], nfa)

    for symbol in word:
        if symbol not in nfa.alphabet:
            return False
        current = epsilon_closure(move(current, symbol, nfa), nfa)

    return any(s in nfa.accept_states for s in current)
