from nfa2dfa.automaton import (
    DFA,
    EPSILON,
    NFA,
    ConstructionStep,
    DFAState,
    InvalidAutomatonError,
    canonical,
)
from nfa2dfa.conversion import epsilon_closure, move, nfa_accepts, subset_construction
from nfa2dfa.parsing import NFAFormatError, parse_text_nfa, read_nfa

__all__ = [
    "DFA",
    "DFAState",
    "EPSILON",
    "NFA",
    "ConstructionStep",
    "InvalidAutomatonError",
    "NFAFormatError",
    "canonical",
    "epsilon_closure",
    "move",
    "nfa_accepts",
    "parse_text_nfa",
    "read_nfa",
    "subset_construction",
]
