from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple


EPSILON = "E"
EPSILON_SYMBOLS = {"E", "", "ε", "eps", "epsilon"}

StateSet = Tuple[int, ...]


class InvalidAutomatonError(ValueError):
    pass


def canonical(states: Iterable[int]) -> StateSet:
    return tuple(sorted(set(states)))


@dataclass(frozen=True)
class NFA:
    """Source automaton with states numbered 1..total_states.

    ``transitions`` maps a state to a mapping of symbol (alphabet symbol or
    ``EPSILON``) to its destination states. Missing entries are empty.
    """

    total_states: int
    start_state: int
    accept_states: FrozenSet[int]
    alphabet: Tuple[str, ...]
    transitions: Mapping[int, Mapping[str, FrozenSet[int]]]

    def __post_init__(self):
        object.__setattr__(self, "accept_states", frozenset(self.accept_states))
        object.__setattr__(self, "alphabet", tuple(self.alphabet))
        object.__setattr__(
            self,
            "transitions",
            {
                s: {sym: frozenset(dests) for sym, dests in sym_map.items()}
                for s, sym_map in self.transitions.items()
            },
        )
        self._validate()

    def _validate(self):
        if self.total_states < 1:
            raise InvalidAutomatonError(
                f"Total state count must be positive, got {self.total_states}"
            )
        if not self.has_state(self.start_state):
            raise InvalidAutomatonError(
                f"Start state {self.start_state} outside 1..{self.total_states}"
            )
        for s in sorted(self.accept_states):
            if not self.has_state(s):
                raise InvalidAutomatonError(
                    f"Accepting state {s} outside 1..{self.total_states}"
                )
        if len(set(self.alphabet)) != len(self.alphabet):
            raise InvalidAutomatonError(f"Duplicate symbols in alphabet {list(self.alphabet)}")
        for sym in self.alphabet:
            if sym in EPSILON_SYMBOLS:
                raise InvalidAutomatonError(
                    f"Alphabet must not contain epsilon, got '{sym}'"
                )
        for s, sym_map in self.transitions.items():
            if not self.has_state(s):
                raise InvalidAutomatonError(
                    f"Transition source {s} outside 1..{self.total_states}"
                )
            for sym, dests in sym_map.items():
                if sym != EPSILON and sym not in self.alphabet:
                    raise InvalidAutomatonError(
                        f"State {s} has a transition on undeclared symbol '{sym}'"
                    )
                for d in sorted(dests):
                    if not self.has_state(d):
                        raise InvalidAutomatonError(
                            f"Transition {s} --{sym}--> {d}: "
                            f"destination outside 1..{self.total_states}"
                        )

    @property
    def states(self) -> range:
        return range(1, self.total_states + 1)

    def has_state(self, state: int) -> bool:
        return (
            isinstance(state, int)
            and not isinstance(state, bool)
            and 1 <= state <= self.total_states
        )

    def destinations(self, state: int, symbol: str) -> FrozenSet[int]:
        return self.transitions.get(state, {}).get(symbol, frozenset())

    def get_stats(self) -> Dict:
        total_transitions = sum(
            len(dests)
            for sym_map in self.transitions.values()
            for dests in sym_map.values()
        )
        epsilon_transitions = sum(
            len(sym_map.get(EPSILON, ())) for sym_map in self.transitions.values()
        )
        return {
            "states": self.total_states,
            "alphabet_size": len(self.alphabet),
            "accept_states": len(self.accept_states),
            "total_transitions": total_transitions,
            "epsilon_transitions": epsilon_transitions,
        }


@dataclass(frozen=True)
class ConstructionStep:
    """One closure or move computed while building a DFA.

    The initial step has ``source`` and ``symbol`` set to None and ``closure``
    holding the closure of the start state.
    """

    source: Optional[int]
    symbol: Optional[str]
    moved: StateSet
    closure: StateSet
    target: Optional[int]
    created: bool = False


@dataclass
class DFAState:
    states: StateSet
    marked: bool = False
    moves: Dict[str, Optional[int]] = field(default_factory=dict)


class DFA:
    """Arena of DFA states numbered in discovery order.

    ``index_of`` answers "is this constituent set already a state" through a
    reverse index keyed by the canonical set.
    """

    def __init__(self, alphabet: Iterable[str], nfa_accept_states: Iterable[int] = ()):
        self.alphabet: Tuple[str, ...] = tuple(alphabet)
        self.nfa_accept_states: FrozenSet[int] = frozenset(nfa_accept_states)
        self.steps: List[ConstructionStep] = []
        self._states: List[DFAState] = []
        self._index: Dict[StateSet, int] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __getitem__(self, index: int) -> DFAState:
        return self._states[index]

    def __iter__(self) -> Iterator[DFAState]:
        return iter(self._states)

    @property
    def start_state(self) -> int:
        return 0

    def add_state(self, states: Iterable[int]) -> int:
        key = canonical(states)
        if key in self._index:
            raise InvalidAutomatonError(
                f"DFA already has a state for {list(key)} (index {self._index[key]})"
            )
        self._states.append(DFAState(key))
        self._index[key] = len(self._states) - 1
        return self._index[key]

    def index_of(self, states: Iterable[int]) -> Optional[int]:
        return self._index.get(canonical(states))

    def first_unmarked(self) -> Optional[int]:
        for i, st in enumerate(self._states):
            if not st.marked:
                return i
        return None

    def is_accepting(self, index: int) -> bool:
        return not self.nfa_accept_states.isdisjoint(self._states[index].states)

    @property
    def accept_states(self) -> List[int]:
        return [i for i in range(len(self._states)) if self.is_accepting(i)]

    def transition(self, index: int, symbol: str) -> Optional[int]:
        return self._states[index].moves.get(symbol)

    def accepts(self, word: Iterable[str]) -> bool:
        if not self._states:
            return False
        current = self.start_state
        for symbol in word:
            if symbol not in self.alphabet:
                return False
            current = self.transition(current, symbol)
            if current is None:
                return False
        return self.is_accepting(current)

    def get_stats(self) -> Dict:
        return {
            "states": len(self._states),
            "alphabet_size": len(self.alphabet),
            "accept_states": len(self.accept_states),
            "total_transitions": sum(
                1 for st in self._states for d in st.moves.values() if d is not None
            ),
        }
