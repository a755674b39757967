from typing import Iterable, List

from nfa2dfa.automaton import DFA, NFA
from nfa2dfa.parsing import CLOSING_BRACKET, OPENING_BRACKET

BANNER = "************************\nNFA to DFA CONVERSION\n************************"
CELL_WIDTH = 9


def format_state_set(states: Iterable[int]) -> str:
    return OPENING_BRACKET + ",".join(str(s) for s in states) + CLOSING_BRACKET


def format_trace(dfa: DFA) -> List[str]:
    """Render ``dfa.steps`` as the classic hand-worked construction log."""
    lines = []
    marked = None
    for step in dfa.steps:
        if step.source is None:
            lines.append(f"E-closure(I0) = {format_state_set(step.closure)} = {step.target}")
            continue
        if step.source != marked:
            marked = step.source
            lines.append("")
            lines.append(f"Mark {marked}")
        if not step.moved:
            continue
        source = format_state_set(dfa[step.source].states)
        lines.append(f"{source} --{step.symbol}--> {format_state_set(step.moved)}")
        lines.append(
            f"E-closure{format_state_set(step.moved)} = "
            f"{format_state_set(step.closure)} = {step.target}"
        )
    return lines


def format_dfa_table(dfa: DFA) -> str:
    header = "State".ljust(CELL_WIDTH + 2) + "".join(
        sym.ljust(CELL_WIDTH) for sym in dfa.alphabet
    )
    rows = [header.rstrip()]
    for i, st in enumerate(dfa):
        cells = []
        for sym in dfa.alphabet:
            dest = st.moves.get(sym)
            cells.append(format_state_set([] if dest is None else [dest]).ljust(CELL_WIDTH))
        rows.append((str(i).ljust(CELL_WIDTH + 2) + "".join(cells)).rstrip())
    return "\n".join(rows)


def format_summary(dfa: DFA) -> List[str]:
    return [
        f"Initial State: {format_state_set([dfa.start_state])}",
        f"Final State(s): {format_state_set(dfa.accept_states)}",
    ]


def format_nfa_info(nfa: NFA) -> List[str]:
    stats = nfa.get_stats()
    return [
        f"NFA states: {stats['states']}, Alphabet: {list(nfa.alphabet)}",
        f"Start: {nfa.start_state} | Accepting: {format_state_set(sorted(nfa.accept_states))}",
        f"Transitions: {stats['total_transitions']} "
        f"({stats['epsilon_transitions']} epsilon)",
    ]
