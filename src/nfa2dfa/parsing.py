import itertools
import json
import os
import re
from typing import Dict, List, Set

from nfa2dfa.automaton import DFA, EPSILON, EPSILON_SYMBOLS, NFA, InvalidAutomatonError

OPENING_BRACKET = "{"
CLOSING_BRACKET = "}"
MAX_REPORTED_STATES = 10

_BRACE_SET = re.compile(r"\{([^{}]*)\}")


class NFAFormatError(InvalidAutomatonError):
    pass


def _fail(lineno: int, message: str):
    raise NFAFormatError(f"line {lineno}: {message}")


def _parse_state_list(body: str, lineno: int) -> List[int]:
    states = []
    body = body.strip()
    if not body:
        return states
    for item in body.split(","):
        item = item.strip()
        if not item.isdigit():
            _fail(lineno, f"non-numeric state '{item}' in {OPENING_BRACKET}{body}{CLOSING_BRACKET}")
        states.append(int(item))
    return states


def _brace_sets(text: str, lineno: int) -> List[List[int]]:
    if text.count(OPENING_BRACKET) != text.count(CLOSING_BRACKET):
        _fail(lineno, f"mismatched brackets in '{text.strip()}'")
    leftover = _BRACE_SET.sub(" ", text)
    if OPENING_BRACKET in leftover or CLOSING_BRACKET in leftover:
        _fail(lineno, f"mismatched brackets in '{text.strip()}'")
    return [_parse_state_list(m.group(1), lineno) for m in _BRACE_SET.finditer(text)]


def _labelled_value(line: str, lineno: int) -> str:
    if ":" not in line:
        _fail(lineno, f"expected 'Label: value', got '{line.strip()}'")
    return line.split(":", 1)[1]


def parse_text_nfa(text: str) -> NFA:
    """Parse the brace-delimited table format.

    Three header lines (initial state, final states, total states), a column
    header starting with ``State`` and one row per state. A column named ``E``
    holds the epsilon moves.
    """
    lines = [(n, line) for n, line in enumerate(text.splitlines(), start=1) if line.strip()]
    if len(lines) < 4:
        raise NFAFormatError(
            "expected initial state, final states, total states and a column header"
        )

    lineno, line = lines[0]
    start = _brace_sets(line, lineno)
    if len(start) != 1 or len(start[0]) != 1:
        _fail(lineno, "initial state must be a single state such as {1}")
    start_state = start[0][0]

    lineno, line = lines[1]
    finals = _brace_sets(line, lineno)
    if len(finals) != 1:
        _fail(lineno, "final states must be one list such as {3} or {2,5}")
    accept_states = set(finals[0])

    lineno, line = lines[2]
    total = _labelled_value(line, lineno).strip()
    if not total.isdigit():
        _fail(lineno, f"total states must be an integer, got '{total}'")
    total_states = int(total)

    lineno, line = lines[3]
    header = line.split()
    if header[0].lower() != "state":
        _fail(lineno, f"column header must start with 'State', got '{header[0]}'")
    columns = [EPSILON if sym in EPSILON_SYMBOLS else sym for sym in header[1:]]
    alphabet = [sym for sym in columns if sym != EPSILON]
    if not alphabet:
        _fail(lineno, "alphabet is empty")
    if len(set(columns)) != len(columns):
        _fail(lineno, f"duplicate symbols in column header {header[1:]}")

    transitions: Dict[int, Dict[str, Set[int]]] = {}
    seen: Set[int] = set()
    for lineno, line in lines[4:]:
        label, rest = (line.split(None, 1) + [""])[:2]
        if not label.isdigit():
            _fail(lineno, f"row must start with a state number, got '{label}'")
        state = int(label)
        if not 1 <= state <= total_states:
            _fail(lineno, f"state {state} outside 1..{total_states}")
        if state in seen:
            _fail(lineno, f"duplicate row for state {state}")
        seen.add(state)
        cells = _brace_sets(rest, lineno)
        if len(cells) != len(columns):
            _fail(lineno, f"expected {len(columns)} state lists, got {len(cells)}")
        if _BRACE_SET.sub("", rest).strip():
            _fail(lineno, f"unexpected text outside state lists in '{rest.strip()}'")
        row = {sym: set(dests) for sym, dests in zip(columns, cells) if dests}
        if row:
            transitions[state] = row

    missing_count = total_states - len(seen)
    if missing_count:
        missing = itertools.islice(
            (s for s in range(1, total_states + 1) if s not in seen), MAX_REPORTED_STATES
        )
        shown = ", ".join(str(s) for s in missing)
        more = ", ..." if missing_count > MAX_REPORTED_STATES else ""
        raise NFAFormatError(f"missing rows for {missing_count} states: {shown}{more}")

    return NFA(total_states, start_state, frozenset(accept_states), tuple(alphabet), transitions)


def parse_text_nfa_file(path: str) -> NFA:
    with open(path, "r", encoding="utf-8") as f:
        return parse_text_nfa(f.read())


def _state_id(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise NFAFormatError(f"{what} must be an integer state id, got {value!r}")
    return value


def nfa_from_json_dict(data: dict) -> NFA:
    try:
        start_state = _state_id(data["start_state"], "start_state")
        accept_states = {_state_id(s, "accept_states entry") for s in data.get("accept_states", [])}
        raw_trans = data.get("transitions", {})
        transitions: Dict[int, Dict[str, Set[int]]] = {}
        seen_symbols: Set[str] = set()
        for s, symbol_map in raw_trans.items():
            if not str(s).isdigit():
                raise NFAFormatError(f"transition source must be an integer state id, got {s!r}")
            for sym, dests in symbol_map.items():
                if not isinstance(dests, list):
                    dests = [dests]
                sym = EPSILON if sym in EPSILON_SYMBOLS else sym
                transitions.setdefault(int(s), {}).setdefault(sym, set()).update(
                    _state_id(d, f"destination of {s} --{sym}-->") for d in dests
                )
                if sym != EPSILON:
                    seen_symbols.add(sym)

        alphabet = data.get("alphabet")
        if alphabet is None:
            alphabet = sorted(seen_symbols)
        if not isinstance(alphabet, list) or not all(isinstance(sym, str) for sym in alphabet):
            raise NFAFormatError(f"alphabet must be a list of strings, got {alphabet!r}")
        if not alphabet:
            raise NFAFormatError("alphabet is empty")
        for sym in alphabet:
            if sym in EPSILON_SYMBOLS:
                raise NFAFormatError(f"alphabet must not contain epsilon, got '{sym}'")

        total_states = data.get("total_states")
        if total_states is None:
            mentioned = {start_state} | accept_states | set(transitions)
            for sym_map in transitions.values():
                for dests in sym_map.values():
                    mentioned |= dests
            total_states = max(mentioned)
        total_states = _state_id(total_states, "total_states")
    except KeyError as e:
        raise NFAFormatError(f"missing key {e}") from e
    except (TypeError, AttributeError) as e:
        raise NFAFormatError(f"malformed automaton description: {e}") from e

    return NFA(total_states, start_state, frozenset(accept_states), tuple(alphabet), transitions)


def parse_json_nfa(path: str) -> NFA:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise NFAFormatError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise NFAFormatError("top-level JSON value must be an object")
    return nfa_from_json_dict(data)


def detect_format_from_ext(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    if ext in (".json", ".jsn"):
        return "json"
    return "text"


def read_nfa(path: str, fmt: str = None) -> NFA:
    fmt = fmt or detect_format_from_ext(path)
    if fmt == "json":
        return parse_json_nfa(path)
    elif fmt == "text":
        return parse_text_nfa_file(path)
    else:
        raise ValueError(f"Unsupported format: {fmt}")


def dfa_to_json_dict(dfa: DFA) -> dict:
    trans_dict = {}
    for i, st in enumerate(dfa):
        out = {sym: dest for sym, dest in st.moves.items() if dest is not None}
        if out:
            trans_dict[str(i)] = out
    return {
        "start_state": dfa.start_state,
        "alphabet": list(dfa.alphabet),
        "accept_states": dfa.accept_states,
        "states": {str(i): list(st.states) for i, st in enumerate(dfa)},
        "transitions": trans_dict,
    }


def write_dfa(dfa: DFA, path: str) -> None:
    dirname = os.path.dirname(path)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(dfa_to_json_dict(dfa), f, ensure_ascii=False, indent=2)
