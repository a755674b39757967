import argparse
import sys

from nfa2dfa.conversion import subset_construction
from nfa2dfa.parsing import read_nfa, write_dfa
from nfa2dfa.report import BANNER, format_dfa_table, format_nfa_info, format_summary, format_trace


def build_arg_parser():
    p = argparse.ArgumentParser(
        prog="nfa2dfa",
        description="Convert an NFA with epsilon moves into a DFA by subset construction.",
    )
    p.add_argument("input", help="NFA description (brace table text or .json)")
    p.add_argument("--in-format", choices=["text", "json"], help="Force input format (auto by extension)")
    p.add_argument("--no-trace", action="store_true", help="Do not print the closures and moves")
    p.add_argument("-o", "--output", help="Write the DFA as JSON to this file")
    p.add_argument("--plot", help="Draw the DFA to an image file (png, svg, pdf)")
    p.add_argument(
        "--check",
        nargs="+",
        metavar="WORD",
        help="Report whether each word is accepted (use '' for the empty word)",
    )
    return p


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        nfa = read_nfa(args.input, args.in_format)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\n{BANNER}\n")
    for line in format_nfa_info(nfa):
        print(line)
    print()

    dfa = subset_construction(nfa)

    if not args.no_trace:
        for line in format_trace(dfa):
            print(line)
        print()

    for line in format_summary(dfa):
        print(line)
    print(format_dfa_table(dfa))

    if args.check:
        print()
        for word in args.check:
            accepted = dfa.accepts(word)
            print(f"'{word}': {'accepted' if accepted else 'rejected'}")

    try:
        if args.output:
            write_dfa(dfa, args.output)
            print(f"\nDFA written to {args.output}")
        if args.plot:
            from nfa2dfa.visualization import plot_dfa

            plot_dfa(dfa, args.plot, title=f"DFA for {args.input}")
            print(f"DFA plot written to {args.plot}")
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nProgram interrupted by user")
        sys.exit(130)
