from typing import Dict, Tuple

import networkx as nx
from matplotlib.figure import Figure

from nfa2dfa.automaton import DFA
from nfa2dfa.report import format_state_set


def dfa_to_graph(dfa: DFA) -> nx.MultiDiGraph:
    G = nx.MultiDiGraph()
    for i, st in enumerate(dfa):
        G.add_node(
            i,
            label=f"{i}{format_state_set(st.states)}",
            accepting=dfa.is_accepting(i),
            start=(i == dfa.start_state),
        )
    for i, st in enumerate(dfa):
        for sym in dfa.alphabet:
            dest = st.moves.get(sym)
            if dest is not None:
                G.add_edge(i, dest, key=sym, label=sym)
    return G


class DFAVisualizer:
    def __init__(self, dfa: DFA):
        self.dfa = dfa
        self.graph = dfa_to_graph(dfa)

    def _edge_labels(self) -> Dict[Tuple[int, int], str]:
        edge_labels = {}
        for from_state, to_state, data in self.graph.edges(data=True):
            edge_key = (from_state, to_state)
            if edge_key in edge_labels:
                edge_labels[edge_key] = f"{edge_labels[edge_key]},{data['label']}"
            else:
                edge_labels[edge_key] = data["label"]
        return edge_labels

    def plot(self, ax, title="DFA", show_constituents=True):
        G = nx.DiGraph()
        G.add_nodes_from(self.graph.nodes(data=True))
        edge_labels = self._edge_labels()
        G.add_edges_from(edge_labels)

        if len(G.nodes) == 0:
            ax.text(0.5, 0.5, "Empty DFA", ha="center", va="center", transform=ax.transAxes)
            ax.set_title(title)
            return

        if len(G.nodes) <= 6:
            pos = nx.spring_layout(G, k=2.5, iterations=100, seed=42)
        else:
            pos = nx.spring_layout(G, k=1.5, iterations=50, seed=42)

        node_colors = []
        for node, data in G.nodes(data=True):
            if data["start"]:
                node_colors.append("lightgreen" if data["accepting"] else "lightblue")
            elif data["accepting"]:
                node_colors.append("lightcoral")
            else:
                node_colors.append("lightgray")

        node_size = min(2000, max(800, 15000 // max(len(G.nodes), 1)))
        nx.draw_networkx_nodes(G, pos, node_color=node_colors, node_size=node_size, ax=ax, alpha=0.9)
        nx.draw_networkx_labels(
            G,
            pos,
            labels={n: (d["label"] if show_constituents else str(n)) for n, d in G.nodes(data=True)},
            font_size=8,
            font_weight="bold",
            ax=ax,
        )
        nx.draw_networkx_edges(
            G,
            pos,
            edge_color="gray",
            arrows=True,
            arrowsize=15,
            arrowstyle="->",
            width=1.2,
            ax=ax,
            alpha=0.7,
        )
        nx.draw_networkx_edge_labels(G, pos, edge_labels=edge_labels, font_size=7, ax=ax)
        ax.set_title(title, fontsize=12, fontweight="bold")
        ax.axis("off")


def plot_dfa(dfa: DFA, path: str, title: str = "DFA") -> None:
    fig = Figure(figsize=(8, 6))
    ax = fig.subplots()
    DFAVisualizer(dfa).plot(ax, title)
    fig.tight_layout()
    fig.savefig(path)
