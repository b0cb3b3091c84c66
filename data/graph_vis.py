"""Graph visualization for the Pandemic city board using NetworkX and matplotlib.

Provides visualization of:
- Board topology (cities and their connections)
- Native disease color of each city
- Disease cubes per city (colored by disease)
- Research stations
- Player pawn locations
"""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path
from typing import Any, Optional

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import networkx as nx

from core.board import CityBoard, CityName
from core.constants import DiseaseColor
from core.game_state import MatchSnapshot


# Color schemes
DISEASE_COLORS = {
    DiseaseColor.RED: "#E63946",
    DiseaseColor.YELLOW: "#E9C46A",
    DiseaseColor.BLUE: "#457B9D",
    DiseaseColor.BLACK: "#333333",
}

PAWN_COLORS = [
    "#2A9D8F",  # Teal
    "#9B5DE5",  # Purple
    "#F15BB5",  # Pink
    "#00BBF9",  # Sky
]

STATION_COLOR = "#FFFFFF"

# Connections spanning more than this horizontal distance wrap around the map
WRAP_DISTANCE = 180


class BoardVisualizer:
    """Visualizes a Pandemic city board using NetworkX and matplotlib."""

    def __init__(
        self,
        board: CityBoard,
        pawns: Optional[dict[str, CityName]] = None,
        figsize: tuple[int, int] = (16, 9),
        node_size: int = 220,
        font_size: int = 7,
    ):
        """Initialize the visualizer.

        Args:
            board: The CityBoard to visualize.
            pawns: Mapping from player name to the city the pawn stands in.
            figsize: Figure size as (width, height).
            node_size: Base size for city markers.
            font_size: Font size for labels.
        """
        self.board = board
        self.pawns = pawns or {}
        self.figsize = figsize
        self.node_size = node_size
        self.font_size = font_size
        self._graph: Optional[nx.Graph] = None

    def _build_networkx_graph(self) -> nx.Graph:
        """Convert CityBoard to NetworkX graph."""
        G = nx.Graph()

        for name, city in self.board.cities.items():
            G.add_node(
                name,
                pos=city.position,
                color=city.color,
                cubes=dict(city.cubes),
                has_research_station=city.has_research_station,
            )

        for name, neighbours in self.board.adjacency.items():
            for neighbour in neighbours:
                G.add_edge(name, neighbour)

        return G

    def _get_positions(self, G: nx.Graph) -> dict[CityName, tuple[float, float]]:
        """Use the map coordinates from the board data, or a seeded layout if any are missing."""
        pos = nx.get_node_attributes(G, "pos")
        if len(G) and all(pos.get(name) is not None for name in G.nodes()):
            return pos
        return nx.spring_layout(G, seed=0, scale=100)

    def _get_node_colors(self, G: nx.Graph) -> list[str]:
        """Determine city colors from their native disease color."""
        colors = []
        for name in G.nodes():
            color = G.nodes[name]["color"]
            colors.append(DISEASE_COLORS[color] if color is not None else "#CCCCCC")
        return colors

    def _draw_edges(
        self,
        ax: plt.Axes,
        G: nx.Graph,
        pos: dict[CityName, tuple[float, float]],
    ) -> None:
        """Draw connections, dashing the ones that wrap around the map."""
        direct_edges = []
        wrap_edges = []
        for u, v in G.edges():
            if abs(pos[u][0] - pos[v][0]) > WRAP_DISTANCE:
                wrap_edges.append((u, v))
            else:
                direct_edges.append((u, v))

        nx.draw_networkx_edges(G, pos, edgelist=direct_edges, edge_color="#AAAAAA", width=1.2, ax=ax)
        if wrap_edges:
            nx.draw_networkx_edges(
                G, pos,
                edgelist=wrap_edges,
                edge_color="#DDDDDD",
                width=1,
                style="dashed",
                ax=ax,
            )

    def _draw_cubes(
        self,
        ax: plt.Axes,
        G: nx.Graph,
        pos: dict[CityName, tuple[float, float]],
    ) -> None:
        """Draw one small square per disease cube next to each city."""
        for name in G.nodes():
            x, y = pos[name]
            offset = 0
            for color in DiseaseColor:
                for _ in range(G.nodes[name]["cubes"].get(color, 0)):
                    ax.scatter(
                        [x + 2.5 + offset * 1.8], [y + 2.5],
                        marker="s",
                        s=30,
                        c=DISEASE_COLORS[color],
                        edgecolors="black",
                        linewidths=0.5,
                        zorder=5,
                    )
                    offset += 1

    def _draw_research_stations(
        self,
        ax: plt.Axes,
        G: nx.Graph,
        pos: dict[CityName, tuple[float, float]],
    ) -> None:
        stations = [name for name in G.nodes() if G.nodes[name]["has_research_station"]]
        if not stations:
            return
        ax.scatter(
            [pos[name][0] for name in stations],
            [pos[name][1] - 3 for name in stations],
            marker="^",
            s=90,
            c=STATION_COLOR,
            edgecolors="black",
            linewidths=1,
            zorder=6,
        )

    def _draw_pawns(
        self,
        ax: plt.Axes,
        pos: dict[CityName, tuple[float, float]],
    ) -> None:
        """Draw player pawns, stacking several pawns in one city."""
        by_city: dict[CityName, list[str]] = defaultdict(list)
        for player_name, city in self.pawns.items():
            if city in pos:
                by_city[city].append(player_name)

        for i, player_name in enumerate(self.pawns):
            city = self.pawns[player_name]
            if city not in pos:
                continue
            x, y = pos[city]
            slot = by_city[city].index(player_name)
            ax.scatter(
                [x - 3 - slot * 2.2], [y + 2.5],
                marker="o",
                s=60,
                c=PAWN_COLORS[i % len(PAWN_COLORS)],
                edgecolors="black",
                linewidths=1,
                zorder=7,
            )

    def visualize(
        self,
        title: str = "Pandemic Board",
        show_cubes: bool = True,
        show_stations: bool = True,
        show_pawns: bool = True,
        show_legend: bool = True,
        save_path: Optional[str | Path] = None,
        show: bool = True,
    ) -> plt.Figure:
        """Visualize the board.

        Args:
            title: Title for the figure.
            show_cubes: Whether to show disease cubes.
            show_stations: Whether to show research stations.
            show_pawns: Whether to show player pawns.
            show_legend: Whether to show the legend.
            save_path: If provided, save the figure to this path.
            show: Whether to display the figure.

        Returns:
            The matplotlib Figure object.
        """
        G = self._build_networkx_graph()
        self._graph = G
        pos = self._get_positions(G)

        fig, ax = plt.subplots(figsize=self.figsize)
        ax.set_title(title, fontsize=14, fontweight="bold")

        # Draw edges first (behind cities)
        self._draw_edges(ax, G, pos)

        nx.draw_networkx_nodes(
            G, pos,
            node_color=self._get_node_colors(G),
            edgecolors="black",
            linewidths=1,
            node_size=self.node_size,
            ax=ax,
        )

        label_pos = {name: (x, y - 5) for name, (x, y) in pos.items()}
        nx.draw_networkx_labels(G, label_pos, font_size=self.font_size, ax=ax)

        if show_cubes:
            self._draw_cubes(ax, G, pos)

        if show_stations:
            self._draw_research_stations(ax, G, pos)

        if show_pawns and self.pawns:
            self._draw_pawns(ax, pos)

        if show_legend:
            self._draw_legend(ax)

        ax.axis("off")
        plt.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches="tight")

        if show:
            plt.show()

        return fig

    def _draw_legend(self, ax: plt.Axes) -> None:
        """Draw the legend."""
        legend_elements = []

        for color, hex_color in DISEASE_COLORS.items():
            legend_elements.append(
                mpatches.Patch(facecolor=hex_color, edgecolor="black", label=color.value.capitalize())
            )

        legend_elements.append(
            plt.Line2D([0], [0], marker="^", color="w", markerfacecolor=STATION_COLOR,
                       markersize=10, markeredgecolor="black", label="Research Station")
        )

        for i, player_name in enumerate(self.pawns):
            legend_elements.append(
                plt.Line2D([0], [0], marker="o", color="w",
                           markerfacecolor=PAWN_COLORS[i % len(PAWN_COLORS)],
                           markersize=8, markeredgecolor="black", label=player_name)
            )

        ax.legend(
            handles=legend_elements,
            loc="upper left",
            bbox_to_anchor=(1.02, 1),
            fontsize=8,
        )


def visualize_board(
    board: CityBoard,
    title: str = "Pandemic Board",
    pawns: Optional[dict[str, CityName]] = None,
    save_path: Optional[str | Path] = None,
    show: bool = True,
    **kwargs: Any,
) -> plt.Figure:
    """Convenience function to visualize a board.

    Args:
        board: The CityBoard to visualize.
        title: Title for the figure.
        pawns: Mapping from player name to city.
        save_path: If provided, save the figure to this path.
        show: Whether to display the figure.
        **kwargs: Additional arguments passed to BoardVisualizer.visualize()

    Returns:
        The matplotlib Figure object.
    """
    visualizer = BoardVisualizer(board, pawns=pawns)
    return visualizer.visualize(title=title, save_path=save_path, show=show, **kwargs)


def visualize_snapshot(
    snapshot: MatchSnapshot,
    save_path: Optional[str | Path] = None,
    show: bool = True,
) -> plt.Figure:
    """Visualize a match snapshot, with every player's pawn on the board."""
    pawns = {player["name"]: player["location"] for player in snapshot.players}
    title = (
        f"Pandemic ({snapshot.state.value}) - outbreaks {snapshot.outbreaks}, "
        f"infection rate {snapshot.infection_rate}"
    )
    return visualize_board(snapshot.board, title=title, pawns=pawns, save_path=save_path, show=show)


def visualize_default_board(
    save_path: Optional[str | Path] = None,
    show: bool = True,
) -> plt.Figure:
    """Load and visualize the default board before setup."""
    from data.loader import load_default_board

    board = load_default_board()
    return visualize_board(
        board,
        title="Default Pandemic Board (Before Setup)",
        save_path=save_path,
        show=show,
    )


if __name__ == "__main__":
    # When run directly, visualize the default board
    visualize_default_board(save_path="default_board_vis.png")
