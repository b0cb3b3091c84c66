"""Data loading and visualization utilities for the Pandemic simulation engine."""

from .loader import (
    CityLoader,
    CardLoader,
    CardSet,
    DataLoadError,
    load_board,
    load_default_board,
    load_cards,
    load_default_cards,
    validate_cards,
    get_board_stats,
)

from .graph_vis import (
    BoardVisualizer,
    visualize_board,
    visualize_snapshot,
    visualize_default_board,
)

__all__ = [
    # Loader
    "CityLoader",
    "CardLoader",
    "CardSet",
    "DataLoadError",
    "load_board",
    "load_default_board",
    "load_cards",
    "load_default_cards",
    "validate_cards",
    "get_board_stats",
    # Visualization
    "BoardVisualizer",
    "visualize_board",
    "visualize_snapshot",
    "visualize_default_board",
]
