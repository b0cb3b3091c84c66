"""Script to generate board visualizations.

Run from the project root:
    python scripts/generate_board_vis.py [--seed N] [--turns N]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from data.loader import load_default_board, get_board_stats
from data.graph_vis import visualize_board, visualize_snapshot
from engine.config import MatchConfig
from engine.match_controller import MatchController


def generate_default_board_vis():
    """Generate visualization of default board before setup."""
    print("Loading default board...")
    board = load_default_board()

    stats = get_board_stats(board)
    print(f"Board has {stats['num_cities']} cities and {stats['num_connections']} connections")
    print(f"Cities by color: {stats['cities_by_color']}")

    output_path = project_root / "output" / "default_board_before_setup.png"
    output_path.parent.mkdir(exist_ok=True)

    print(f"Generating visualization -> {output_path}")
    fig = visualize_board(
        board,
        title="Pandemic - Default Board (Before Setup)",
        save_path=output_path,
        show=False,
    )
    print("Done!")
    return fig


def generate_match_vis(seed: int, turns: int):
    """Generate visualization of a seeded match after some passing turns."""
    print(f"\nStarting a seeded match (seed={seed})...")
    match = MatchController(MatchConfig(seed=seed))
    for name in ("ana", "ben", "cal"):
        match.add_player(name)
    match.start()
    print(match.snapshot())

    # Every player passes, draws and infects until the match ends
    for _ in range(turns):
        player = match.current_player
        if player is None:
            break
        player.start_turn()
        while player.actions_remaining:
            player.pass_action()
        player.finish_action_stage()
        player.draw_cards(2)
        if not match.is_in_progress:
            break
        while player.has_too_many_cards:
            player.discard_cards(player.hand[0])
        player.finish_draw_stage()
        player.draw_infection_cards()
        if not match.is_in_progress:
            break
        player.end_turn()

    snapshot = match.snapshot()
    print(snapshot)
    if match.is_over:
        print(f"Match {match.state.value}: {match.outcome_reason}")

    output_path = project_root / "output" / f"match_seed_{seed}.png"
    output_path.parent.mkdir(exist_ok=True)

    print(f"Generating visualization -> {output_path}")
    fig = visualize_snapshot(snapshot, save_path=output_path, show=False)
    print("Done!")
    return fig


if __name__ == "__main__":
    import matplotlib
    matplotlib.use("Agg")  # Non-interactive backend

    parser = argparse.ArgumentParser(description="Render Pandemic board images")
    parser.add_argument("--seed", type=int, default=7, help="Match seed")
    parser.add_argument("--turns", type=int, default=6, help="Passing turns to play")
    parser.add_argument("--verbose", action="store_true", help="Log engine events")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    generate_default_board_vis()
    generate_match_vis(args.seed, args.turns)

    print("\nVisualizations saved to output/ directory")
