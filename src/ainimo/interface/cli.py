"""
Ainimo command line.

One command per invocation against a save slot:

    ainimo new
    ainimo act study
    ainimo chat "good morning"
    ainimo play quiz
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.prompt import IntPrompt
from rich.table import Table

from ..config import load_config, set_slot
from ..state.manager import CompanionManager
from ..state.schema import ActionType, GameParameters, IntelligenceTier, ItemCategory, MiniGameType, MoodType
from ..state.schemas.minigame import MemorySession, PuzzleSession, QuizSession
from ..state.schemas.personality import PersonalityState
from ..systems.attributes import get_mood_type
from ..systems.personality import get_personality_name
from ..systems.quiz_game import is_question_expired
from .panels import (
    render_achievements_panel,
    render_games_panel,
    render_inventory_panel,
    render_personality_panel,
    render_result_panel,
    render_status_panel,
)

logger = logging.getLogger(__name__)

console = Console()

MOOD_REPLIES = {
    MoodType.HAPPY: "*bounces happily* I love talking with you!",
    MoodType.NORMAL: "Mm-hm, tell me more.",
    MoodType.TIRED: "*yawns* Sorry... I'm listening.",
    MoodType.SAD: "...thanks for talking to me.",
}


def mood_responder(
    text: str,
    params: GameParameters,
    tier: IntelligenceTier,
    personality: PersonalityState,
) -> str:
    """Minimal offline reply chosen by mood."""
    return MOOD_REPLIES[get_mood_type(params.mood)]


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

def cmd_new(manager: CompanionManager, args) -> int:
    if manager.store.exists(manager.slot) and not args.force:
        console.print(f"[red]Slot '{manager.slot}' already has a save. Use --force to replace it.[/red]")
        return 1
    manager.new_game()
    console.print("[green]A new companion has hatched![/green]")
    console.print(render_status_panel(manager.current, manager.clock()))
    return 0


def cmd_status(manager: CompanionManager, args) -> int:
    console.print(render_status_panel(manager.current, manager.clock()))
    return 0


def cmd_act(manager: CompanionManager, args) -> int:
    outcome = manager.perform(args.action)
    if not outcome.succeeded:
        if outcome.reason == "rest_limit":
            console.print("[yellow]No rests left today.[/yellow]")
        else:
            console.print("[yellow]Too tired for that. Try resting first.[/yellow]")
        return 1

    console.print(f"[green]{args.action.capitalize()} done.[/green]")
    if outcome.leveled_up:
        console.print(f"[bold yellow]Level up! Now level {manager.current.parameters.level}.[/bold yellow]")
    if outcome.personality_locked is not None:
        name = get_personality_name(outcome.personality_locked)
        console.print(f"[bold magenta]Personality settled for good: {name}[/bold magenta]")
    console.print(render_status_panel(manager.current, manager.clock()))
    return 0


def cmd_chat(manager: CompanionManager, args) -> int:
    result = manager.chat(" ".join(args.text), responder=mood_responder)
    if result is None:
        console.print("[yellow]Say something first.[/yellow]")
        return 1
    console.print(f"[cyan]Ainimo:[/cyan] {result.reply}")
    if not result.outcome.succeeded:
        console.print("[dim](too tired to learn anything from that)[/dim]")
    return 0


def cmd_personality(manager: CompanionManager, args) -> int:
    console.print(render_personality_panel(
        manager.personality_state,
        manager.current.personality.total_actions,
    ))
    return 0


def cmd_achievements(manager: CompanionManager, args) -> int:
    console.print(render_achievements_panel(manager.current, show_secret=args.show_secret))
    return 0


def cmd_games(manager: CompanionManager, args) -> int:
    gates = {game_type: manager.can_play(game_type) for game_type in MiniGameType}
    console.print(render_games_panel(manager.current, gates))
    return 0


def cmd_title(manager: CompanionManager, args) -> int:
    title_id = None if args.clear else args.achievement_id
    if title_id is None and not args.clear:
        console.print("[red]Give an achievement id or --clear.[/red]")
        return 1
    if not manager.select_title(title_id):
        console.print("[yellow]That title is not unlocked (or already selected).[/yellow]")
        return 1
    console.print("[green]Title updated.[/green]")
    return 0


def cmd_inventory(manager: CompanionManager, args) -> int:
    console.print(render_inventory_panel(manager.current))
    return 0


def cmd_equip(manager: CompanionManager, args) -> int:
    if args.unequip:
        changed = manager.unequip(ItemCategory(args.item))
    else:
        changed = manager.equip(args.item)
    if not changed:
        console.print("[yellow]Nothing changed.[/yellow]")
        return 1
    console.print(render_inventory_panel(manager.current))
    return 0


def cmd_buy(manager: CompanionManager, args) -> int:
    if not manager.buy_item(args.item):
        console.print("[yellow]Unknown item or not enough coins.[/yellow]")
        return 1
    console.print(render_inventory_panel(manager.current))
    return 0


# --- Interactive games ---

def _play_quiz(manager: CompanionManager, session: QuizSession) -> None:
    while not session.is_complete:
        question = session.current_question
        console.print(f"\n[bold]{question.question}[/bold]")
        for i, option in enumerate(question.options, start=1):
            console.print(f"  {i}. {option}")
        choice = IntPrompt.ask("Answer", default=0)
        if is_question_expired(session, manager.clock()):
            console.print("[red]Too slow![/red]")
            session = manager.timeout_question()
        else:
            session = manager.answer_question(choice - 1)


def _play_memory(manager: CompanionManager, session: MemorySession) -> None:
    while not session.is_complete:
        _print_cards(session)
        first = IntPrompt.ask("First card") - 1
        session = manager.flip_card(first)
        second = IntPrompt.ask("Second card") - 1
        session = manager.flip_card(second)
        if len(session.flipped_indices) == 2:
            _print_cards(session)
            console.print("[yellow]No match.[/yellow]")
            session = manager.reset_cards()


def _print_cards(session: MemorySession) -> None:
    cells = []
    for i, card in enumerate(session.cards, start=1):
        cells.append(card.symbol if card.is_flipped or card.is_matched else f"{i:>2}")
    console.print("  ".join(cells))


def _play_puzzle(manager: CompanionManager, session: PuzzleSession) -> None:
    while not session.is_complete:
        grid = Table.grid(padding=(0, 1))
        for row in range(session.grid_size):
            start = row * session.grid_size
            grid.add_row(*[
                "  " if tile == 0 else f"{tile:>2}"
                for tile in session.tiles[start:start + session.grid_size]
            ])
        console.print(grid)
        tile = IntPrompt.ask("Tile to slide")
        if tile in session.tiles and tile != 0:
            session = manager.move_tile(session.tiles.index(tile))


INTERACTIVE_GAMES = {
    MiniGameType.QUIZ: _play_quiz,
    MiniGameType.MEMORY: _play_memory,
    MiniGameType.PUZZLE: _play_puzzle,
}


def cmd_play(manager: CompanionManager, args) -> int:
    game_type = MiniGameType(args.game)
    gate = manager.can_play(game_type)
    if not gate.can_play:
        if gate.reason == "cooldown":
            console.print(f"[yellow]Cooling down for {gate.cooldown_remaining // 1000}s.[/yellow]")
        else:
            console.print(f"[yellow]Needs {gate.energy_required} energy.[/yellow]")
        return 1

    session = manager.start_game(game_type)
    try:
        INTERACTIVE_GAMES[game_type](manager, session)
    except (KeyboardInterrupt, EOFError):
        manager.cancel_game()
        console.print("\n[dim]Game cancelled.[/dim]")
        return 1

    result = manager.end_game()
    console.print(render_result_panel(result))
    return 0


COMMANDS = {
    "new": cmd_new,
    "status": cmd_status,
    "act": cmd_act,
    "chat": cmd_chat,
    "personality": cmd_personality,
    "achievements": cmd_achievements,
    "games": cmd_games,
    "play": cmd_play,
    "title": cmd_title,
    "inventory": cmd_inventory,
    "equip": cmd_equip,
    "buy": cmd_buy,
}


def show_notifications(manager: CompanionManager) -> None:
    """Print every unlock the player has not seen yet."""
    while (achievement := manager.consume_notification()) is not None:
        console.print(f"[bold yellow]🏆 Achievement unlocked: {achievement.name}[/bold yellow]")


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ainimo", description="Ainimo - raise a virtual companion")
    parser.add_argument("--saves-dir", help="Directory holding saves and config")
    parser.add_argument("--slot", help="Save slot to use")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    new = sub.add_parser("new", help="Start a new companion")
    new.add_argument("--force", action="store_true", help="Replace an existing save")

    sub.add_parser("status", help="Show level and stats")

    act = sub.add_parser("act", help="Talk, study, play or rest")
    act.add_argument("action", choices=[a.value for a in ActionType])

    chat = sub.add_parser("chat", help="Send a message")
    chat.add_argument("text", nargs="+")

    sub.add_parser("personality", help="Show personality")

    achievements = sub.add_parser("achievements", help="List achievements")
    achievements.add_argument("--show-secret", action="store_true", help="Reveal secret achievements")

    sub.add_parser("games", help="Mini-game records and readiness")

    play = sub.add_parser("play", help="Play a mini-game in the terminal")
    play.add_argument("game", choices=[g.value for g in INTERACTIVE_GAMES])

    title = sub.add_parser("title", help="Pick the title shown next to the name")
    title.add_argument("achievement_id", nargs="?")
    title.add_argument("--clear", action="store_true")

    sub.add_parser("inventory", help="Coins and items")

    equip = sub.add_parser("equip", help="Equip an owned item (or --unequip a slot)")
    equip.add_argument("item", help="Item id, or slot name with --unequip")
    equip.add_argument("--unequip", action="store_true")

    buy = sub.add_parser("buy", help="Buy an item with coins")
    buy.add_argument("item")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.saves_dir or "saves")
    saves_dir = Path(args.saves_dir or config.get("saves_dir", "saves"))
    slot = args.slot or config.get("slot", "default")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.get("log_level", "WARNING"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if args.command == "achievements" and config.get("show_secret_achievements"):
        args.show_secret = True

    manager = CompanionManager(saves_dir, slot=slot)

    if args.command != "new" and manager.load() is None:
        console.print(f"[red]No save in slot '{slot}'. Run 'ainimo new' first.[/red]")
        return 1

    code = COMMANDS[args.command](manager, args)
    if manager.current is not None:
        show_notifications(manager)
    if args.slot:
        set_slot(args.slot, saves_dir)
    return code


if __name__ == "__main__":
    sys.exit(main())
