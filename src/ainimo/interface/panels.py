"""
Ainimo panel rendering.

rich renderables for the companion's status, personality, achievements,
mini-game records and inventory. Everything reads plain state; nothing
here changes it.
"""
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..clock import MS_PER_SECOND
from ..state.schema import GameState, MiniGameType, MoodType
from ..state.schemas.minigame import CanPlayResult, GameResult
from ..state.schemas.personality import PersonalityState
from ..systems.achievement_catalog import ACHIEVEMENTS, get_achievement
from ..systems.achievements import calculate_progress
from ..systems.attributes import XP_PER_LEVEL, get_mood_type, get_tier, remaining_rest_count
from ..systems.items import get_item
from ..systems.personality import (
    AFFINITY_ORDER,
    get_actions_until_personality,
    get_personality_description,
    get_personality_name,
)

PANEL_STYLE = {
    "style": "on #001100",
    "border_style": "blue",
    "padding": (0, 1),
    "title_align": "left",
}

MOOD_COLORS = {
    MoodType.HAPPY: "bright_green",
    MoodType.NORMAL: "white",
    MoodType.TIRED: "yellow",
    MoodType.SAD: "red",
}

RARITY_COLORS = {
    "common": "white",
    "uncommon": "green",
    "rare": "cyan",
    "epic": "magenta",
    "legendary": "yellow",
}


def render_status_panel(state: GameState, now: int | None = None) -> Panel:
    """
    Level, xp and the stat bars:
    - Tier and mood type
    - Rests left today
    - Coins and selected title
    """
    params = state.parameters
    tier = get_tier(params.intelligence)
    mood_type = get_mood_type(params.mood)
    mood_color = MOOD_COLORS[mood_type]

    header = [
        f"[bold cyan]Lv {params.level}[/bold cyan]",
        f"XP {params.xp}/{XP_PER_LEVEL}",
        f"[magenta]{tier.value.upper()}[/magenta]",
        f"Mood: [{mood_color}]{mood_type.value}[/{mood_color}]",
        f"Rests left: {remaining_rest_count(state.rest_limit, now)}",
        f"Coins: [yellow]{state.inventory.coins}[/yellow]",
    ]
    if state.achievements.selected_title_id:
        achievement = get_achievement(state.achievements.selected_title_id)
        if achievement is not None and achievement.title:
            header.append(f"[italic]\"{achievement.title}\"[/italic]")

    table = Table.grid(padding=(0, 2))
    table.add_column(justify="left", width=14)
    table.add_column(justify="left")
    table.add_column(justify="right", width=4)
    for stat in ("intelligence", "memory", "friendliness", "energy", "mood"):
        value = getattr(params, stat)
        table.add_row(f"[cyan]{stat.capitalize()}[/cyan]", create_stat_bar(value), str(value))

    body = Table.grid()
    body.add_row(Text.from_markup(" │ ".join(header)))
    body.add_row(table)
    return Panel(body, title="[bold]AINIMO[/bold]", **PANEL_STYLE)


def render_personality_panel(state: PersonalityState, total_actions: int) -> Panel:
    """Personality type, strength and the four affinity shares."""
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="left", width=10)
    table.add_column(justify="left", width=12)
    table.add_column(justify="right")

    for key in AFFINITY_ORDER:
        share = getattr(state.affinity_scores, key.value)
        table.add_row(f"[cyan]{key.value}[/cyan]", create_stat_bar(share), f"{share:.0f}%")

    lines = [f"[bold]{get_personality_name(state.type)}[/bold]"]
    remaining = get_actions_until_personality(total_actions)
    if remaining:
        lines.append(f"[dim]{remaining} more actions until a personality emerges[/dim]")
    else:
        lines.append(f"Strength: {state.strength:.0f}  Resistance: {state.resistance:.0f}")
    if state.is_locked:
        lines.append("[yellow]Locked[/yellow]")
    lines.append(f"[dim]{get_personality_description(state.type)}[/dim]")

    body = Table.grid()
    body.add_row(Text.from_markup("\n".join(lines)))
    body.add_row(table)
    return Panel(body, title="[bold]PERSONALITY[/bold]", **PANEL_STYLE)


def render_achievements_panel(state: GameState, show_secret: bool = False) -> Panel:
    """Every achievement with unlock status or progress."""
    unlocked = state.achievements.unlocked_ids

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("")
    table.add_column("Achievement")
    table.add_column("Rarity")
    table.add_column("Progress", justify="right")

    for achievement in ACHIEVEMENTS:
        done = achievement.id in unlocked
        if achievement.is_secret and not done and not show_secret:
            table.add_row("[dim]?[/dim]", "[dim]???[/dim]", "", "")
            continue
        progress = 100 if done else calculate_progress(
            achievement.condition,
            state.achievements.stats,
            state.parameters,
            len(unlocked),
        )
        color = RARITY_COLORS[achievement.rarity.value]
        table.add_row(
            "[green]✔[/green]" if done else " ",
            achievement.name,
            f"[{color}]{achievement.rarity.value}[/{color}]",
            f"{progress}%",
        )

    title = f"[bold]ACHIEVEMENTS[/bold] {len(unlocked)}/{len(ACHIEVEMENTS)}"
    return Panel(table, title=title, **PANEL_STYLE)


def render_games_panel(state: GameState, gates: dict[MiniGameType, CanPlayResult]) -> Panel:
    """High scores and whether each game can be started now."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("Game")
    table.add_column("High", justify="right")
    table.add_column("Plays", justify="right")
    table.add_column("Wins", justify="right")
    table.add_column("Status")

    for game_type in MiniGameType:
        score = state.mini_games.score_for(game_type)
        table.add_row(
            f"[cyan]{game_type.value}[/cyan]",
            str(score.high_score),
            str(score.total_plays),
            str(score.total_wins),
            format_gate(gates[game_type]),
        )
    return Panel(table, title="[bold]MINI-GAMES[/bold]", **PANEL_STYLE)


def render_result_panel(result: GameResult) -> Panel:
    color = "green" if result.success else "yellow"
    lines = [
        f"[{color}]Score {result.score}/{result.max_score}[/{color}]",
        f"+{result.xp_earned} XP  +{result.coins_earned} coins",
    ]
    if result.new_high_score:
        lines.append("[bold yellow]New high score![/bold yellow]")
    if result.item_dropped:
        item = get_item(result.item_dropped)
        lines.append(f"Found: [magenta]{item.name if item else result.item_dropped}[/magenta]")
    return Panel(
        Text.from_markup("\n".join(lines)),
        title=f"[bold]{result.game_type.value.upper()}[/bold]",
        **PANEL_STYLE,
    )


def render_inventory_panel(state: GameState) -> Panel:
    inventory = state.inventory
    equipped = {
        inventory.equipped.hat,
        inventory.equipped.accessory,
        inventory.equipped.background,
    }

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("Item")
    table.add_column("Slot")
    table.add_column("Rarity")
    table.add_column("")
    for owned in inventory.items:
        item = get_item(owned.item_id)
        if item is None:
            continue
        color = RARITY_COLORS[item.rarity.value]
        table.add_row(
            item.name,
            item.category.value,
            f"[{color}]{item.rarity.value}[/{color}]",
            "[green]equipped[/green]" if item.id in equipped else "",
        )

    title = f"[bold]INVENTORY[/bold] [yellow]{inventory.coins} coins[/yellow]"
    if not inventory.items:
        return Panel(Text.from_markup("[dim]No items yet[/dim]"), title=title, **PANEL_STYLE)
    return Panel(table, title=title, **PANEL_STYLE)


# --- Helper Functions ---

def create_stat_bar(value: float, width: int = 10) -> str:
    """Visual bar for a 0-100 value."""
    filled_count = max(0, min(width, int(value / 100 * width)))
    filled = "▰" * filled_count
    empty = "▱" * (width - filled_count)

    if value >= 70:
        color = "green"
    elif value >= 30:
        color = "white"
    else:
        color = "red"
    return f"[{color}]{filled}{empty}[/{color}]"


def format_gate(gate: CanPlayResult) -> str:
    if gate.can_play:
        return "[green]ready[/green]"
    if gate.reason == "cooldown":
        seconds = -(-gate.cooldown_remaining // MS_PER_SECOND)
        return f"[yellow]cooldown {seconds}s[/yellow]"
    return f"[red]needs {gate.energy_required} energy[/red]"
