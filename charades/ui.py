"""Terminal UI helpers using rich and questionary."""
from typing import List, Optional

import questionary
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from charades.categories import Category
from charades.player import Player, Team


console = Console()


def clear():
    """Clear the console."""
    console.clear()


def print_header(text: str, color: str = "cyan"):
    """Print a styled header."""
    console.print(f"\n[bold {color}]{'=' * 50}[/bold {color}]")
    console.print(f"[bold {color}]{text.center(50)}[/bold {color}]")
    console.print(f"[bold {color}]{'=' * 50}[/bold {color}]\n")


def print_categories(categories: List[Category]):
    """Print the available categories with their word counts."""
    console.print("[bold]CATEGORIES:[/bold]\n")
    for i, cat in enumerate(categories, 1):
        console.print(f"  [{i}] {cat.emoji} {cat.name:<20} [dim]{len(cat)} words[/dim]")
    console.print()


def print_scoreboard(teams: List[Team], active_team: Optional[Team] = None, round_num: int = 1,
                     total_rounds: int = 1):
    """Print team scores, marking whose turn it is."""
    table = Table(title=f"Round {min(round_num, total_rounds)}/{total_rounds}", box=box.ROUNDED)
    table.add_column("Team", style="green")
    table.add_column("Score", justify="right", style="yellow")
    table.add_column("Turn", justify="center")

    for team in teams:
        marker = "▶" if active_team is not None and team == active_team else ""
        table.add_row(f"[{team.color}]{team.name}[/{team.color}]", str(team.score), marker)

    console.print(table)
    console.print()


def print_player_score(player: Player, score: int):
    console.print(f"[{player.color}]{player.name}[/{player.color}]: [bold yellow]{score} pts[/bold yellow]")


def print_word(word: str):
    """Show the secret word in a panel."""
    console.print(Panel(f"[bold white]{word.upper()}[/bold white]",
                        title="🎭 Act it out!", border_style="magenta", expand=False))


def print_countdown(seconds_remaining: int):
    color = "red" if seconds_remaining <= 5 else "yellow" if seconds_remaining <= 15 else "cyan"
    console.print(f"[{color}]⏱  {seconds_remaining}s left[/{color}]")


def print_time_expired():
    console.print("\n[bold red]⏰ Time's up![/bold red]")


def print_turn(team: Team):
    console.print(f"\n[bold]Now playing:[/bold] [{team.color}]{team.name}[/{team.color}]")


def print_winner(winner: Optional[Team], teams: List[Team]):
    """Print the end-of-game panel."""
    if winner is None:
        console.print(Panel("[bold]Game over![/bold]", border_style="cyan", expand=False))
        return

    tied = [t for t in teams if t.score == winner.score]
    if len(tied) > 1:
        body = f"[bold yellow]Tie at {winner.score} pts![/bold yellow]\n{winner.name} takes it on turn order."
    else:
        body = f"[bold green]{winner.name} wins with {winner.score} pts![/bold green]"
    console.print(Panel(body, title="🏆 GAME OVER", border_style="green", expand=False))


def print_error(message: str):
    console.print(f"[red]{message}[/red]")


def select_option(choices: List[dict], prompt: str = "Choose an option:") -> Optional[str]:
    """Arrow-key selection over [{'name': ..., 'value': ...}] choices."""
    result = questionary.select(
        prompt,
        choices=[c["name"] for c in choices],
        use_indicator=True,
        use_shortcuts=False,
    ).ask()

    for c in choices:
        if c["name"] == result:
            return c["value"]
    return None


def select_main_menu() -> str:
    """Main menu: solo, teams or quit."""
    choices = [
        {"name": "Solo game", "value": "solo"},
        {"name": "Team game", "value": "teams"},
        {"name": "Quit", "value": "quit"},
    ]
    return select_option(choices) or "quit"


def ask_name(prompt: str) -> str:
    """Ask for a name. Empty answers are returned as-is."""
    result = questionary.text(prompt).ask()
    return (result or "").strip()


def select_category(categories: List[Category]) -> Optional[str]:
    """Pick a category by name."""
    choices = [{"name": str(cat), "value": cat.name} for cat in categories]
    return select_option(choices, "Pick a category:")


def turn_action_choices(team_mode: bool, time_up: bool) -> List[dict]:
    """Actions offered while a turn is running."""
    choices = []
    if not time_up:
        choices.append({"name": "✅ Guessed it!", "value": "guess"})
    if team_mode:
        choices.append({"name": "⏭  Pass to next team", "value": "pass"})
    choices.append({"name": "🔀 New word, restart clock", "value": "restart"})
    choices.append({"name": "🏠 Back to menu", "value": "menu"})
    return choices


async def select_turn_action(team_mode: bool, time_up: bool) -> str:
    """In-turn menu. Asked asynchronously so the countdown keeps ticking."""
    choices = turn_action_choices(team_mode, time_up)
    result = await questionary.select(
        "What happened?",
        choices=[c["name"] for c in choices],
        use_indicator=True,
        use_shortcuts=False,
    ).ask_async(patch_stdout=True)

    for c in choices:
        if c["name"] == result:
            return c["value"]
    return "menu"
