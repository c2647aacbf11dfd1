"""
CHARADES - A party word-guessing game

Solo players or two teams act out secret words from a category while
the clock runs down. Every correct guess scores a point.
"""
import sys
import io

# Fix Windows console encoding for emojis
if sys.platform == 'win32':
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import argparse
import asyncio
import logging
from typing import Optional

from rich.logging import RichHandler

from charades import ui
from charades.config_loader import ConfigLoader
from charades.errors import GameError
from charades.events import SessionListener
from charades.session import GameSession, SessionState

logger = logging.getLogger("charades.cli")


class ConsoleListener(SessionListener):
    """Renders session notifications on the rich console."""

    def __init__(self, announce_every: int = 10, final_countdown: int = 5):
        self.announce_every = max(1, announce_every)
        self.final_countdown = final_countdown
        self.last_score: Optional[int] = None
        self.time_up = asyncio.Event()

    def on_player_registered(self, player):
        ui.console.print(f"[{player.color}]Welcome, {player.name}![/{player.color}]")

    def on_word_changed(self, word):
        self.time_up.clear()
        ui.print_word(word)

    def on_tick(self, seconds_remaining):
        if seconds_remaining % self.announce_every == 0 or seconds_remaining <= self.final_countdown:
            ui.print_countdown(seconds_remaining)

    def on_time_expired(self):
        self.time_up.set()
        ui.print_time_expired()

    def on_score_changed(self, score):
        if score != self.last_score:
            ui.console.print(f"[bold yellow]Score: {score}[/bold yellow]")
        self.last_score = score

    def on_turn_changed(self, team):
        self.last_score = None
        ui.print_turn(team)

    def on_session_ended(self, winner):
        self.time_up.set()


def create_listener() -> ConsoleListener:
    settings = ConfigLoader()
    return ConsoleListener(
        announce_every=settings.get('ui', 'announce_every', default=10),
        final_countdown=settings.get('ui', 'final_countdown', default=5),
    )


def setup_session(mode: str, args) -> Optional[GameSession]:
    """Collect names and a category, then build the session."""
    session = GameSession(total_rounds=args.rounds, round_duration=args.duration)
    listener = create_listener()
    session.set_observer(listener)

    ui.clear()
    ui.print_header("CHARADES")

    if mode == 'solo':
        while True:
            try:
                session.register_player(ui.ask_name("Your name:"))
                break
            except GameError as e:
                ui.print_error(str(e))
    else:
        name_a = ui.ask_name("First team name (blank for default):")
        name_b = ui.ask_name("Second team name (blank for default):")
        session.create_teams(name_a, name_b)

    ui.print_categories(session.categories.get_all())
    category_name = ui.select_category(session.categories.get_all())
    if category_name is None:
        session.set_observer(None)
        return None
    session.select_category(category_name)
    return session


async def wait_for_action(listener: ConsoleListener, team_mode: bool, time_up: bool) -> str:
    """Ask for the next action. In solo mode the clock running out ends the prompt."""
    prompt = asyncio.ensure_future(ui.select_turn_action(team_mode, time_up))
    if team_mode or time_up:
        return await prompt

    expired = asyncio.ensure_future(listener.time_up.wait())
    done, _ = await asyncio.wait({prompt, expired}, return_when=asyncio.FIRST_COMPLETED)
    if prompt in done:
        expired.cancel()
        return prompt.result()

    prompt.cancel()
    try:
        await prompt
    except asyncio.CancelledError:
        pass
    return 'timeout'


async def play_session(session: GameSession):
    """Run turns until the game ends or the players go back to the menu."""
    listener = session.observer
    team_mode = bool(session.teams)

    session.restart_round()
    try:
        while not session.is_finished:
            time_up = session.state is SessionState.ROUND_ENDED
            action = await wait_for_action(listener, team_mode, time_up)

            if action == 'timeout' or (action == 'guess' and not team_mode and time_up):
                # Solo games end when the clock runs out
                player = session.players[0]
                ui.print_player_score(player, session.player_score(player))
                break

            try:
                if action == 'guess':
                    if session.state is SessionState.ROUND_ENDED:
                        ui.print_error("Too late, the clock already ran out.")
                    else:
                        session.record_correct_guess()
                elif action == 'pass':
                    session.advance_turn()
                    if team_mode and not session.is_finished:
                        ui.print_scoreboard(session.teams, session.active_team,
                                            session.round_num, session.total_rounds)
                elif action == 'restart':
                    session.restart_round()
                else:
                    break
            except GameError as e:
                ui.print_error(str(e))

        if session.is_finished:
            ui.print_scoreboard(session.standings(), None, session.total_rounds, session.total_rounds)
            ui.print_winner(session.winner, session.teams)
    finally:
        # Detaching the observer cancels the countdown
        session.set_observer(None)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="CHARADES party game")
    parser.add_argument("--rounds", type=int, default=None, help="Rounds per team game")
    parser.add_argument("--duration", type=int, default=None, help="Seconds per turn")
    parser.add_argument("--config-dir", default=None, help="Directory holding the JSON config files")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def configure_logging(level: str):
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=ui.console, rich_tracebacks=True)],
    )


def main(argv=None):
    """Main entry point for CHARADES."""
    args = parse_args(argv)
    configure_logging(args.log_level)
    if args.config_dir:
        ConfigLoader.reload(args.config_dir)

    while True:
        ui.clear()
        ui.print_header("CHARADES")
        mode = ui.select_main_menu()
        if mode == 'quit':
            ui.console.print("\n[bold]Thanks for playing CHARADES![/bold]\n")
            break

        try:
            session = setup_session(mode, args)
        except GameError as e:
            ui.print_error(str(e))
            continue
        if session is None:
            continue

        asyncio.run(play_session(session))
        ui.console.input("\n[dim]Press Enter to continue...[/dim]")


def run():
    try:
        main()
    except KeyboardInterrupt:
        ui.console.print("\n\n[yellow]Game interrupted. Thanks for playing![/yellow]\n")
        sys.exit(0)


if __name__ == "__main__":
    run()
