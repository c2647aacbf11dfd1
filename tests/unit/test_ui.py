"""Unit tests for charades/ui.py - UI display functions."""
import pytest

from charades import ui
from charades.categories import Category
from charades.player import Player, Team


class TestBasicOutput:
    """Tests for basic output functions."""

    def test_clear(self, mock_console):
        """Test clear() doesn't crash on a non-terminal console."""
        ui.clear()

    def test_print_header(self, mock_console):
        console, output = mock_console
        ui.print_header("Test Header")

        assert "Test Header" in output.getvalue()

    def test_print_categories(self, mock_console):
        console, output = mock_console
        ui.print_categories([Category("Colors", ["Red", "Blue"]), Category("Fruits", ["apple"])])

        result = output.getvalue()
        assert "Colors" in result
        assert "2 words" in result
        assert "Fruits" in result

    def test_print_word_upper_case(self, mock_console):
        console, output = mock_console
        ui.print_word("giraffe")

        assert "GIRAFFE" in output.getvalue()

    def test_print_countdown(self, mock_console):
        console, output = mock_console
        ui.print_countdown(12)

        assert "12s left" in output.getvalue()

    def test_print_player_score(self, mock_console):
        console, output = mock_console
        ui.print_player_score(Player(0, "Alice"), 4)

        result = output.getvalue()
        assert "Alice" in result
        assert "4 pts" in result


class TestScoreboard:
    """Tests for team standings output."""

    def test_scoreboard_lists_teams(self, mock_console):
        console, output = mock_console
        red, blue = Team(0, "Red", score=3), Team(1, "Blue", score=1)

        ui.print_scoreboard([red, blue], red, round_num=2, total_rounds=5)

        result = output.getvalue()
        assert "Red" in result
        assert "Blue" in result
        assert "Round 2/5" in result
        assert "▶" in result

    def test_round_label_capped_at_total(self, mock_console):
        console, output = mock_console
        ui.print_scoreboard([Team(0, "Red")], None, round_num=6, total_rounds=5)

        assert "Round 5/5" in output.getvalue()

    def test_print_winner(self, mock_console):
        console, output = mock_console
        red, blue = Team(0, "Red", score=3), Team(1, "Blue", score=1)

        ui.print_winner(red, [red, blue])

        assert "Red wins with 3 pts" in output.getvalue()

    def test_print_winner_tie(self, mock_console):
        console, output = mock_console
        red, blue = Team(0, "Red", score=2), Team(1, "Blue", score=2)

        ui.print_winner(red, [red, blue])

        result = output.getvalue()
        assert "Tie at 2 pts" in result
        assert "Red" in result

    def test_print_winner_none(self, mock_console):
        console, output = mock_console
        ui.print_winner(None, [])

        assert "Game over" in output.getvalue()


class TestPrompts:
    """Tests for questionary-backed prompts."""

    def test_select_main_menu(self, mock_ui_inputs):
        mock_ui_inputs(["Team game"])
        assert ui.select_main_menu() == "teams"

    def test_select_main_menu_cancelled(self, mock_ui_inputs):
        mock_ui_inputs([None])
        assert ui.select_main_menu() == "quit"

    def test_ask_name_strips(self, mock_ui_inputs):
        mock_ui_inputs(["  Red  "])
        assert ui.ask_name("Name:") == "Red"

    def test_ask_name_cancelled(self, mock_ui_inputs):
        mock_ui_inputs([None])
        assert ui.ask_name("Name:") == ""

    def test_select_category_returns_name(self, mock_ui_inputs):
        cats = [Category("Colors", ["Red"], emoji="🎨")]
        mock_ui_inputs(["🎨 Colors"])

        assert ui.select_category(cats) == "Colors"

    @pytest.mark.parametrize("team_mode,time_up,expected", [
        (True, False, ["guess", "pass", "restart", "menu"]),
        (True, True, ["pass", "restart", "menu"]),
        (False, False, ["guess", "restart", "menu"]),
        (False, True, ["restart", "menu"]),
    ])
    def test_turn_action_choices(self, team_mode, time_up, expected):
        values = [c["value"] for c in ui.turn_action_choices(team_mode, time_up)]
        assert values == expected

    @pytest.mark.asyncio
    async def test_select_turn_action(self, mock_ui_inputs):
        mock_ui_inputs(["✅ Guessed it!"])
        assert await ui.select_turn_action(True, False) == "guess"

    @pytest.mark.asyncio
    async def test_select_turn_action_cancelled_goes_to_menu(self, mock_ui_inputs):
        mock_ui_inputs([None])
        assert await ui.select_turn_action(True, False) == "menu"
