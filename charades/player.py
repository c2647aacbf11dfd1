"""Player and team records."""
from dataclasses import dataclass, field
from typing import List


# Color palette for players and teams
PLAYER_COLORS = ["green", "cyan", "yellow", "magenta", "red", "blue", "bright_green", "bright_cyan"]

DEFAULT_TEAM_NAMES = ("Team A", "Team B")


@dataclass
class Player:
    """A registered player. Identity is the session-assigned id."""

    id: int
    name: str = field(compare=False)
    score: int = field(default=0, compare=False)

    @property
    def color(self) -> str:
        return PLAYER_COLORS[self.id % len(PLAYER_COLORS)]

    def __hash__(self) -> int:
        return hash(('player', self.id))

    def __str__(self) -> str:
        return f"{self.name} - {self.score} pts"


@dataclass
class Team:
    """A team with its own score and an optional roster."""

    id: int
    name: str = field(compare=False)
    score: int = field(default=0, compare=False)
    players: List[Player] = field(default_factory=list, compare=False)

    @property
    def color(self) -> str:
        return PLAYER_COLORS[self.id % len(PLAYER_COLORS)]

    def add_player(self, player: Player) -> bool:
        """Add a player to the roster. Returns False if already a member."""
        if player in self.players:
            return False
        self.players.append(player)
        return True

    def __hash__(self) -> int:
        return hash(('team', self.id))

    def __str__(self) -> str:
        return f"{self.name} - {self.score} pts"
