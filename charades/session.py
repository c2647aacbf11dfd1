"""
Game session controller.

Owns all state of one charades session:
- Player and team registration
- Category and word selection
- Turn rotation and round counting
- Scoring
- The countdown timer

Every state change is pushed to a single observer as a SessionEvent. All
operations are synchronous, validate before mutating, and must run on the
same context that delivers the timer callbacks.
"""

import itertools
import logging
import random
from enum import Enum
from typing import Dict, List, Optional, Union

from charades.categories import Category, CategoryManager
from charades.config_loader import ConfigLoader
from charades.errors import EmptyCategory, InvalidInput, InvalidState, NotFound
from charades.events import SessionEvent, SessionEventType, SessionObserver
from charades.player import DEFAULT_TEAM_NAMES, Player, Team
from charades.timer import CountdownTimer, Scheduler, check_tick_interval, resolve_scheduler

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle states of a session."""
    IDLE = "idle"  # no category selected
    READY = "ready"  # category selected, no countdown running
    ROUND_ACTIVE = "round_active"
    ROUND_ENDED = "round_ended"
    SESSION_ENDED = "session_ended"


class GameSession:
    """Drives one charades session from setup to a winner or a reset."""

    def __init__(
        self,
        categories: Optional[List[Category]] = None,
        total_rounds: Optional[int] = None,
        tick_interval_ms: Optional[int] = None,
        round_duration: Optional[int] = None,
        scheduler: Optional[Scheduler] = None,
        observer: Optional[SessionObserver] = None,
        rng: Optional[random.Random] = None,
    ):
        settings = ConfigLoader()
        if total_rounds is None:
            total_rounds = settings.get('session', 'total_rounds', default=5)
        if tick_interval_ms is None:
            tick_interval_ms = settings.get('session', 'tick_interval_ms', default=1000)
        if round_duration is None:
            round_duration = settings.get('session', 'round_duration', default=60)

        if total_rounds < 1:
            raise InvalidInput("A session needs at least one round")
        if tick_interval_ms <= 0:
            raise InvalidInput("Tick interval must be positive")
        if round_duration < 0:
            raise InvalidInput("Round duration cannot be negative")

        self.total_rounds = int(total_rounds)
        self.tick_interval_ms = int(tick_interval_ms)
        self.round_duration = int(round_duration)
        team_names = tuple(settings.get('teams', 'default_names', default=DEFAULT_TEAM_NAMES))
        self.default_team_names = team_names if len(team_names) >= 2 else DEFAULT_TEAM_NAMES

        self.categories = CategoryManager(categories)
        self.players: List[Player] = []
        self.teams: List[Team] = []
        self.current_category: Optional[Category] = None
        self.active_team: Optional[Team] = None
        self.current_word: Optional[str] = None
        self.round_num = 1
        self.winner: Optional[Team] = None

        self._scheduler = scheduler
        self._observer = observer
        self._rng = rng or random.Random()
        self._timer: Optional[CountdownTimer] = None
        self._state = SessionState.IDLE
        self._player_scores: Dict[int, int] = {}
        self._player_ids = itertools.count()
        self._team_ids = itertools.count()

    # -----------------------
    # Observer
    # -----------------------

    @property
    def observer(self) -> Optional[SessionObserver]:
        return self._observer

    @observer.setter
    def observer(self, observer: Optional[SessionObserver]) -> None:
        self.set_observer(observer)

    def set_observer(self, observer: Optional[SessionObserver]) -> None:
        """Replace the observer. Clearing it also cancels the countdown."""
        self._observer = observer
        if observer is None:
            self.cancel_countdown()

    def _emit(self, event_type: SessionEventType, **data) -> None:
        logger.debug("Emit %s %s", event_type.name, data)
        if self._observer is not None:
            self._observer(SessionEvent(type=event_type, data=data))

    # -----------------------
    # Read-only state
    # -----------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_finished(self) -> bool:
        return self._state is SessionState.SESSION_ENDED

    @property
    def timer(self) -> Optional[CountdownTimer]:
        return self._timer

    @property
    def current_score(self) -> int:
        """Score of the active team, else of the solo player, else 0."""
        if self.active_team is not None:
            return self.active_team.score
        if self.players:
            return self.player_score(self.players[0])
        return 0

    def player_score(self, player: Player) -> int:
        return self._player_scores.get(player.id, 0)

    def standings(self) -> List[Team]:
        """Teams ordered by score, ties kept in registration order."""
        return sorted(self.teams, key=lambda t: t.score, reverse=True)

    def _require_playable(self) -> None:
        if self.is_finished:
            raise InvalidState("The session has ended; reset it to play again")

    def _resting_state(self) -> SessionState:
        return SessionState.READY if self.current_category is not None else SessionState.IDLE

    # -----------------------
    # Players (solo mode)
    # -----------------------

    def register_player(self, name: str) -> Player:
        """Register a player with score 0."""
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Player name cannot be blank")

        player = Player(next(self._player_ids), name)
        self.players.append(player)
        self._player_scores.setdefault(player.id, 0)
        logger.info("Registered player %s", player.name)

        self._emit(SessionEventType.PLAYER_REGISTERED, player=player)
        self._emit(SessionEventType.SCORE_CHANGED, score=self.player_score(player))
        return player

    # -----------------------
    # Teams
    # -----------------------

    def create_teams(self, name_a: str = "", name_b: str = "") -> List[Team]:
        """
        Replace the team list with two fresh teams; the first one starts.

        Creating teams after the session has ended starts a new game: the
        old winner is dropped and the round counter goes back to 1.
        """
        names = []
        for name, default in zip((name_a, name_b), self.default_team_names):
            names.append((name or "").strip() or default)

        self.teams = [Team(next(self._team_ids), name) for name in names]
        self.active_team = self.teams[0]
        self.winner = None
        if self.is_finished:
            self.round_num = 1
            self._state = self._resting_state()
        logger.info("Created teams %s", ", ".join(names))

        self._emit(SessionEventType.SCORE_CHANGED, score=self.active_team.score)
        self._emit(SessionEventType.TURN_CHANGED, team=self.active_team)
        return list(self.teams)

    def assign_to_team(self, player: Player, team: Team) -> None:
        """Put a registered player on a current team's roster."""
        if player not in self.players:
            raise NotFound(f"Player '{player.name}' is not registered")
        if team not in self.teams:
            raise NotFound(f"Team '{team.name}' is not part of this session")
        team.add_player(player)

    def advance_turn(self) -> None:
        """Pass the turn to the next team, counting rounds and detecting the end."""
        if not self.teams:
            return
        self._require_playable()

        index = self.teams.index(self.active_team) if self.active_team in self.teams else 0
        next_index = (index + 1) % len(self.teams)
        next_round = self.round_num + 1 if next_index == 0 else self.round_num

        if next_round > self.total_rounds:
            self.active_team = self.teams[next_index]
            self.round_num = next_round
            self._finish()
            return

        # Fail before mutating if the restarted round could not start
        self._check_round_startable()

        self.active_team = self.teams[next_index]
        self.round_num = next_round
        logger.info("Turn passed to %s (round %d/%d)",
                    self.active_team.name, self.round_num, self.total_rounds)

        self._emit(SessionEventType.TURN_CHANGED, team=self.active_team)
        self._emit(SessionEventType.SCORE_CHANGED, score=self.active_team.score)
        self.restart_round()

    def _finish(self) -> None:
        self.cancel_countdown()
        # max() keeps the first team on ties
        self.winner = max(self.teams, key=lambda t: t.score)
        self._state = SessionState.SESSION_ENDED
        logger.info("Session ended, winner %s with %d", self.winner.name, self.winner.score)
        self._emit(SessionEventType.SESSION_ENDED, winner=self.winner)

    # -----------------------
    # Categories and words
    # -----------------------

    def select_category(self, name: str) -> Category:
        """Select a category by case-insensitive name."""
        category = self.categories.find(name)
        self.current_category = category
        if self._state is SessionState.IDLE:
            self._state = SessionState.READY
        logger.info("Selected category %s", category.name)
        return category

    def _resolve_category(self, category: Union[Category, str, None]) -> Category:
        if category is None:
            if self.current_category is None:
                raise InvalidState("No category selected")
            category = self.current_category
        elif isinstance(category, str):
            category = self.categories.find(category)
        return category

    def _playable_category(self) -> Category:
        category = self._resolve_category(None)
        if not category.words:
            raise EmptyCategory(f"Category '{category.name}' has no words")
        return category

    def _check_round_startable(self) -> Category:
        """Raise if restart_round() would fail, without changing anything."""
        category = self._playable_category()
        check_tick_interval(self.tick_interval_ms)
        resolve_scheduler(self._scheduler)
        return category

    def draw_word(self, category: Union[Category, str, None] = None) -> str:
        """Draw a random word from the given or the current category."""
        self._require_playable()
        word = self._resolve_category(category).random_word(self._rng)
        self.current_word = word
        self._emit(SessionEventType.WORD_CHANGED, word=word)
        return word

    # -----------------------
    # Scoring
    # -----------------------

    def record_correct_guess(self) -> None:
        """Score a point for the active team (or the solo player) and draw again."""
        if self.active_team is None and not self.players:
            return
        self._require_playable()
        category = self._playable_category()

        if self.active_team is not None:
            self.active_team.score += 1
            score = self.active_team.score
        else:
            # Solo mode scores the first registered player
            player = self.players[0]
            score = self.player_score(player) + 1
            self._player_scores[player.id] = score
            player.score = score

        self._emit(SessionEventType.SCORE_CHANGED, score=score)
        self.draw_word(category)

    # -----------------------
    # Countdown
    # -----------------------

    def start_countdown(
        self,
        duration_seconds: Optional[int] = None,
        tick_interval_ms: Optional[int] = None,
    ) -> CountdownTimer:
        """Replace any running countdown with a fresh one."""
        self._require_playable()
        if duration_seconds is None:
            duration_seconds = self.round_duration
        if tick_interval_ms is None:
            tick_interval_ms = self.tick_interval_ms

        # Everything that can reject the call runs before the live countdown is touched
        check_tick_interval(tick_interval_ms)
        timer = CountdownTimer(duration_seconds, resolve_scheduler(self._scheduler))
        self.cancel_countdown()
        timer.start(
            tick_interval_ms,
            on_tick=lambda seconds: self._on_tick(timer, seconds),
            on_expire=lambda: self._on_expire(timer),
        )
        self._timer = timer
        self._state = SessionState.ROUND_ACTIVE
        return timer

    def cancel_countdown(self) -> None:
        """Stop and discard the running countdown, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            if self._state is SessionState.ROUND_ACTIVE:
                self._state = self._resting_state()

    def _on_tick(self, timer: CountdownTimer, seconds: int) -> None:
        if timer is not self._timer:
            return
        self._emit(SessionEventType.TICK, seconds_remaining=seconds)

    def _on_expire(self, timer: CountdownTimer) -> None:
        if timer is not self._timer:
            return
        self._timer = None
        self._state = SessionState.ROUND_ENDED
        logger.info("Time expired")
        self._emit(SessionEventType.TIME_EXPIRED)

    # -----------------------
    # Round and session control
    # -----------------------

    def restart_round(self) -> None:
        """Draw a new word and restart the full countdown."""
        self._require_playable()
        self._check_round_startable()
        self.draw_word()
        self.start_countdown(self.round_duration)
        self._emit(SessionEventType.SCORE_CHANGED, score=self.current_score)
        if self.active_team is not None:
            self._emit(SessionEventType.TURN_CHANGED, team=self.active_team)

    def reset_session(self) -> None:
        """Zero all scores and rounds. Players, teams and the category survive."""
        self.cancel_countdown()
        for team in self.teams:
            team.score = 0
        for player in self.players:
            self._player_scores[player.id] = 0
            player.score = 0
        self.round_num = 1
        self.current_word = None
        self.winner = None
        self.active_team = self.teams[0] if self.teams else None
        self._state = self._resting_state()
        logger.info("Session reset")

        self._emit(SessionEventType.SCORE_CHANGED, score=self.current_score)
        if self.active_team is not None:
            self._emit(SessionEventType.TURN_CHANGED, team=self.active_team)
