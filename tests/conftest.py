"""Shared test fixtures for CHARADES tests."""
import heapq
import itertools
import json
import random
from io import StringIO
from typing import List

import pytest
from rich.console import Console

from charades.categories import Category
from charades.config_loader import ConfigLoader
from charades.events import SessionEvent, SessionEventType
from charades.session import GameSession


@pytest.fixture(autouse=True)
def deterministic_random():
    """Seed random for reproducible tests."""
    random.seed(42)
    yield
    random.seed()


@pytest.fixture(autouse=True)
def temp_config_dir(tmp_path, monkeypatch):
    """Create temporary config directory with test JSON files."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    game_settings = {
        "session": {
            "total_rounds": 3,
            "round_duration": 10,
            "tick_interval_ms": 1000
        },
        "teams": {
            "default_names": ["Team A", "Team B"]
        },
        "ui": {
            "announce_every": 5,
            "final_countdown": 3
        }
    }

    categories = {
        "categories": [
            {"name": "Colors", "emoji": "🎨", "words": ["Red", "Blue"]},
            {"name": "Fruits", "emoji": "🍎", "words": ["apple", "banana", "cherry"]}
        ]
    }

    (config_dir / "game_settings.json").write_text(json.dumps(game_settings, indent=2))
    (config_dir / "categories.json").write_text(json.dumps(categories, indent=2))

    # Reset the singleton instance FIRST
    ConfigLoader._instance = None
    monkeypatch.setattr(ConfigLoader, '_config_dir', str(config_dir))

    from charades import config_loader
    monkeypatch.setattr(config_loader, 'config', ConfigLoader())

    yield config_dir

    ConfigLoader._instance = None


@pytest.fixture
def mock_console(monkeypatch):
    """Mock Rich Console for UI tests."""
    output = StringIO()
    console = Console(file=output, force_terminal=False, width=80, legacy_windows=False)

    import charades.ui as ui_module
    monkeypatch.setattr(ui_module, 'console', console)

    return console, output


class FakeQuestion:
    """Stands in for a questionary Question with a scripted answer."""

    def __init__(self, answer):
        self.answer = answer

    def ask(self):
        return self.answer

    async def ask_async(self, patch_stdout=False):
        return self.answer


@pytest.fixture
def mock_ui_inputs(monkeypatch):
    """Script the answers returned by questionary.select and questionary.text."""
    import questionary

    responses: List = []

    def _next(*args, **kwargs):
        return FakeQuestion(responses.pop(0) if responses else None)

    monkeypatch.setattr(questionary, 'select', _next)
    monkeypatch.setattr(questionary, 'text', _next)

    def _script(answers):
        responses.clear()
        responses.extend(answers)

    return _script


class ManualHandle:
    """Cancellable handle returned by ManualScheduler."""

    def __init__(self, when: float, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Deterministic clock: callbacks only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay, callback):
        handle = ManualHandle(self.now + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def advance(self, seconds: float = 0.0):
        """Move the clock forward, running every callback that falls due."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled:
                handle.callback()
        self.now = target

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)


class StubbornHandle:
    """A handle whose cancel() has no effect, like a callback already in flight."""

    def __init__(self, handle):
        self._handle = handle

    def cancel(self):
        pass


class InFlightScheduler(ManualScheduler):
    """Scheduler that ignores cancellation of already-armed callbacks."""

    def call_later(self, delay, callback):
        return StubbornHandle(super().call_later(delay, callback))


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def in_flight_scheduler():
    return InFlightScheduler()


class EventRecorder:
    """Observer that keeps every event it receives."""

    def __init__(self):
        self.events: List[SessionEvent] = []

    def __call__(self, event: SessionEvent):
        self.events.append(event)

    def types(self) -> List[SessionEventType]:
        return [e.type for e in self.events]

    def of(self, event_type: SessionEventType) -> List[SessionEvent]:
        return [e for e in self.events if e.type is event_type]

    def clear(self):
        self.events.clear()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def colors():
    return Category("Colors", ["Red", "Blue"])


@pytest.fixture
def session_factory(manual_scheduler, recorder, colors):
    """Factory for sessions wired to the manual clock and the recorder."""
    def _create(categories=None, total_rounds=3, round_duration=10, tick_interval_ms=1000):
        return GameSession(
            categories=categories if categories is not None else [
                colors,
                Category("Animals", ["dog", "cat", "tiger"]),
            ],
            total_rounds=total_rounds,
            round_duration=round_duration,
            tick_interval_ms=tick_interval_ms,
            scheduler=manual_scheduler,
            observer=recorder,
            rng=random.Random(7),
        )

    return _create


@pytest.fixture
def session(session_factory):
    return session_factory()
