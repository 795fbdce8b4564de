"""Shared fixtures for the gridmatch test suite."""

from typing import List

import pytest

from gridmatch.game.players import create_ai_player, create_human_player
from gridmatch.game.rounds import Round


class FixedRandom:
    """Stands in for numpy's Generator where only random() is used."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


class ScriptedAIFactory:
    """AI opponents that answer synchronously from a fixed column list."""

    def __init__(self, columns=()):
        self.columns = list(columns)
        self.created = []

    def __call__(self, round_: Round):
        def choose(board, respond):
            respond(self.columns.pop(0))

        player = create_ai_player(round_.ai_name, choose, round_.image_ref)
        self.created.append(player)
        return player


class DeferredAIFactory:
    """AI opponents that keep the respond callback for the test to call later."""

    def __init__(self):
        self.responders = []
        self.created = []

    def __call__(self, round_: Round):
        def choose(board, respond):
            self.responders.append(respond)

        player = create_ai_player(round_.ai_name, choose)
        self.created.append(player)
        return player


class Recorder:
    """Collects notifications sent by a match."""

    def __init__(self):
        self.messages: List[str] = []
        self.speech = []

    def on_message(self, message: str) -> None:
        self.messages.append(message)

    def on_speak(self, player, message: str) -> None:
        self.speech.append((player.name, message))


@pytest.fixture
def human():
    return create_human_player("Tester")


@pytest.fixture
def bot():
    return create_ai_player("Bot", lambda board, respond: None)


@pytest.fixture
def classic_rounds():
    return [
        Round(index=0, ai_name="Pip", rows=6, columns=7, min_win_length=4),
        Round(index=1, ai_name="Marlo", rows=6, columns=7, min_win_length=4),
    ]


@pytest.fixture
def recorder():
    return Recorder()
