"""共享测试夹具：卡牌目录、结算上下文与对决引擎工厂"""

from __future__ import annotations

import random

import pytest

from duel.card import CardCatalog, CardInstance
from duel.config import DEFAULT_CATALOG_PATH, DuelConfig
from duel.context import ResolutionContext
from duel.engine import DuelEngine
from duel.events import EventBus
from duel.player import PlayerState
from duel.state import DuelState
from i18n import set_locale


@pytest.fixture(autouse=True)
def _english_locale():
    set_locale("en_US")
    yield
    set_locale("en_US")


@pytest.fixture(scope="session")
def catalog() -> CardCatalog:
    return CardCatalog.load(DEFAULT_CATALOG_PATH)


def build_state(player1=None, player2=None, *, current="player1", loot=()) -> DuelState:
    """按快照格式构造对决状态，缺省字段取中性值"""
    return DuelState(
        players={
            "player1": PlayerState.from_dict(player1 or {}),
            "player2": PlayerState.from_dict(player2 or {}),
        },
        loot_pile=[CardInstance(c) for c in loot],
        current_player=current,
        duel_id="test-duel",
        player_ids={"player1": "alice", "player2": "bob"},
    )


@pytest.fixture
def make_state():
    return build_state


@pytest.fixture
def make_ctx(catalog):
    def _make(player1=None, player2=None, *, current="player1", loot=(), seed=0):
        state = build_state(player1, player2, current=current, loot=loot)
        return ResolutionContext(state=state, catalog=catalog, rng=random.Random(seed),
                                 config=DuelConfig(human_player="player1"))
    return _make


@pytest.fixture
def make_engine(catalog):
    def _make(player1=None, player2=None, *, current="player1", loot=(), seed=0,
              bus=None, **config):
        config.setdefault("human_player", "player1")
        state = build_state(player1, player2, current=current, loot=loot)
        return DuelEngine(state, catalog, rng=random.Random(seed),
                          config=DuelConfig(**config), event_bus=bus or EventBus())
    return _make
