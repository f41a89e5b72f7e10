# -*- coding: utf-8 -*-
"""
卡牌对决 - 命令行练习模式
主程序入口

使用方法:
    python main.py                      # 对阵本地木桩（只会结束回合）
    python main.py --remote             # 对阵远端机器人（DUEL_BOT_URL）
    python main.py --seed 7 --first player1
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys

from rich.console import Console
from rich.markup import escape

from duel.card import CardCatalog, CardType
from duel.config import DuelConfig, get_config
from duel.constants import PlayerKey
from duel.engine import ActionResult, DuelEngine, create_duel
from duel.exceptions import ActionValidationError, TransportError
from i18n import set_locale, t as _t
from logging_config import duel_log_context, setup_logging
from net.client import BotClient
from ui.spectator import SpectatorView

logger = logging.getLogger(__name__)

DECK_SIZE = 20


def build_practice_deck(catalog: CardCatalog, rng: random.Random,
                        size: int = DECK_SIZE) -> list[str]:
    """从目录随机组一套练习牌库（不含战利品卡，它们只进入共享战利品堆）"""
    pool = [c.card_id for c in catalog if c.card_type is not CardType.LOOT]
    return [rng.choice(pool) for _ in range(size)]


def build_payload(catalog: CardCatalog, rng: random.Random,
                  first_player: str | None) -> dict:
    loot = [c.card_id for c in catalog if c.card_type is CardType.LOOT]
    return {
        "player1": {"playerId": "human", "deck": build_practice_deck(catalog, rng)},
        "player2": {"playerId": "bot", "deck": build_practice_deck(catalog, rng)},
        "lootPile": loot * 2,
        "firstPlayer": first_player,
    }


class PracticeDuel:
    """
    练习对决主类
    负责命令解析、回合驱动和显示
    """

    def __init__(self, engine: DuelEngine, view: SpectatorView, console: Console,
                 client: BotClient | None = None):
        self.engine = engine
        self.view = view
        self.console = console
        self.client = client
        self.human = engine.config.human_player

    def run(self) -> None:
        self.view.show(self.engine.snapshot(conceal_hand_of=self._other(self.human)))
        while not self.engine.is_finished:
            if self.engine.current_player == self.human:
                if not self._human_step():
                    return
            else:
                self._opponent_step()

        self.console.print(f"[bold]{_t('log.game_over', winner=self.engine.winner)}[/bold]")
        if self.client is not None:
            try:
                asyncio.run(self.engine.submit_summary(self.client))
            except TransportError as e:
                self.console.print(f"[red]{e}[/red]")

    def _other(self, key: str) -> str:
        return PlayerKey(key).opponent.value

    def _render(self, result: ActionResult) -> None:
        self.view.show(self.engine.snapshot(conceal_hand_of=self._other(self.human)),
                       result.events)

    def _human_step(self) -> bool:
        """处理一条人类命令，返回 False 表示退出"""
        raw = self.console.input(escape(_t("main.prompt"))).strip().lower()
        if not raw:
            return True
        cmd, _, arg = raw.partition(" ")
        try:
            if cmd in ("q", "quit"):
                return False
            if cmd in ("p", "play"):
                result = self.engine.play_card(int(arg))
            elif cmd in ("d", "discard"):
                result = self.engine.discard_card(int(arg))
            elif cmd in ("r", "draw"):
                result = self.engine.draw_card()
            elif cmd in ("e", "end"):
                result = self.engine.end_turn()
            else:
                return True
        except ValueError:
            self.console.print(f"[red]{_t('exc.invalid_index', index=arg)}[/red]")
            return True
        except ActionValidationError as e:
            self.console.print(f"[red]{e.message}[/red]")
            return True

        self._render(result)
        return True

    def _opponent_step(self) -> None:
        if self.client is None:
            # 本地木桩：直接结束回合
            self._render(self.engine.end_turn())
            return
        try:
            result = asyncio.run(self.engine.play_remote_turn(self.client))
        except (TransportError, ActionValidationError) as e:
            logger.warning("Remote turn failed: %s", e)
            self.console.print(f"[red]{e.message}[/red]")
            result = self.engine.end_turn()
        self._render(result)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="卡牌对决练习模式")
    parser.add_argument("--seed", type=int, default=None, help="随机种子（洗牌、掷硬币、随机目标）")
    parser.add_argument("--first", choices=[k.value for k in PlayerKey], default=None,
                        help="指定先手，默认掷硬币")
    parser.add_argument("--remote", action="store_true", help="由远端机器人控制对手")
    parser.add_argument("--url", default=None, help="远端机器人地址，覆盖 DUEL_BOT_URL")
    parser.add_argument("--catalog", default=None, help="卡牌目录 JSON 路径")
    parser.add_argument("--locale", default="en_US", help="界面语言 (en_US / zh_CN)")
    parser.add_argument("--debug", action="store_true", help="调试日志")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """程序入口"""
    args = parse_args(argv)
    config: DuelConfig = get_config()
    setup_logging(level=config.log_level, enable_console=False,
                  debug=args.debug or config.debug_mode)
    set_locale(args.locale)

    console = Console(highlight=False)
    try:
        rng = random.Random(args.seed)
        catalog = CardCatalog.load(args.catalog or config.catalog_path)
        engine = create_duel(build_payload(catalog, rng, args.first), catalog,
                             rng=rng, config=config)
        client = None
        if args.remote:
            client = BotClient(args.url or config.bot_server_url, config.request_timeout)
        view = SpectatorView(catalog, console, viewer=config.human_player)
        with duel_log_context(engine.state.duel_id):
            PracticeDuel(engine, view, console, client).run()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt - exiting")
        console.print(_t("main.interrupted"))
        sys.exit(0)
    except Exception as e:
        logger.exception("Unhandled exception")
        console.print(_t("main.error", error=e))
        sys.exit(1)


if __name__ == "__main__":
    main()
