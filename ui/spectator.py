# -*- coding: utf-8 -*-
"""
Spectator View Module
Renders a read-only duel snapshot and event list with the 'rich' library.

The view never mutates state: it consumes the snapshot dict produced by
DuelState.to_dict() and the event list of an ActionResult.
"""

from __future__ import annotations

from typing import Any, Iterable, TYPE_CHECKING

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from duel.card import CardCatalog, CardType, normalize_card_id
from duel.constants import PlayerKey
from i18n import zone_name

if TYPE_CHECKING:
    from duel.events import DuelEvent

ATTACK_TAGS = frozenset({"gun", "melee", "explosive", "fire"})
SHIELD_TAGS = frozenset({"block", "armor", "shield", "damage_reduction", "critical_immunity"})

EVENT_STYLES = {
    "damage": "bold red",
    "heal": "green",
    "draw": "cyan",
    "discard": "dim",
    "steal": "magenta",
    "card-destroyed": "red",
    "trap-set": "yellow",
    "trap-triggered": "bold yellow",
    "game-over": "bold white on red",
}


def _card_id(entry: Any) -> str | None:
    raw = entry.get("cardId", entry.get("card_id")) if isinstance(entry, dict) else entry
    try:
        return normalize_card_id(raw)
    except ValueError:
        return None


def field_cues(snapshot: dict[str, Any], catalog: CardCatalog) -> set[str]:
    """
    Derive light-weight visual cues from the cards on both fields.

    Returns a subset of {"attack", "shield"}.
    """
    cues: set[str] = set()
    players = snapshot.get("players") or {}
    for key in PlayerKey:
        for entry in (players.get(key.value) or {}).get("field") or []:
            card_id = _card_id(entry)
            meta = catalog.find(card_id) if card_id else None
            if meta is None:
                continue
            if meta.card_type is CardType.ATTACK or meta.tags & ATTACK_TAGS:
                cues.add("attack")
            if meta.card_type is CardType.DEFENSE or meta.tags & SHIELD_TAGS:
                cues.add("shield")
    return cues


class SpectatorView:
    """
    Read-only duel renderer.

    viewer: the seat whose hand is shown face-up; the other hand is concealed.
    None shows both hands concealed (pure spectator).
    """

    def __init__(self, catalog: CardCatalog, console: Console | None = None,
                 viewer: str | None = None):
        self.catalog = catalog
        self.console = console or Console(highlight=False)
        self.viewer = viewer

    # --- labels ---

    def card_label(self, entry: Any, concealed: bool = False) -> Text:
        face_down = isinstance(entry, dict) and bool(entry.get("isFaceDown"))
        if concealed or (isinstance(entry, dict) and entry.get("concealed")):
            return Text("[?]", style="dim")
        card_id = _card_id(entry)
        meta = self.catalog.find(card_id) if card_id else None
        if face_down:
            return Text(f"[face-down {card_id}]" if meta is None else "[face-down trap]",
                        style="yellow")
        if meta is None:
            return Text(f"#{card_id}", style="dim")
        return Text(f"{meta.name} #{meta.card_id}", style=_type_style(meta.card_type))

    def banner(self, snapshot: dict[str, Any]) -> Text:
        winner = snapshot.get("winner")
        if winner:
            return Text(f"Winner: {winner}", style="bold white on red")
        current = snapshot.get("currentPlayer", PlayerKey.PLAYER1.value)
        return Text(f"Current Turn: {current} (turn {snapshot.get('turnNumber', 1)})",
                    style="bold")

    # --- panels ---

    def player_panel(self, key: str, data: dict[str, Any]) -> Panel:
        conceal = self.viewer is None or key != self.viewer

        table = Table(box=None, show_header=False, pad_edge=False)
        table.add_column("zone", style="cyan", no_wrap=True)
        table.add_column("cards")

        hp = data.get("hp", 0)
        table.add_row("HP", Text(str(hp), style="bold green" if hp > 50 else "bold red"))
        hand_cards = data.get("hand") or []
        table.add_row(_zone_label("hand"), _join(self.card_label(c, conceal) for c in hand_cards))
        table.add_row(_zone_label("field"),
                      _join(self.card_label(c) for c in data.get("field") or []))
        table.add_row(_zone_label("deck"), str(len(data.get("deck") or [])))
        table.add_row(_zone_label("discard"), str(len(data.get("discardPile") or [])))

        buffs = {k: v for k, v in (data.get("buffs") or {}).items() if _is_active(k, v)}
        if buffs:
            table.add_row("Buffs", ", ".join(f"{k}={v}" for k, v in sorted(buffs.items())))
        return Panel(table, title=key, box=ROUNDED)

    def render(self, snapshot: dict[str, Any]) -> Group:
        players = snapshot.get("players") or {}
        parts: list[Any] = [self.banner(snapshot)]
        for key in PlayerKey:
            parts.append(self.player_panel(key.value, players.get(key.value) or {}))

        cues = field_cues(snapshot, self.catalog)
        if cues:
            parts.append(Text(" ".join(sorted(cues)), style="italic"))
        return Group(*parts)

    def render_events(self, events: Iterable[DuelEvent | dict[str, Any]]) -> Table:
        table = Table(box=ROUNDED, title="Events")
        table.add_column("kind", no_wrap=True)
        table.add_column("details")
        for event in events:
            data = event.to_dict() if hasattr(event, "to_dict") else dict(event)
            kind = data.pop("kind", "?")
            details = ", ".join(f"{k}={v}" for k, v in data.items() if v is not None)
            table.add_row(Text(kind, style=EVENT_STYLES.get(kind, "")), details)
        return table

    def show(self, snapshot: dict[str, Any],
             events: Iterable[DuelEvent | dict[str, Any]] = ()) -> None:
        self.console.print(self.render(snapshot))
        events = list(events)
        if events:
            self.console.print(self.render_events(events))


def _type_style(card_type: CardType) -> str:
    return {
        CardType.ATTACK: "red",
        CardType.DEFENSE: "blue",
        CardType.TRAP: "yellow",
        CardType.TACTICAL: "cyan",
        CardType.LOOT: "green",
        CardType.INFECTED: "magenta",
    }.get(card_type, "")


def _zone_label(zone: str) -> str:
    name = zone_name(zone)
    return name[:1].upper() + name[1:]


def _is_active(name: str, value: Any) -> bool:
    if name == "nextAttackMult":
        return value not in (None, 1, 1.0)
    return value not in (None, 0, False, [])


def _join(labels: Iterable[Text]) -> Text:
    items = list(labels)
    return Text(" ").join(items) if items else Text("-")
