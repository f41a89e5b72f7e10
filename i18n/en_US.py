"""English translation table."""

STRINGS: dict[str, str] = {
    # ── 异常 ──
    "exc.duel_error": "Duel error",
    "exc.invalid_action": "Invalid action",
    "exc.invalid_index": "Invalid card selection: {index}",
    "exc.not_player_turn": "It is not your turn",
    "exc.capacity_exceeded": "The {zone} is full (limit {limit})",
    "exc.zone_card_not_found": "No matching card in {zone}",
    "exc.invalid_zone": "Invalid zone: {zone}",
    "exc.card_lookup": "Unknown card: {card_id}",
    "exc.hand_locked": "Your hand is locked",
    "exc.duel_finished": "The duel is already over",
    "exc.duel_busy": "Waiting for the remote counterpart",
    "exc.transport": "Remote counterpart unreachable: {reason}",
    "exc.config_error": "Configuration error",
    "exc.data_load_error": "Failed to load game data",

    # ── 区域 ──
    "zone.hand": "hand",
    "zone.field": "field",
    "zone.deck": "deck",
    "zone.discard": "discard pile",
    "zone.loot": "loot pile",

    # ── 事件日志 ──
    "log.card_played": "{player} plays {card}",
    "log.damage": "{target} takes {amount} damage from {card}",
    "log.heal": "{player} restores {amount} HP",
    "log.heal_blocked": "{player} cannot heal right now",
    "log.draw": "{player} draws a card",
    "log.discard": "{player} discards {card}",
    "log.steal": "{player} steals a card from {victim}",
    "log.trap_set": "{player} sets a face-down trap",
    "log.trap_triggered": "{player}'s {card} is triggered",
    "log.trap_disarmed": "{card} of {player} is disarmed",
    "log.trap_revealed": "{card} of {player} is revealed",
    "log.card_destroyed": "{card} of {player} is destroyed",
    "log.buff_applied": "{player} gains {buff}",
    "log.skip_flag": "{player} will skip their next {flag}",
    "log.heal_block": "{player} cannot heal for {turns} turn(s)",
    "log.hand_lock": "{player}'s hand is locked for {turns} turn(s)",
    "log.spawn": "{player} spawns {card}",
    "log.turn_start": "{player}'s turn begins",
    "log.turn_skipped": "{player} skips this turn",
    "log.turn_end": "{player} ends the turn",
    "log.game_over": "{winner} wins the duel!",
    "log.unknown_card": "Unknown card {card} has no effect",

    # ── main.py ──
    "main.interrupted": "\n\nDuel interrupted. Goodbye!",
    "main.error": "\nError: {error}",
    "main.prompt": "[p]lay <n> / [d]iscard <n> / d[r]aw / [e]nd turn / [q]uit: ",
}
