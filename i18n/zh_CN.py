"""中文翻译表。"""

STRINGS: dict[str, str] = {
    # ── 异常 ──
    "exc.duel_error": "对决异常",
    "exc.invalid_action": "无效的操作",
    "exc.invalid_index": "无效的卡牌选择：{index}",
    "exc.not_player_turn": "还没轮到你",
    "exc.capacity_exceeded": "{zone}已满（上限 {limit}）",
    "exc.zone_card_not_found": "{zone}中没有符合条件的卡牌",
    "exc.invalid_zone": "无效的区域：{zone}",
    "exc.card_lookup": "未知卡牌：{card_id}",
    "exc.hand_locked": "你的手牌已被封锁",
    "exc.duel_finished": "对决已经结束",
    "exc.duel_busy": "正在等待远端响应",
    "exc.transport": "无法连接远端：{reason}",
    "exc.config_error": "配置错误",
    "exc.data_load_error": "游戏数据加载失败",

    # ── 区域 ──
    "zone.hand": "手牌",
    "zone.field": "场上",
    "zone.deck": "牌库",
    "zone.discard": "弃牌堆",
    "zone.loot": "战利品堆",

    # ── 事件日志 ──
    "log.card_played": "{player} 打出了 {card}",
    "log.damage": "{target} 受到 {card} 造成的 {amount} 点伤害",
    "log.heal": "{player} 回复了 {amount} 点体力",
    "log.heal_blocked": "{player} 当前无法回复体力",
    "log.draw": "{player} 摸了一张牌",
    "log.discard": "{player} 弃置了 {card}",
    "log.steal": "{player} 从 {victim} 手中偷取了一张牌",
    "log.trap_set": "{player} 盖放了一张陷阱",
    "log.trap_triggered": "{player} 的 {card} 被触发",
    "log.trap_disarmed": "{player} 的 {card} 被拆除",
    "log.trap_revealed": "{player} 的 {card} 被揭示",
    "log.card_destroyed": "{player} 的 {card} 被摧毁",
    "log.buff_applied": "{player} 获得了 {buff}",
    "log.skip_flag": "{player} 将跳过下一次{flag}",
    "log.heal_block": "{player} 在 {turns} 个回合内无法回复体力",
    "log.hand_lock": "{player} 的手牌被封锁 {turns} 个回合",
    "log.spawn": "{player} 召唤了 {card}",
    "log.turn_start": "{player} 的回合开始",
    "log.turn_skipped": "{player} 跳过本回合",
    "log.turn_end": "{player} 结束了回合",
    "log.game_over": "{winner} 赢得了对决！",
    "log.unknown_card": "未知卡牌 {card} 没有效果",

    # ── main.py ──
    "main.interrupted": "\n\n对决已中断，再见！",
    "main.error": "\n错误: {error}",
    "main.prompt": "[p]出牌 <n> / [d]弃牌 <n> / [r]摸牌 / [e]结束回合 / [q]退出: ",
}
