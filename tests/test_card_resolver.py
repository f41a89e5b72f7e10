"""卡牌效果解析器测试：每种效果原语对状态的作用"""

from duel.buffs import DamageOverTime
from duel.card import CardCatalog, CardDefinition, CardType
from duel.card_resolver import CardResolver
from duel.effects import ParsedEffect


def resolve(ctx, catalog, card_id, actor="player1"):
    return CardResolver(ctx).resolve(actor, catalog.get(card_id))


def ids(cards):
    return [c.card_id for c in cards]


class TestDamageEffects:
    def test_single_target(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "002")
        assert ctx.state.player("player2").hp == 180
        assert ctx.recorder.kinds() == ["damage"]

    def test_area_damage_hits_opponent_first(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "004")
        assert ctx.state.player("player1").hp == 180
        assert ctx.state.player("player2").hp == 180
        assert [e.target for e in ctx.recorder.events] == ["player2", "player1"]

    def test_damage_over_time_is_stored(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "005")
        opponent = ctx.state.player("player2")
        assert opponent.hp == 190
        assert opponent.buffs.dot == DamageOverTime(10, 3)
        assert ctx.recorder.kinds() == ["damage", "buff-applied"]

    def test_drain_heals_by_actual_loss(self, make_ctx, catalog):
        ctx = make_ctx({"hp": 100}, {"hp": 12})
        resolve(ctx, catalog, "046")
        assert ctx.state.player("player2").hp == 0
        assert ctx.state.player("player1").hp == 102

    def test_drain_respects_heal_block(self, make_ctx, catalog):
        ctx = make_ctx({"hp": 100, "buffs": {"blockHealTurns": 1}})
        resolve(ctx, catalog, "048")
        assert ctx.state.player("player2").hp == 190
        assert ctx.state.player("player1").hp == 100


class TestHpEffects:
    def test_heal(self, make_ctx, catalog):
        ctx = make_ctx({"hp": 100})
        resolve(ctx, catalog, "011")
        assert ctx.state.player("player1").hp == 110

    def test_heal_blocked(self, make_ctx, catalog):
        ctx = make_ctx({"hp": 100, "buffs": {"blockHealTurns": 1}})
        resolve(ctx, catalog, "011")
        assert ctx.state.player("player1").hp == 100
        assert ctx.recorder.events == []

    def test_heal_block_overwrites(self, make_ctx, catalog):
        ctx = make_ctx(player2={"buffs": {"blockHealTurns": 5}})
        resolve(ctx, catalog, "010")
        assert ctx.state.player("player2").buffs.block_heal_turns == 2
        assert "heal-block" in ctx.recorder.kinds()


class TestZoneEffects:
    def test_draw(self, make_ctx, catalog):
        ctx = make_ctx({"deck": ["001", "003", "008"]})
        resolve(ctx, catalog, "028")
        me = ctx.state.player("player1")
        assert ids(me.hand) == ["001", "003"]
        assert ids(me.deck) == ["008"]

    def test_draw_stops_at_hand_limit(self, make_ctx, catalog):
        ctx = make_ctx({"hand": ["001", "001", "001"], "deck": ["003", "008"]})
        resolve(ctx, catalog, "028")
        me = ctx.state.player("player1")
        assert len(me.hand) == 4
        assert ids(me.deck) == ["008"]

    def test_category_draw_skips_non_matching(self, make_ctx, catalog):
        ctx = make_ctx({"deck": ["001", "017", "002"]})
        resolve(ctx, catalog, "029")
        me = ctx.state.player("player1")
        assert ids(me.hand) == ["017"]
        assert ids(me.deck) == ["001", "002"]

    def test_category_draw_falls_back_to_top(self, make_ctx, catalog):
        ctx = make_ctx({"deck": ["001", "002"]})
        resolve(ctx, catalog, "029")
        assert ids(ctx.state.player("player1").hand) == ["001"]

    def test_forced_discard(self, make_ctx, catalog):
        ctx = make_ctx(player2={"hand": ["001", "002"]})
        resolve(ctx, catalog, "024")
        foe = ctx.state.player("player2")
        assert len(foe.hand) == 1
        assert len(foe.discard_pile) == 1
        event = ctx.recorder.events[-1]
        assert event.kind == "discard"
        assert event.data["forced"] is True

    def test_forced_discard_empty_hand(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "024")
        assert ctx.recorder.events == []

    def test_steal_with_category(self, make_ctx, catalog):
        ctx = make_ctx(player2={"hand": ["001", "040", "003"]})
        resolve(ctx, catalog, "031")
        assert ids(ctx.state.player("player1").hand) == ["040"]
        assert ids(ctx.state.player("player2").hand) == ["001", "003"]
        event = ctx.recorder.events[-1]
        assert (event.kind, event.data["victim"]) == ("steal", "player2")

    def test_steal_respects_own_hand_limit(self, make_ctx, catalog):
        ctx = make_ctx({"hand": ["001"] * 4}, {"hand": ["040"]})
        resolve(ctx, catalog, "031")
        assert ids(ctx.state.player("player2").hand) == ["040"]


class TestFieldEffects:
    def test_destroy(self, make_ctx, catalog):
        ctx = make_ctx(player2={"field": ["027"]})
        resolve(ctx, catalog, "023")
        foe = ctx.state.player("player2")
        assert foe.field == []
        assert ids(foe.discard_pile) == ["027"]
        assert ctx.recorder.kinds() == ["card-destroyed"]

    def test_destroy_empty_field_is_noop(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "023")
        assert ctx.recorder.events == []

    def test_disarm_only_face_down_traps(self, make_ctx, catalog):
        ctx = make_ctx(player2={"field": [{"cardId": "017", "isFaceDown": True}, "027"]})
        resolve(ctx, catalog, "022")
        foe = ctx.state.player("player2")
        assert ids(foe.field) == ["027"]
        assert ids(foe.discard_pile) == ["017"]
        assert foe.discard_pile[0].face_down is False

    def test_disarm_without_trap(self, make_ctx, catalog):
        ctx = make_ctx(player2={"field": ["027"]})
        resolve(ctx, catalog, "022")
        assert ids(ctx.state.player("player2").field) == ["027"]

    def test_reveal_keeps_trap_on_field(self, make_ctx, catalog):
        ctx = make_ctx({"deck": ["001"]}, {"field": [{"cardId": "017", "isFaceDown": True}]})
        resolve(ctx, catalog, "021")
        trap = ctx.state.player("player2").field[0]
        assert trap.face_down is False
        assert ctx.recorder.kinds() == ["draw", "trap-revealed"]

    def test_destroy_infected(self, make_ctx, catalog):
        ctx = make_ctx({"hp": 150}, {"field": ["027", "045"]})
        resolve(ctx, catalog, "049")
        foe = ctx.state.player("player2")
        assert ids(foe.field) == ["027"]
        assert ids(foe.discard_pile) == ["045"]
        assert ctx.state.player("player1").hp == 160

    def test_remove_wording_destroys_first_card(self, make_ctx):
        ctx = make_ctx(player2={"field": ["027", "045"]})
        card = CardDefinition(card_id="950", name="Demolition Order",
                              card_type=CardType.TACTICAL, effect="Remove 1 enemy field card.")
        CardResolver(ctx).resolve("player1", card)
        foe = ctx.state.player("player2")
        assert ids(foe.field) == ["045"]
        assert ids(foe.discard_pile) == ["027"]

    def test_destroy_infected_ignores_tag_only_cards(self, make_ctx, catalog):
        bitten = CardDefinition(card_id="951", name="Bitten Vest", card_type=CardType.DEFENSE,
                                tags=frozenset({"infected"}), effect="Restore 5 HP.")
        ctx = make_ctx(player2={"field": ["951", "045"]})
        ctx.catalog = CardCatalog([*catalog, bitten])
        resolve(ctx, catalog, "049")
        foe = ctx.state.player("player2")
        assert ids(foe.field) == ["951"]
        assert ids(foe.discard_pile) == ["045"]

    def test_spawn_moves_from_deck(self, make_ctx, catalog):
        ctx = make_ctx({"hp": 100, "deck": ["001", "045"]})
        resolve(ctx, catalog, "048")
        me = ctx.state.player("player1")
        assert ids(me.field) == ["045"]
        assert ids(me.deck) == ["001"]
        assert "spawn" in ctx.recorder.kinds()

    def test_spawn_needs_field_room(self, make_ctx, catalog):
        ctx = make_ctx({"field": ["027"] * 3, "deck": ["045"]})
        resolve(ctx, catalog, "048")
        assert ids(ctx.state.player("player1").deck) == ["045"]


class TestModifierEffects:
    def test_skip_turn_on_opponent(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "019")
        assert ctx.state.player("player2").buffs.skip_next_turn is True

    def test_skip_draw_on_self(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "006")
        assert ctx.state.player("player1").buffs.skip_next_draw is True
        assert ctx.state.player("player2").hp == 160

    def test_hand_lock(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "047")
        assert ctx.state.player("player2").buffs.hand_lock_turns == 1

    def test_bonus_applies_to_next_attack(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "025")
        resolve(ctx, catalog, "003")
        assert ctx.state.player("player2").hp == 160
        resolve(ctx, catalog, "003")
        assert ctx.state.player("player2").hp == 135

    def test_restricted_multiplier_wasted_on_other_tag(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "026")
        resolve(ctx, catalog, "008")
        assert ctx.state.player("player2").hp == 180
        resolve(ctx, catalog, "003")
        assert ctx.state.player("player2").hp == 155

    def test_permanent_grants_stack(self, make_ctx, catalog):
        ctx = make_ctx()
        resolve(ctx, catalog, "027")
        resolve(ctx, catalog, "027")
        resolve(ctx, catalog, "030")
        bag = ctx.state.player("player1").buffs
        assert bag.gun_flat_bonus == 10
        assert bag.extra_draw_per_turn == 1
        resolve(ctx, catalog, "002")
        assert ctx.state.player("player2").hp == 170


class TestUnknownCard:
    def test_resolve_none_is_noop(self, make_ctx):
        ctx = make_ctx()
        before = ctx.state.to_dict()
        assert CardResolver(ctx).resolve("player1", None) == ParsedEffect()
        assert ctx.state.to_dict() == before
        assert ctx.recorder.events == []
