"""卡牌定义、实例与目录测试"""

import json

import pytest

from duel.card import CardCatalog, CardDefinition, CardInstance, CardType, normalize_card_id
from duel.exceptions import CardLookupError, DataLoadError


class TestNormalizeCardId:
    @pytest.mark.parametrize("raw, expected", [
        (3, "003"),
        ("3", "003"),
        ("003", "003"),
        ("047", "047"),
        ("002_Pistol.png", "002"),
        (" 12 ", "012"),
    ])
    def test_valid_ids(self, raw, expected):
        assert normalize_card_id(raw) == expected

    @pytest.mark.parametrize("raw", [True, -1, "abc", "", "x_001"])
    def test_invalid_ids(self, raw):
        with pytest.raises(ValueError):
            normalize_card_id(raw)


class TestCardDefinition:
    def test_from_dict_normalizes(self):
        card = CardDefinition.from_dict({
            "id": 7, "name": "Shotgun", "type": "ATTACK", "tags": "gun, Consumable",
            "effect": "Deal 15x2 DMG.",
        })
        assert card.card_id == "007"
        assert card.card_type is CardType.ATTACK
        assert card.tags == frozenset({"gun", "consumable"})

    def test_matches_type_or_tag(self, catalog):
        pistol = catalog.get("002")
        assert pistol.matches("attack")
        assert pistol.matches("GUN")
        assert not pistol.matches("trap")

    def test_to_dict(self, catalog):
        data = catalog.get("016").to_dict()
        assert data["type"] == "trap"
        assert data["tags"] == ["trap"]

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            CardDefinition.from_dict({"id": 1, "name": "X", "type": "spell"})


class TestCardInstance:
    def test_from_raw_dict(self):
        card = CardInstance.from_raw({"cardId": 17, "isFaceDown": True})
        assert card.card_id == "017"
        assert card.face_down is True

    def test_from_raw_scalar(self):
        assert CardInstance.from_raw("5").card_id == "005"

    def test_to_dict(self):
        assert CardInstance("1").to_dict() == {"cardId": "001", "isFaceDown": False}


class TestCardCatalog:
    def test_bundled_catalog_loads(self, catalog):
        assert len(catalog) >= 40
        assert catalog.get(2).name == "Pistol"
        assert "016" in catalog

    def test_get_unknown_raises(self, catalog):
        with pytest.raises(CardLookupError) as exc_info:
            catalog.get("999")
        assert exc_info.value.card_id == "999"

    def test_find_unknown_returns_none(self, catalog):
        assert catalog.find("999") is None
        assert catalog.find("not-an-id") is None

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError):
            CardCatalog.load(tmp_path / "missing.json")

    def test_load_malformed_file(self, tmp_path):
        path = tmp_path / "cards.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DataLoadError):
            CardCatalog.load(path)

    def test_load_plain_list(self, tmp_path):
        path = tmp_path / "cards.json"
        path.write_text(json.dumps([
            {"id": "1", "name": "Knife", "type": "attack", "effect": "Deal 5 DMG."},
        ]), encoding="utf-8")
        catalog = CardCatalog.load(path)
        assert catalog.ids() == ["001"]
