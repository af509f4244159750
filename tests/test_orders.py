"""Unit tests for order text parsing."""

import pytest

from models.types import SanityOrder
from utils.exceptions import OrderError
from utils.orders import (parse_attribute_change, parse_attributes, parse_check_order,
                          parse_count, parse_optional_number, parse_repeat,
                          parse_sanity_order, split_order)


class TestSplitOrder:
    @pytest.mark.parametrize("content, expected", [
        (".rd", ("r", "d")),
        (".r 3d6", ("r", "3d6")),
        (".R 3d6", ("r", "3d6")),
        (".rh3d6", ("r", "h3d6")),
        (".ra60", ("ra", "60")),
        (".ra 偵查", ("ra", "偵查")),
        (".setcoc 2", ("setcoc", "2")),
        (".set50", ("set", "50")),
        (".st 力量60", ("st", "力量60")),
        (".dnd5", ("dnd", "5")),
        (".coc", ("coc", "")),
        (".help", ("help", "")),
        (".sc 1/1d6", ("sc", "1/1d6")),
        (".sc1/1d6", ("sc", "1/1d6")),
        (".san -1", ("san", "-1")),
        (".st 理智60", ("st", "理智60")),
        (".hp-1d6", ("hp", "-1d6")),
        (".mp +2", ("mp", "+2")),
    ])
    def test_longest_name_first(self, content: str, expected) -> None:
        assert split_order(content) == expected

    @pytest.mark.parametrize("content", ["hello", ".x", "r3d6", ""])
    def test_not_an_order(self, content: str) -> None:
        assert split_order(content) is None

    def test_custom_prefix(self) -> None:
        assert split_order("!r 3d6", prefix="!") == ("r", "3d6")
        assert split_order(".r 3d6", prefix="!") is None


class TestParseRepeat:
    @pytest.mark.parametrize("order, expected", [
        ("3d6 攻擊#3", ("3d6 攻擊", 3)),
        ("3d6 # 2", ("3d6", 2)),
        ("3d6", ("3d6", 1)),
        ("h#2", ("h", 2)),
        ("#0", ("", 0)),
        ("", ("", 1)),
    ])
    def test_parse(self, order: str, expected) -> None:
        assert parse_repeat(order) == expected


class TestParseCheckOrder:
    def test_value_only(self) -> None:
        order = parse_check_order("60")
        assert order.value == 60
        assert order.name == ""
        assert not order.hidden
        assert order.repeat == 1

    def test_name_and_value(self) -> None:
        order = parse_check_order("偵查60")
        assert (order.name, order.value) == ("偵查", 60)

    def test_name_only(self) -> None:
        order = parse_check_order("偵查")
        assert order.name == "偵查"
        assert order.value is None

    def test_everything(self) -> None:
        order = parse_check_order("h b2 偵查 60 +10 -5 #3")
        assert order.hidden
        assert order.bp == "B2"
        assert (order.name, order.value) == ("偵查", 60)
        assert order.modifiers == "+10-5"
        assert order.repeat == 3

    def test_hidden_bonus_glued(self) -> None:
        order = parse_check_order("hb 50")
        assert order.hidden
        assert order.bp == "B"
        assert order.value == 50

    def test_penalty(self) -> None:
        order = parse_check_order("p 40")
        assert order.bp == "P"
        assert order.value == 40

    def test_hidden_value(self) -> None:
        order = parse_check_order("h60")
        assert order.hidden
        assert order.value == 60

    def test_name_starting_with_h(self) -> None:
        order = parse_check_order("hp")
        assert not order.hidden
        assert order.name == "hp"

    @pytest.mark.parametrize("order", ["", "60 abc", "#3"])
    def test_invalid(self, order: str) -> None:
        with pytest.raises(OrderError, match="無效的檢定指令"):
            parse_check_order(order)


class TestParseNumbers:
    @pytest.mark.parametrize("order, expected", [("", None), ("5", 5), (" 3 ", 3), ("0", 0)])
    def test_optional_number(self, order: str, expected) -> None:
        assert parse_optional_number(order) == expected

    def test_count_defaults_to_one(self) -> None:
        assert parse_count("") == 1
        assert parse_count("4") == 4

    @pytest.mark.parametrize("order", ["abc", "3d6", "-1", "1 2"])
    def test_invalid(self, order: str) -> None:
        with pytest.raises(OrderError):
            parse_count(order)


class TestParseAttributes:
    def test_pairs(self) -> None:
        assert parse_attributes("力量60 敏捷:50") == [("力量", 60), ("敏捷", 50)]

    def test_glued(self) -> None:
        assert parse_attributes("力量60敏捷50") == [("力量", 60), ("敏捷", 50)]

    def test_full_width_colon(self) -> None:
        assert parse_attributes("STR：70") == [("STR", 70)]

    @pytest.mark.parametrize("order", ["", "力量", "60", "力量60 ???"])
    def test_invalid(self, order: str) -> None:
        with pytest.raises(OrderError, match="無效的屬性"):
            parse_attributes(order)


class TestParseSanityOrder:
    def test_losses(self) -> None:
        assert parse_sanity_order("1/1d6") == SanityOrder(success="1", failure="1d6")

    def test_spaced_slash_and_value(self) -> None:
        assert parse_sanity_order(" 0 / 1d4+1 45 ") == SanityOrder(success="0", failure="1d4+1", value=45)

    @pytest.mark.parametrize("order", ["", "1d6", "1/", "/1d6", "1/1d6/2", "1/1d6 abc"])
    def test_invalid(self, order: str) -> None:
        with pytest.raises(OrderError, match="無效的理智檢定指令"):
            parse_sanity_order(order)


class TestParseAttributeChange:
    @pytest.mark.parametrize("order, expected", [
        ("-1d6", ("-", "1d6")),
        ("+ 2", ("+", "2")),
        (" -1d6 被咬 ", ("-", "1d6 被咬")),
    ])
    def test_parse(self, order: str, expected) -> None:
        assert parse_attribute_change(order) == expected

    @pytest.mark.parametrize("order", ["", "1d6", "-", "*2"])
    def test_invalid(self, order: str) -> None:
        with pytest.raises(OrderError, match="無效的屬性增減"):
            parse_attribute_change(order)
