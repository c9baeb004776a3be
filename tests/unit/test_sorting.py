from __future__ import annotations

import sys

from plant_catalog.sorting import UNRANKED, RankKey, apply_sort, rank_key, sort_positions
from tests.fakes import make_plant


def _names(plants) -> list[str]:
    return [plant.name for plant in plants]


def test_ranked_plants_come_first_in_order_list_order() -> None:
    plants = [
        make_plant("a", "Apple"),
        make_plant("b", "Banana"),
        make_plant("c", "Cherry"),
    ]

    assert _names(apply_sort(plants, ["b", "a"])) == ["Banana", "Apple", "Cherry"]


def test_unranked_plants_are_sorted_by_name() -> None:
    plants = [make_plant("x", "Zeta"), make_plant("y", "Alpha")]

    assert _names(apply_sort(plants, [])) == ["Alpha", "Zeta"]


def test_equal_keys_keep_input_order() -> None:
    first = make_plant("z", "Zinnia")
    second = make_plant("z", "Zinnia")

    result = apply_sort([first, second], ["a"])

    assert result[0] is first
    assert result[1] is second


def test_duplicate_ids_in_order_list_use_first_position() -> None:
    plants = [make_plant("a", "Apple"), make_plant("b", "Banana")]

    assert sort_positions(["b", "a", "b"]) == {"b": 0, "a": 1}
    assert _names(apply_sort(plants, ["b", "a", "b"])) == ["Banana", "Apple"]


def test_inputs_are_not_mutated() -> None:
    plants = [make_plant("b", "Banana"), make_plant("a", "Apple")]
    order = ["a", "b"]
    plants_before = list(plants)

    result = apply_sort(plants, order)

    assert result is not plants
    assert plants == plants_before
    assert order == ["a", "b"]


def test_empty_inputs() -> None:
    assert apply_sort([], []) == []
    assert apply_sort([], ["a", "b"]) == []


def test_unranked_sentinel_exceeds_every_real_position() -> None:
    assert UNRANKED == sys.maxsize
    positions = sort_positions(["a"])

    assert rank_key(make_plant("a", "Apple"), positions) == RankKey(0, "Apple")
    assert rank_key(make_plant("q", "Quince"), positions) == RankKey(UNRANKED, "Quince")


def test_name_tie_break_uses_default_string_ordering() -> None:
    plants = [make_plant("1", "apple"), make_plant("2", "Banana"), make_plant("3", "Apple")]

    # Uppercase sorts before lowercase in code point order.
    assert _names(apply_sort(plants, [])) == ["Apple", "Banana", "apple"]
