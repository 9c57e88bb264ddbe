import itertools
import random

from homeboard.modules.layout import CardSize, GridPlacement, build_grid_layout


def _cells(placement: GridPlacement) -> set[tuple[int, int]]:
    return {
        (row, col)
        for row in range(placement.row, placement.row + placement.row_span)
        for col in range(placement.col, placement.col + placement.col_span)
    }


def test_large_card_pushes_tall_card_below_and_small_card_fills_gap() -> None:
    sizes = {"A": CardSize(4, 4), "B": CardSize(1, 4), "C": CardSize(2, 1)}

    layout = build_grid_layout(["A", "B", "C"], 4, sizes.get)

    assert (layout["A"].row, layout["A"].col) == (1, 1)
    assert layout["B"].row >= 5
    assert layout["B"].col == 1
    assert layout["C"].col >= 2


def test_placements_never_overlap_and_keep_requested_sizes() -> None:
    rng = random.Random(42)
    for _ in range(50):
        columns = rng.randint(1, 6)
        ids = [f"card_{index}" for index in range(rng.randint(1, 20))]
        sizes = {card_id: CardSize(rng.randint(1, columns), rng.randint(1, 4)) for card_id in ids}

        layout = build_grid_layout(ids, columns, sizes.get)

        assert set(layout) == set(ids)
        for card_id, placement in layout.items():
            assert placement.col_span == sizes[card_id].col_span
            assert placement.row_span == sizes[card_id].row_span
            assert placement.col + placement.col_span - 1 <= columns
        for first, second in itertools.combinations(layout.values(), 2):
            assert not (_cells(first) & _cells(second))


def test_identical_input_yields_identical_layout() -> None:
    ids = ["a", "b", "c", "d", "e"]
    sizes = {"a": (2, 1), "b": (1, 2), "c": (3, 1), "d": (1, 1), "e": (2, 2)}

    first = build_grid_layout(ids, 4, sizes.get)
    second = build_grid_layout(list(ids), 4, sizes.get)

    assert first == second


def test_cards_fill_rows_left_to_right() -> None:
    layout = build_grid_layout(["a", "b", "c"], 2, lambda _card_id: CardSize(1, 1))

    assert layout["a"].to_wire() == {"row": 1, "col": 1, "colSpan": 1, "rowSpan": 1}
    assert (layout["b"].row, layout["b"].col) == (1, 2)
    assert (layout["c"].row, layout["c"].col) == (2, 1)


def test_zero_or_invalid_columns_return_empty_layout() -> None:
    assert build_grid_layout(["a"], 0, lambda _card_id: CardSize()) == {}
    assert build_grid_layout(["a"], -3, lambda _card_id: CardSize()) == {}
    assert build_grid_layout(["a"], "wide", lambda _card_id: CardSize()) == {}


def test_card_wider_than_grid_is_clamped_to_grid_width(caplog) -> None:
    with caplog.at_level("WARNING"):
        layout = build_grid_layout(["wide"], 3, lambda _card_id: {"colSpan": 7, "rowSpan": 1})

    assert layout["wide"].col_span == 3
    assert "Card wider than grid" in caplog.text


def test_missing_or_malformed_sizes_default_to_single_cell() -> None:
    sizes = {"b": {"colSpan": "x"}, "c": {"colSpan": 0, "rowSpan": -2}}

    layout = build_grid_layout(["a", "b", "c"], 4, sizes.get)

    assert all((placement.col_span, placement.row_span) == (1, 1) for placement in layout.values())


def test_non_finite_spans_default_to_single_cell() -> None:
    sizes = {
        "a": {"colSpan": float("inf"), "rowSpan": 1},
        "b": {"colSpan": float("nan"), "rowSpan": float("-inf")},
        "c": (1, float("inf")),
    }

    layout = build_grid_layout(["a", "b", "c"], 4, sizes.get)

    assert all((placement.col_span, placement.row_span) == (1, 1) for placement in layout.values())
    assert [(layout[key].row, layout[key].col) for key in ("a", "b", "c")] == [(1, 1), (1, 2), (1, 3)]


def test_non_finite_columns_return_empty_layout() -> None:
    assert build_grid_layout(["a"], float("inf"), lambda _card_id: CardSize()) == {}
    assert build_grid_layout(["a"], float("nan"), lambda _card_id: CardSize()) == {}
