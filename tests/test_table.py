"""Tests for the table store: rows, lookup, filtering, removal and config."""

from __future__ import annotations

import threading

import pytest

from pi.table.cell import Transform
from pi.table.errors import ColumnNotFoundError, RowNotFoundError, TableError
from pi.table.table import Row, Table

from .gdp import build_gdp_table, red, round2


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------


class TestRow:
    def test_insert_is_chainable(self) -> None:
        row = Row().insert(1, "a").insert(2.5)
        assert row.values == [1, "a", 2.5]
        assert len(row) == 3

    def test_change_replaces_value_and_transform(self) -> None:
        row = Row().insert(1, 2).modify(red, 0)
        row.change(0, 9)
        assert row.values == [9, 2]
        assert row.cells[0].transform.is_identity

    def test_out_of_range_indices_are_ignored(self) -> None:
        row = Row().insert(1)
        row.change(5, "x").modify(red, 3, -1)
        assert row.values == [1]
        assert row.cells[0].transform.is_identity

    def test_modify_accepts_transform(self) -> None:
        transform = Transform.custom(str.upper)
        row = Row().insert("a").modify(transform, 0)
        assert row.cells[0].transform is transform
        assert row.cells[0].render(transformed=True) == "A"

    def test_modify_does_not_touch_value(self) -> None:
        row = Row().insert("a").modify(str.upper, 0)
        assert row.values == ["a"]


class TestAddRows:
    def test_gdp_table_shape(self) -> None:
        table = build_gdp_table()
        assert table.row_count == 23
        assert table.header is table.get_row(0)
        assert table.footer is table.get_row(22)
        assert table.get_row(21).name == "typo"

    def test_names_are_lowercased(self) -> None:
        table = Table()
        assert table.add_row("Typo").name == "typo"

    def test_header_is_unique(self) -> None:
        table = build_gdp_table()
        assert table.add_row("HEADER") is table.header
        assert table.add_footer() is table.footer
        assert table.row_count == 23

    def test_add_header_replaces_cells(self) -> None:
        table = Table("a", "b")
        table.add_header(["x"])
        assert table.header.values == ["x"]
        assert table.row_count == 1

    def test_empty_title_and_footnote_rejected(self) -> None:
        table = Table()
        with pytest.raises(ValueError):
            table.add_title("")
        with pytest.raises(ValueError):
            table.add_footnote("")

    def test_titles_and_footnotes_are_copies(self) -> None:
        table = build_gdp_table()
        table.titles.append("ignored")
        assert len(table.titles) == 2
        assert len(table.footnotes) == 2


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class TestLookup:
    def test_get_row_by_position(self) -> None:
        table = build_gdp_table()
        assert table.get_row(1).values[0] == 1996

    @pytest.mark.parametrize("nth", [-1, 23, 100])
    def test_get_row_out_of_range(self, nth: int) -> None:
        with pytest.raises(RowNotFoundError):
            build_gdp_table().get_row(nth)

    def test_get_row_by_name_is_case_insensitive(self) -> None:
        assert build_gdp_table().get_row_by_name("TYPO").values[0] == 2017

    def test_get_special_rows_by_name(self) -> None:
        table = build_gdp_table()
        assert table.get_row_by_name("header") is table.header
        assert table.get_row_by_name("Footer") is table.footer

    def test_missing_name(self) -> None:
        with pytest.raises(RowNotFoundError):
            build_gdp_table().get_row_by_name("nope")

    def test_missing_footer(self) -> None:
        with pytest.raises(RowNotFoundError):
            build_gdp_table(footer=False).get_row_by_name("footer")

    def test_row_not_found_is_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            Table().get_row(0)


class TestColumns:
    def test_column_index_is_case_insensitive(self) -> None:
        assert build_gdp_table().column_index("inflation") == 2

    def test_column_index_without_header(self) -> None:
        assert build_gdp_table(header=False).column_index("Year") is None

    def test_column_indices_skip_unknown(self) -> None:
        assert build_gdp_table().column_indices("Inflation", "Nope", 0, -1) == [2, 0]

    def test_change_by_name(self) -> None:
        table = build_gdp_table()
        row = table.get_row_by_name("typo")
        table.change(row, "Year", 2016)
        assert row.values[0] == 2016

    def test_modify_by_name(self) -> None:
        table = build_gdp_table()
        row = table.modify(table.get_row(1), red, "Year", "Nope")
        assert row.cells[0].render(transformed=True) == red(1996)
        assert row.cells[1].transform.is_identity


# ---------------------------------------------------------------------------
# Formats, widths and eager transforms
# ---------------------------------------------------------------------------


class TestConfig:
    def test_set_format_returns_indices(self) -> None:
        table = build_gdp_table()
        assert table.set_format("%.2f", "Inflation", "GDP growth") == [2, 1]
        assert table.snapshot().formats == {2: "%.2f", 1: "%.2f"}

    def test_set_format_unknown_column(self) -> None:
        table = build_gdp_table()
        assert table.set_format("%.2f", "Nope") == []
        assert table.snapshot().formats == {}

    def test_set_column_width(self) -> None:
        table = build_gdp_table()
        assert table.set_column_width(15, "GDP growth") == [1]
        assert table.snapshot().width_overrides == {1: 15}


class TestTransform:
    """``transform`` rewrites stored values of body rows only."""

    def test_body_values_rewritten(self) -> None:
        table = build_gdp_table()
        table.transform(round2, "GDP growth")
        assert table.get_row(1).values[1] == "5.15"

    def test_lists_rewritten_element_wise(self) -> None:
        table = build_gdp_table()
        table.transform(round2, "GDP growth")
        assert table.get_row(20).values[1] == ["1.78", 0]

    def test_header_and_footer_untouched(self) -> None:
        table = build_gdp_table()
        table.transform(round2, "GDP growth", "Inflation")
        assert table.header.values == ["Year", "GDP growth", "Inflation"]
        assert table.footer.values == ["Means:", 4.17, 3.64]

    def test_short_rows_are_skipped(self) -> None:
        table = Table("a", "b")
        table.add_row().insert(1)
        assert table.transform(str, "b") == [1]
        assert table.get_row(1).values == [1]


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def _in_2000s(year: int) -> bool:
    return 2000 <= year <= 2009


class TestFilter:
    def test_filter_by_year(self) -> None:
        table = build_gdp_table()
        filtered = table.filter(_in_2000s, "Year")
        assert filtered.row_count == 11
        assert filtered.header is table.header
        assert filtered.footer is None
        assert table.row_count == 23

    def test_keep_footer(self) -> None:
        filtered = build_gdp_table().filter(_in_2000s, "Year", keep_footer=True)
        assert filtered.row_count == 12
        assert filtered.footer is not None

    def test_negative_inflation(self) -> None:
        table = build_gdp_table()
        assert table.filter(lambda v: v < 0, "Inflation").row_count == 3
        assert table.filter(lambda v: v < 0, "Inflation", keep_footer=True).row_count == 4

    def test_no_body_row_matches(self) -> None:
        filtered = build_gdp_table().filter(lambda v: isinstance(v, int), "Inflation")
        assert filtered.row_count == 1

    def test_several_columns(self) -> None:
        filtered = build_gdp_table().filter(lambda year, inflation: year > 2010 and inflation < 1, "Year", 2)
        years = [filtered.get_row(i).values[0] for i in range(1, filtered.row_count)]
        assert years == [2014, 2015, 2017]

    @pytest.mark.parametrize("column", ["Nope", ""])
    def test_unknown_column(self, column: str) -> None:
        with pytest.raises(ColumnNotFoundError):
            build_gdp_table().filter(lambda v: True, column)

    def test_inplace(self) -> None:
        table = build_gdp_table()
        assert table.filter(_in_2000s, "Year", inplace=True) is table
        assert table.row_count == 11
        assert table.footer is None

    def test_result_keeps_metadata(self) -> None:
        table = build_gdp_table()
        table.set_format("%.2f", "Inflation")
        filtered = table.filter(_in_2000s, "Year")
        assert filtered.titles == table.titles
        assert filtered.footnotes == table.footnotes
        assert filtered.snapshot().formats == {2: "%.2f"}

    def test_result_shares_rows(self) -> None:
        table = build_gdp_table()
        filtered = table.filter(_in_2000s, "Year")
        filtered.get_row(1).change(0, 1999)
        assert table.get_row(5).values[0] == 1999


class TestFilterByRowNames:
    @pytest.mark.parametrize(
        ("predicate", "keep_footer", "expected"),
        [
            (lambda name: name == "typo", False, 2),
            (lambda name: name == "typo", True, 3),
            (lambda name: name in ("typo", "footer"), False, 3),
            (lambda name: True, False, 23),
            (lambda name: name != "typo", False, 22),
            (lambda name: name == "", False, 21),
            (lambda name: name == "", True, 22),
        ],
    )
    def test_counts(self, predicate, keep_footer: bool, expected: int) -> None:
        table = build_gdp_table()
        filtered = table.filter_by_row_names(predicate, keep_footer=keep_footer)
        assert filtered.row_count == expected
        assert filtered.header is table.header

    def test_inplace(self) -> None:
        table = build_gdp_table()
        table.filter_by_row_names(lambda name: name == "typo", inplace=True)
        assert table.row_names == ["header", "typo"]


# ---------------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------------


class TestRemoveRows:
    def test_remove_positions(self) -> None:
        table = build_gdp_table()
        table.remove_rows(1, 2, 20, 21)
        assert table.row_count == 19
        assert table.get_row(1).values[0] == 1998

    def test_duplicates_count_once(self) -> None:
        table = build_gdp_table()
        table.remove_rows(*[21] * 6)
        assert table.row_count == 22

    @pytest.mark.parametrize("nth", [0, 22])
    def test_special_rows_are_protected(self, nth: int) -> None:
        table = build_gdp_table()
        with pytest.raises(TableError):
            table.remove_rows(nth)
        assert table.row_count == 23

    def test_out_of_range(self) -> None:
        table = build_gdp_table()
        with pytest.raises(RowNotFoundError):
            table.remove_rows(1, 30)
        assert table.row_count == 23

    def test_no_positions(self) -> None:
        with pytest.raises(ValueError):
            build_gdp_table().remove_rows()


class TestRemoveRowsByName:
    def test_remove_named_row(self) -> None:
        table = build_gdp_table()
        table.remove_rows_by_name("typo")
        assert table.row_count == 22

    def test_remove_unnamed_rows(self) -> None:
        table = build_gdp_table()
        table.remove_rows_by_name("")
        assert table.row_names == ["header", "typo", "footer"]

    def test_remove_all_body_rows(self) -> None:
        table = build_gdp_table()
        table.remove_rows_by_name("TYPO", "")
        assert table.row_count == 2

    def test_unknown_name_is_ignored(self) -> None:
        table = build_gdp_table()
        table.remove_rows_by_name("nope")
        assert table.row_count == 23

    @pytest.mark.parametrize("name", ["header", "footer"])
    def test_special_rows_are_protected(self, name: str) -> None:
        table = build_gdp_table()
        with pytest.raises(TableError):
            table.remove_rows_by_name("typo", name)
        assert table.row_count == 23

    def test_no_names(self) -> None:
        with pytest.raises(ValueError):
            build_gdp_table().remove_rows_by_name()


# ---------------------------------------------------------------------------
# Snapshots and concurrency
# ---------------------------------------------------------------------------


class TestSnapshot:
    def test_row_kinds(self) -> None:
        kinds = [row.kind for row in build_gdp_table().snapshot().rows]
        assert kinds[0] == "header"
        assert kinds[-1] == "footer"
        assert set(kinds[1:-1]) == {"body"}

    def test_snapshot_is_isolated_from_later_changes(self) -> None:
        table = Table("a")
        row = table.add_row().insert([1, 2])
        snapshot = table.snapshot()
        row.cells[0].value.append(3)
        table.add_row().insert(4)
        assert len(snapshot.rows) == 2
        assert snapshot.rows[1].cells[0].value == [1, 2]


class TestConcurrency:
    def test_concurrent_inserts_and_renders(self) -> None:
        table = Table("n", "square")
        errors: list[Exception] = []

        def writer(offset: int) -> None:
            try:
                for i in range(50):
                    n = offset + i
                    table.add_row().insert(n).insert(n * n)
            except Exception as e:
                errors.append(e)

        def reader() -> None:
            try:
                for _ in range(20):
                    lines = table.render_to_string().split("\n")
                    assert len({len(line) for line in lines}) == 1
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(k * 100,)) for k in range(4)]
        threads += [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert table.row_count == 1 + 4 * 50
