"""Tests for clinic.services.tabular."""

import codecs
import csv
import io
from decimal import Decimal

import pytest

from clinic.services.delivery import MemoryDelivery
from clinic.services.errors import RecordShapeError
from clinic.services.tabular import (
    ExportArtifact,
    RenderedDocument,
    ShapePolicy,
    TabularExporter,
    format_cell,
    render_document,
    resolve_header,
)


def _parse(text: str, delimiter: str = ",") -> list[list[str]]:
    return list(csv.reader(io.StringIO(text), delimiter=delimiter))


class TestFormatCell:
    def test_none_is_empty(self) -> None:
        assert format_cell(None) == ""

    def test_plain_text_verbatim(self) -> None:
        assert format_cell("Bob") == "Bob"
        assert format_cell("") == ""

    def test_delimiter_wraps_in_quotes(self) -> None:
        assert format_cell("Jane, A.") == '"Jane, A."'

    def test_embedded_quotes_doubled(self) -> None:
        assert format_cell('say "hi"') == '"say ""hi"""'

    def test_line_breaks_quoted(self) -> None:
        assert format_cell("a\nb") == '"a\nb"'
        assert format_cell("a\r\nb") == '"a\r\nb"'

    def test_non_text_uses_str(self) -> None:
        assert format_cell(30) == "30"
        assert format_cell(1.5) == "1.5"
        assert format_cell(True) == "True"
        assert format_cell(Decimal("10.50")) == "10.50"

    def test_quoting_follows_delimiter(self) -> None:
        assert format_cell("a;b", ";") == '"a;b"'
        assert format_cell("a,b", ";") == "a,b"


class TestRenderDocument:
    def test_mixed_records(self) -> None:
        records: list[dict[str, object]] = [
            {"Name": "Jane, A.", "Age": 30},
            {"Name": "Bob", "Age": None},
        ]
        doc: RenderedDocument | None = render_document(records)
        assert doc is not None
        assert doc.text == 'Name,Age\n"Jane, A.",30\nBob,'
        assert doc.columns == ["Name", "Age"]
        assert doc.row_count == 2
        assert doc.warnings == []

    def test_empty_returns_none(self) -> None:
        assert render_document([]) is None

    def test_one_line_per_record_plus_header(self) -> None:
        records: list[dict[str, int]] = [{"n": i} for i in range(5)]
        doc = render_document(records)
        assert doc is not None
        assert len(doc.text.split("\n")) == 6
        assert not doc.text.endswith("\n")

    def test_header_follows_first_record_key_order(self) -> None:
        doc = render_document([{"b": 1, "a": 2}, {"a": 3, "b": 4}])
        assert doc is not None
        assert doc.text == "b,a\n1,2\n4,3"

    def test_single_null_cell(self) -> None:
        doc = render_document([{"a": None}])
        assert doc is not None
        assert doc.text == "a\n"

    def test_records_not_reordered_or_deduplicated(self) -> None:
        doc = render_document([{"x": "z"}, {"x": "a"}, {"x": "z"}])
        assert doc is not None
        assert doc.text == "x\nz\na\nz"

    def test_header_names_escaped(self) -> None:
        doc = render_document([{"Valor, R$": 1}])
        assert doc is not None
        assert doc.text == '"Valor, R$"\n1'

    def test_accepts_generator(self) -> None:
        doc = render_document({"i": i} for i in range(3))
        assert doc is not None
        assert doc.row_count == 3

    def test_deterministic(self) -> None:
        records: list[dict[str, object]] = [{"a": "x,y", "b": 2}, {"a": None, "b": 3}]
        first = render_document(records)
        second = render_document(records)
        assert first is not None and second is not None
        assert first.text == second.text

    def test_parses_back_with_csv_reader(self) -> None:
        tricky: list[str] = ['He said "no"', "line1\nline2", "a,b,c", "plain"]
        doc = render_document([{"v": value} for value in tricky])
        assert doc is not None
        rows: list[list[str]] = _parse(doc.text)
        assert rows[0] == ["v"]
        assert [row[0] for row in rows[1:]] == tricky

    def test_custom_delimiter(self) -> None:
        doc = render_document([{"a": "1,5", "b": "x;y"}], delimiter=";")
        assert doc is not None
        assert doc.text == 'a;b\n1,5;"x;y"'
        assert _parse(doc.text, ";")[1] == ["1,5", "x;y"]


class TestShapePolicy:
    def test_union_appends_new_columns(self) -> None:
        doc = render_document([{"a": 1, "b": 2}, {"a": 3, "c": 4}])
        assert doc is not None
        assert doc.columns == ["a", "b", "c"]
        assert doc.text == "a,b,c\n1,2,\n3,,4"
        assert len(doc.warnings) == 1
        assert "added columns ['c']" in doc.warnings[0]

    def test_union_missing_key_is_empty_cell(self) -> None:
        doc = render_document([{"a": 1, "b": 2}, {"a": 3}])
        assert doc is not None
        assert doc.text == "a,b\n1,2\n3,"
        assert doc.warnings == ["1 record(s) do not match the fields of the first record"]

    def test_first_drops_extra_fields(self) -> None:
        doc = render_document([{"a": 1}, {"a": 2, "z": 9}], policy=ShapePolicy.FIRST)
        assert doc is not None
        assert doc.text == "a\n1\n2"
        assert "dropped" in doc.warnings[0]

    def test_strict_raises(self) -> None:
        with pytest.raises(RecordShapeError) as exc_info:
            render_document([{"a": 1}, {"a": 2}, {"a": 3, "z": 9}], policy=ShapePolicy.STRICT)
        assert exc_info.value.index == 2
        assert exc_info.value.extra == ["z"]
        assert exc_info.value.missing == []

    def test_strict_allows_different_key_order(self) -> None:
        header, warnings = resolve_header([{"a": 1, "b": 2}, {"b": 3, "a": 4}], ShapePolicy.STRICT)
        assert header == ["a", "b"]
        assert warnings == []

    def test_uniform_records_no_warnings(self) -> None:
        header, warnings = resolve_header([{"a": 1}, {"a": 2}])
        assert header == ["a"]
        assert warnings == []


class FailingDelivery:
    def deliver(self, content: bytes, filename: str, media_type: str) -> str:
        raise OSError("disk full")


class TestTabularExporter:
    def test_export_delivers_document(self) -> None:
        delivery: MemoryDelivery = MemoryDelivery()
        exporter: TabularExporter = TabularExporter(delivery)

        artifact: ExportArtifact | None = exporter.export(
            [{"Name": "Jane, A.", "Age": 30}, {"Name": "Bob", "Age": None}], "people"
        )

        assert artifact is not None
        assert artifact.filename == "people.csv"
        assert artifact.media_type == "text/csv"
        assert artifact.destination == "memory:people.csv"
        assert artifact.row_count == 2
        assert len(delivery.delivered) == 1
        assert delivery.last is not None
        assert delivery.last.content == b'Name,Age\n"Jane, A.",30\nBob,'
        assert delivery.last.media_type == "text/csv"

    def test_empty_input_delivers_nothing(self) -> None:
        delivery: MemoryDelivery = MemoryDelivery()
        assert TabularExporter(delivery).export([], "empty") is None
        assert delivery.delivered == []
        assert delivery.last is None

    def test_extension_appended_unconditionally(self) -> None:
        exporter: TabularExporter = TabularExporter(MemoryDelivery())
        assert exporter.filename_for("data.csv") == "data.csv.csv"
        assert exporter.filename_for("") == ".csv"

    def test_filename_passed_through_unsanitized(self) -> None:
        delivery: MemoryDelivery = MemoryDelivery()
        TabularExporter(delivery).export([{"a": 1}], "reports/março 2026")
        assert delivery.last is not None
        assert delivery.last.filename == "reports/março 2026.csv"

    def test_bom_prefix(self) -> None:
        delivery: MemoryDelivery = MemoryDelivery()
        TabularExporter(delivery, bom=True).export([{"a": "ç"}], "bom")
        assert delivery.last is not None
        assert delivery.last.content.startswith(codecs.BOM_UTF8)
        assert delivery.last.text == "a\nç"

    def test_byte_size_counts_encoded_bytes(self) -> None:
        artifact = TabularExporter(MemoryDelivery()).export([{"a": "é"}], "x")
        assert artifact is not None
        assert artifact.byte_size == len("a\né".encode("utf-8"))

    def test_custom_media_type_and_extension(self) -> None:
        delivery: MemoryDelivery = MemoryDelivery()
        exporter: TabularExporter = TabularExporter(
            delivery, delimiter="\t", extension=".tsv", media_type="text/tab-separated-values"
        )
        artifact = exporter.export([{"a": 1, "b": 2}], "tab")
        assert artifact is not None
        assert artifact.filename == "tab.tsv"
        assert delivery.last is not None
        assert delivery.last.content == b"a\tb\n1\t2"
        assert delivery.last.media_type == "text/tab-separated-values"

    def test_delivery_failure_propagates(self) -> None:
        with pytest.raises(OSError, match="disk full"):
            TabularExporter(FailingDelivery()).export([{"a": 1}], "x")

    def test_shape_error_delivers_nothing(self) -> None:
        delivery: MemoryDelivery = MemoryDelivery()
        exporter: TabularExporter = TabularExporter(delivery, shape_policy=ShapePolicy.STRICT)
        with pytest.raises(RecordShapeError):
            exporter.export([{"a": 1}, {"b": 2}], "x")
        assert delivery.delivered == []

    def test_warnings_carried_on_artifact(self) -> None:
        artifact = TabularExporter(MemoryDelivery()).export([{"a": 1}, {"b": 2}], "x")
        assert artifact is not None
        assert artifact.columns == ["a", "b"]
        assert len(artifact.warnings) == 1
