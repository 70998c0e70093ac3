"""Tests for file delivery targets (memory, directory, HTTP download)."""

import codecs
from pathlib import Path

import pytest

from app.delivery import HttpDelivery, content_disposition
from clinic.services.delivery import DeliveredFile, DirectoryDelivery, MemoryDelivery
from clinic.services.errors import DeliveryError, ExportError


class TestMemoryDelivery:
    def test_keeps_files_in_order(self) -> None:
        delivery: MemoryDelivery = MemoryDelivery()
        assert delivery.deliver(b"a", "one.csv", "text/csv") == "memory:one.csv"
        delivery.deliver(b"b", "two.csv", "text/csv")

        assert [f.filename for f in delivery.delivered] == ["one.csv", "two.csv"]
        assert delivery.last == DeliveredFile("two.csv", "text/csv", b"b")

    def test_text_strips_bom(self) -> None:
        delivered: DeliveredFile = DeliveredFile("x.csv", "text/csv", codecs.BOM_UTF8 + "ação".encode())
        assert delivered.text == "ação"


class TestDirectoryDelivery:
    def test_writes_file(self, tmp_path: Path) -> None:
        delivery: DirectoryDelivery = DirectoryDelivery(tmp_path)
        destination: str = delivery.deliver(b"a,b\n1,2", "out.csv", "text/csv")

        target: Path = (tmp_path / "out.csv").resolve()
        assert Path(destination) == target
        assert target.read_bytes() == b"a,b\n1,2"

    def test_creates_export_dir_and_subdirectories(self, tmp_path: Path) -> None:
        delivery: DirectoryDelivery = DirectoryDelivery(tmp_path / "exports")
        destination: str = delivery.deliver(b"x", "2026/março.csv", "text/csv")

        assert Path(destination) == (tmp_path / "exports" / "2026" / "março.csv").resolve()
        assert Path(destination).read_bytes() == b"x"

    def test_overwrites_existing(self, tmp_path: Path) -> None:
        (tmp_path / "out.csv").write_bytes(b"old")
        DirectoryDelivery(tmp_path).deliver(b"new", "out.csv", "text/csv")
        assert (tmp_path / "out.csv").read_bytes() == b"new"

    def test_no_partial_files_left(self, tmp_path: Path) -> None:
        DirectoryDelivery(tmp_path).deliver(b"data", "out.csv", "text/csv")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["out.csv"]

    def test_refuses_path_outside_export_dir(self, tmp_path: Path) -> None:
        export_dir: Path = tmp_path / "exports"
        delivery: DirectoryDelivery = DirectoryDelivery(export_dir)

        with pytest.raises(DeliveryError, match="outside"):
            delivery.deliver(b"x", "../escape.csv", "text/csv")
        assert not (tmp_path / "escape.csv").exists()

    def test_refuses_absolute_path(self, tmp_path: Path) -> None:
        delivery: DirectoryDelivery = DirectoryDelivery(tmp_path / "exports")
        with pytest.raises(DeliveryError):
            delivery.target_path(str(tmp_path / "elsewhere.csv"))

    def test_refuses_export_dir_itself(self, tmp_path: Path) -> None:
        with pytest.raises(DeliveryError):
            DirectoryDelivery(tmp_path).target_path(".")

    def test_os_error_wrapped(self, tmp_path: Path) -> None:
        blocker: Path = tmp_path / "not-a-dir"
        blocker.write_text("file")
        delivery: DirectoryDelivery = DirectoryDelivery(blocker)

        with pytest.raises(DeliveryError) as exc_info:
            delivery.deliver(b"x", "out.csv", "text/csv")
        assert isinstance(exc_info.value, ExportError)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_failed_rename_removes_temp_file(self, tmp_path: Path) -> None:
        # a directory already sits under the target name, so the rename fails
        (tmp_path / "out.csv").mkdir()
        delivery: DirectoryDelivery = DirectoryDelivery(tmp_path)

        with pytest.raises(DeliveryError) as exc_info:
            delivery.deliver(b"x", "out.csv", "text/csv")
        assert isinstance(exc_info.value.__cause__, OSError)
        assert list(tmp_path.glob(".out.csv.*.part")) == []
        assert sorted(p.name for p in tmp_path.iterdir()) == ["out.csv"]
        assert (tmp_path / "out.csv").is_dir()


class TestContentDisposition:
    def test_ascii_filename(self) -> None:
        assert content_disposition("pacientes.csv") == 'attachment; filename="pacientes.csv"'

    def test_non_ascii_filename_percent_encoded(self) -> None:
        assert (
            content_disposition("financeiro_março_de_2026.csv")
            == "attachment; filename*=utf-8''financeiro_mar%C3%A7o_de_2026.csv"
        )

    def test_space_percent_encoded(self) -> None:
        assert content_disposition("a b.csv") == "attachment; filename*=utf-8''a%20b.csv"


class TestHttpDelivery:
    def test_no_content_before_delivery(self) -> None:
        response = HttpDelivery().response(headers={"X-Export-Rows": "0"})
        assert response.status_code == 204
        assert response.headers["x-export-rows"] == "0"

    def test_attachment_response(self) -> None:
        delivery: HttpDelivery = HttpDelivery()
        assert delivery.deliver(b"a\n1", "a.csv", "text/csv") == "http:a.csv"

        response = delivery.response()
        assert response.status_code == 200
        assert response.body == b"a\n1"
        assert response.headers["content-disposition"] == 'attachment; filename="a.csv"'
        assert response.headers["content-type"].startswith("text/csv")
