"""
Tests for line parsers and the bulk loader.

Run with: pytest dbworker/services/test_bulk_loader.py
"""

import pytest

from ..errors import BulkLoadError
from ..models import Locality, Department
from .bulk_loader import BulkLoader
from .parsers import LocalityParser, DepartmentParser


class TestParsers:
    """Line parsing."""

    def test_locality_line(self):
        locality = LocalityParser().parse_line("1700\tFribourg\tfr")
        assert isinstance(locality, Locality)
        assert (locality.zip_code, locality.name, locality.canton) == (1700, "Fribourg", "FR")

    def test_department_line(self):
        department = DepartmentParser().parse_line("GE ; Geneva")
        assert isinstance(department, Department)
        assert (department.abbreviation, department.name) == ("GE", "Geneva")

    @pytest.mark.parametrize("line", [
        "NPA\tLocalite\tCanton",
        "1700\tFribourg",
        "1700\t\tFR",
        "1700\tFribourg\tFRI",
    ])
    def test_malformed_locality_lines_skipped(self, line):
        assert LocalityParser().parse_line(line) is None

    def test_strict_parser_raises(self):
        with pytest.raises(ValueError, match="expected 2 fields"):
            DepartmentParser(strict=True).parse_line("GE;Geneva;extra")

    def test_custom_separator(self):
        department = DepartmentParser(separator="|").parse_line("VD|Vaud")
        assert department.name == "Vaud"

    def test_empty_separator_rejected(self):
        with pytest.raises(ValueError):
            LocalityParser(separator="")


class TestBulkLoader:
    """Reading files into entity lists."""

    def test_load_tab_separated_file(self, tmp_path):
        path = tmp_path / "localities.txt"
        path.write_text(
            "NPA\tLocalite\tCanton\n"
            "1700\tFribourg\tFR\n"
            "\n"
            "2000\tNeuchâtel\tNE\r\n",
            encoding="utf-8"
        )

        localities = BulkLoader(LocalityParser("\t")).load(path, "utf-8")
        assert [(l.zip_code, l.name) for l in localities] == [(1700, "Fribourg"), (2000, "Neuchâtel")]

    def test_load_honours_encoding(self, tmp_path):
        path = tmp_path / "departments.txt"
        path.write_bytes("GE;Genève\nZH;Zürich\n".encode("latin-1"))

        departments = BulkLoader(DepartmentParser(";")).load(path, "latin-1")
        assert [d.name for d in departments] == ["Genève", "Zürich"]

    def test_wrong_encoding_fails(self, tmp_path):
        path = tmp_path / "departments.txt"
        path.write_bytes("GE;Genève\n".encode("latin-1"))

        with pytest.raises(BulkLoadError, match="Cannot decode"):
            BulkLoader(DepartmentParser()).load(path, "utf-8")

    def test_unknown_encoding_fails(self, tmp_path):
        path = tmp_path / "departments.txt"
        path.write_text("GE;Geneva\n", encoding="utf-8")

        with pytest.raises(BulkLoadError, match="Unknown encoding"):
            BulkLoader(DepartmentParser()).load(path, "no-such-codec")

    def test_missing_file_fails(self, tmp_path):
        with pytest.raises(BulkLoadError) as exc_info:
            BulkLoader(DepartmentParser()).load(tmp_path / "missing.txt")
        assert exc_info.value.path == tmp_path / "missing.txt"

    def test_strict_parser_failure_reports_line(self, tmp_path):
        path = tmp_path / "departments.txt"
        path.write_text("GE;Geneva\nbroken\n", encoding="utf-8")

        with pytest.raises(BulkLoadError) as exc_info:
            BulkLoader(DepartmentParser(strict=True)).load(path)
        assert exc_info.value.line_number == 2

    def test_empty_file_gives_empty_list(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")
        assert BulkLoader(LocalityParser()).load(path) == []
