import io
import json
import sys
from pathlib import Path

import pytest
from docx import Document
from openpyxl import Workbook

sys.path.append(str(Path(__file__).resolve().parents[1]))

from neo.core.errors import ParseError
from neo.extractors.normalize import UploadedFile, normalize


def _upload(name: str, text: str) -> UploadedFile:
    return UploadedFile(file_name=name, data=text.encode("utf-8"))


def _workbook_bytes() -> bytes:
    workbook = Workbook()
    first = workbook.active
    first.title = "Revenue"
    first.append(["tier", "price"])
    first.append(["Basic", 29])
    first.append(["Pro", 79])
    second = workbook.create_sheet("Ignored")
    second.append(["other"])
    second.append(["value"])
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _docx_bytes(*paragraphs: str) -> bytes:
    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def test_json_payload_is_kept_verbatim():
    record = normalize(_upload("plan.json", '{"a": 1}'), "strategy")
    assert record.format == "json"
    assert record.data == {"a": 1}
    assert record.file_name == "plan.json"
    assert record.document_type == "strategy"
    assert record.last_modified is not None


def test_csv_rows_are_typed():
    record = normalize(_upload("kpis.csv", "name,value\nx,1"), "okrs")
    assert record.format == "csv"
    assert record.data == [{"name": "x", "value": 1}]
    assert record.meta == {"fields": ["name", "value"], "rows": 1}


def test_extension_match_is_case_insensitive():
    record = normalize(_upload("KPIS.CSV", "name,value\ny,2.5"), "okrs")
    assert record.format == "csv"
    assert record.data == [{"name": "y", "value": 2.5}]


def test_unknown_extension_falls_back_to_text():
    record = normalize(_upload("notes.xyz", "hello"), "strategy")
    assert record.format == "unknown"
    assert record.content == "hello"


def test_file_without_extension_is_unknown():
    record = normalize(_upload("README", "plain"), "canvas")
    assert record.format == "unknown"
    assert record.content == "plain"


@pytest.mark.parametrize("name", ["notes.txt", "notes.md"])
def test_text_files_store_raw_text(name):
    record = normalize(_upload(name, "# Vision\nGrow"), "strategy")
    assert record.format == "text"
    assert record.content == "# Vision\nGrow"


def test_malformed_json_raises_parse_error():
    with pytest.raises(ParseError) as excinfo:
        normalize(_upload("broken.json", '{"a": '), "strategy")
    assert excinfo.value.file_name == "broken.json"


def test_malformed_csv_raises_parse_error():
    with pytest.raises(ParseError):
        normalize(_upload("broken.csv", "a,b\n1,2\n3,4,5,6\n"), "okrs")


def test_empty_csv_yields_no_rows():
    record = normalize(_upload("empty.csv", ""), "okrs")
    assert record.format == "csv"
    assert record.data == []


def test_excel_reads_only_the_first_sheet():
    record = normalize(UploadedFile(file_name="revenue.xlsx", data=_workbook_bytes()), "financial projection")
    assert record.format == "excel"
    assert record.sheet_name == "Revenue"
    assert record.data == [{"tier": "Basic", "price": 29}, {"tier": "Pro", "price": 79}]


def test_corrupt_workbook_raises_parse_error():
    with pytest.raises(ParseError):
        normalize(UploadedFile(file_name="broken.xlsx", data=b"not a workbook"), "financial projection")


def test_word_document_keeps_only_text():
    data = _docx_bytes("Vision", "Empower leaders")
    record = normalize(UploadedFile(file_name="strategy.docx", data=data), "strategy")
    assert record.format == "word"
    assert record.content == "Vision\nEmpower leaders"
    assert record.data is None


def test_legacy_doc_that_cannot_be_opened_raises_parse_error():
    with pytest.raises(ParseError):
        normalize(_upload("legacy.doc", "binary-ish"), "strategy")


def test_storage_form_uses_envelope_field_names():
    record = normalize(_upload("plan.json", '{"a": 1}'), "strategy")
    stored = record.to_storage()
    assert stored["type"] == "strategy"
    assert stored["fileName"] == "plan.json"
    assert stored["format"] == "json"
    assert "lastModified" in stored
    assert "sheetName" not in stored
    json.dumps(stored)


def test_csv_headers_that_collide_after_stripping_are_suffixed():
    record = normalize(_upload("a.csv", "a, a\n1,2"), "strategy")
    assert record.meta["fields"] == ["a", "a.1"]
    assert record.data == [{"a": 1, "a.1": 2}]


def test_excel_headers_that_collide_after_stripping_are_suffixed():
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["a", "a "])
    sheet.append([1, 2])
    buffer = io.BytesIO()
    workbook.save(buffer)
    record = normalize(UploadedFile(file_name="a.xlsx", data=buffer.getvalue()), "strategy")
    assert record.data == [{"a": 1, "a.1": 2}]


def test_csv_row_wider_than_header_raises_parse_error():
    with pytest.raises(ParseError):
        normalize(_upload("wide.csv", "name,value\nx,1,2"), "okrs")


def test_csv_cells_are_typed_one_by_one():
    text = "name,value,flag,ratio\nNA,1,true,0.5\nnull,abc,FALSE,\nN/A,,no,1e3\n"
    record = normalize(_upload("mixed.csv", text), "okrs")
    assert record.data == [
        {"name": "NA", "value": 1, "flag": True, "ratio": 0.5},
        {"name": "null", "value": "abc", "flag": False, "ratio": None},
        {"name": "N/A", "value": None, "flag": "no", "ratio": 1000.0},
    ]
    assert isinstance(record.data[0]["value"], int)


def test_csv_integer_column_with_blank_cell_stays_integer():
    record = normalize(_upload("counts.csv", "month,subscribers\nJan,10\nFeb,\nMar,30\n"), "okrs")
    assert [row["subscribers"] for row in record.data] == [10, None, 30]
    assert isinstance(record.data[2]["subscribers"], int)


def test_legacy_xls_workbook_is_read():
    xlwt = pytest.importorskip("xlwt")
    workbook = xlwt.Workbook()
    sheet = workbook.add_sheet("Plan")
    for col, value in enumerate(["month", "mrr"]):
        sheet.write(0, col, value)
    sheet.write(1, 0, "Jan")
    sheet.write(1, 1, 1200)
    buffer = io.BytesIO()
    workbook.save(buffer)

    record = normalize(UploadedFile(file_name="plan.xls", data=buffer.getvalue()), "financial projection")
    assert record.format == "excel"
    assert record.sheet_name == "Plan"
    assert record.data == [{"month": "Jan", "mrr": 1200}]


def test_dot_file_name_uses_its_extension():
    upload = _upload(".csv", "name,value\nx,1")
    assert upload.extension == "csv"
    assert normalize(upload, "okrs").format == "csv"
