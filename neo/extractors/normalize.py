"""Normalize uploaded files into :class:`IngestionRecord` envelopes.

Dispatch happens on the file extension (case insensitive):

* ``csv`` → header row plus per cell dynamic typing → ``csv``
* ``xlsx``/``xls`` → rows of the first sheet only → ``excel``
* ``docx``/``doc`` → raw text, formatting discarded → ``word``
* ``json`` → parsed verbatim → ``json``
* ``txt``/``md`` → raw text → ``text``

Anything else is stored as raw text under ``unknown`` and never fails.
Malformed CSV or JSON raises :class:`ParseError`; no partial record is built.
"""

from __future__ import annotations

import io
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable

import pandas as pd
from docx import Document

from neo.core.errors import ParseError
from neo.core.schema import IngestionRecord, utc_now


logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {"xlsx", "xls"}
WORD_SUFFIXES = {"docx", "doc"}
TEXT_SUFFIXES = {"txt", "md"}

_INT_PATTERN = re.compile(r"^\s*-?\d+\s*$")
_FLOAT_PATTERN = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
_BOOLEANS = {"true": True, "TRUE": True, "false": False, "FALSE": False}


@dataclass(frozen=True)
class UploadedFile:
    file_name: str
    data: bytes

    @property
    def extension(self) -> str:
        # text after the last dot, so ".csv" is still a csv file
        _, dot, suffix = self.file_name.rpartition(".")
        return suffix.lower() if dot else ""

    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


def _unique_headers(columns: list[Any]) -> list[str]:
    """Strip header names and suffix repeats with ``.1``, ``.2`` like pandas does."""

    headers: list[str] = []
    seen: set[str] = set()
    for column in columns:
        base = "" if column is None or (isinstance(column, float) and math.isnan(column)) else str(column).strip()
        name, counter = base, 0
        while name in seen:
            counter += 1
            name = f"{base}.{counter}"
        seen.add(name)
        headers.append(name)
    return headers


def _coerce_cell(value: Any) -> Any:
    """Type a CSV cell on its own: int, float or boolean literals, empty as ``None``."""

    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    text = str(value)
    if text == "":
        return None
    if text in _BOOLEANS:
        return _BOOLEANS[text]
    if _INT_PATTERN.match(text):
        return int(text)
    if _FLOAT_PATTERN.match(text):
        return float(text)
    return text


def _frame_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    frame = frame.set_axis(_unique_headers(list(frame.columns)), axis=1)
    # round-trip through JSON so numpy scalars and NaN become plain values
    return json.loads(frame.to_json(orient="records", date_format="iso", force_ascii=False))


def _normalize_csv(upload: UploadedFile, document_type: str) -> IngestionRecord:
    try:
        # header=None keeps pandas from turning an extra leading field into a row index;
        # rows wider than the header then fail as bad lines
        frame = pd.read_csv(
            io.BytesIO(upload.data),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines="error",
        )
    except pd.errors.EmptyDataError:
        frame = pd.DataFrame()
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise ParseError(upload.file_name, str(exc)) from exc

    rows = frame.values.tolist()
    fields = _unique_headers(rows[0]) if rows else []
    data = [{field: _coerce_cell(cell) for field, cell in zip(fields, row)} for row in rows[1:]]
    return IngestionRecord(
        type=document_type,
        format="csv",
        fileName=upload.file_name,
        data=data,
        meta={"fields": fields, "rows": len(data)},
        lastModified=utc_now(),
    )


def _normalize_excel(upload: UploadedFile, document_type: str) -> IngestionRecord:
    try:
        workbook = pd.ExcelFile(io.BytesIO(upload.data))
        sheet_name = workbook.sheet_names[0]
        frame = workbook.parse(sheet_name=sheet_name)
        data = _frame_records(frame.dropna(how="all"))
    except Exception as exc:  # pandas/openpyxl/xlrd raise a variety of errors for corrupt workbooks
        raise ParseError(upload.file_name, str(exc)) from exc

    return IngestionRecord(
        type=document_type,
        format="excel",
        fileName=upload.file_name,
        sheetName=str(sheet_name),
        data=data,
        lastModified=utc_now(),
    )


def _normalize_word(upload: UploadedFile, document_type: str) -> IngestionRecord:
    try:
        document = Document(io.BytesIO(upload.data))
    except Exception as exc:  # python-docx cannot open legacy .doc or corrupt archives
        raise ParseError(upload.file_name, str(exc)) from exc

    text = "\n".join(paragraph.text for paragraph in document.paragraphs)
    return IngestionRecord(
        type=document_type,
        format="word",
        fileName=upload.file_name,
        content=text,
        lastModified=utc_now(),
    )


def _normalize_json(upload: UploadedFile, document_type: str) -> IngestionRecord:
    try:
        payload = json.loads(upload.data.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(upload.file_name, str(exc)) from exc

    return IngestionRecord(
        type=document_type,
        format="json",
        fileName=upload.file_name,
        data=payload,
        lastModified=utc_now(),
    )


def _normalize_text(upload: UploadedFile, document_type: str) -> IngestionRecord:
    return IngestionRecord(
        type=document_type,
        format="text",
        fileName=upload.file_name,
        content=upload.text(),
        lastModified=utc_now(),
    )


def _normalize_unknown(upload: UploadedFile, document_type: str) -> IngestionRecord:
    return IngestionRecord(
        type=document_type,
        format="unknown",
        fileName=upload.file_name,
        content=upload.text(),
        lastModified=utc_now(),
    )


Normalizer = Callable[[UploadedFile, str], IngestionRecord]

_DISPATCH: dict[str, Normalizer] = {"csv": _normalize_csv, "json": _normalize_json}
_DISPATCH.update({suffix: _normalize_excel for suffix in EXCEL_SUFFIXES})
_DISPATCH.update({suffix: _normalize_word for suffix in WORD_SUFFIXES})
_DISPATCH.update({suffix: _normalize_text for suffix in TEXT_SUFFIXES})


def normalize(upload: UploadedFile, document_type: str) -> IngestionRecord:
    handler = _DISPATCH.get(upload.extension, _normalize_unknown)
    record = handler(upload, document_type)
    logger.info("normalized %s as %s for %s", upload.file_name, record.format, document_type)
    return record
