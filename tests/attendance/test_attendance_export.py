from __future__ import annotations

import io
from datetime import date, datetime

import pandas as pd
import pytest

from coopvote.attendance.export import (
    EXPORT_COLUMNS,
    export_filename,
    export_rows,
    normalize_format,
    qr_png,
    to_csv_bytes,
    to_xlsx_bytes,
    voting_url,
)
from coopvote.attendance.model import AttendanceRecord, AttendanceView
from coopvote.core.enums import AttendanceStatus, MemberStatus
from coopvote.core.exceptions import ValidationError
from coopvote.members.model import Member


def _views():
    member = Member(1, "Ana Pérez", "ana@coop.do", "001-1234567-8", None, MemberStatus.ACTIVE)
    record = AttendanceRecord(
        attendance_id=1,
        member_id=1,
        code="CODE1234",
        confirmed_at=datetime(2025, 3, 15, 8, 5),
        email_sent=True,
        email_sent_at=datetime(2025, 3, 15, 8, 6),
        status=AttendanceStatus.REGENERATED,
        regenerated_count=2,
    )
    return [AttendanceView(record=record, member=member)]


def test_export_rows_use_spanish_labels():
    row = export_rows(_views())[0]
    assert list(row) == EXPORT_COLUMNS
    assert row["#"] == 1
    assert row["Teléfono"] == "N/A"
    assert row["Fecha de Confirmación"] == "15/03/2025 08:05"
    assert row["Email Enviado"] == "Sí"
    assert row["Estado"] == "Regenerado"


def test_csv_has_bom_and_header():
    data = to_csv_bytes(export_rows(_views()))
    assert data.startswith(b"\xef\xbb\xbf")
    text = data.decode("utf-8-sig")
    assert text.splitlines()[0].startswith("#,Nombre,Cédula")
    assert "CODE1234" in text


def test_xlsx_round_trips_through_pandas():
    data = to_xlsx_bytes(export_rows(_views()))
    df = pd.read_excel(io.BytesIO(data), sheet_name="Asistencia")
    assert list(df.columns) == EXPORT_COLUMNS
    assert df.loc[0, "Código de Votación"] == "CODE1234"


def test_normalize_format():
    assert normalize_format(None) == "csv"
    assert normalize_format("XLSX") == "excel"
    assert normalize_format("excel") == "excel"
    with pytest.raises(ValidationError):
        normalize_format("pdf")


def test_export_filename():
    assert export_filename("csv", date(2025, 3, 15)) == "asistencia-2025-03-15.csv"
    assert export_filename("excel", date(2025, 3, 15)) == "asistencia-2025-03-15.xlsx"


def test_qr_png_encodes_voting_url():
    url = voting_url("https://asamblea.coop.do/", "CODE1234")
    assert url == "https://asamblea.coop.do/votacion?code=CODE1234"
    assert qr_png(url).getvalue().startswith(b"\x89PNG")
