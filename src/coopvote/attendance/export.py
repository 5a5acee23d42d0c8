"""Attendance export (CSV / Excel) and voting-code QR images."""
from __future__ import annotations

import csv
import io
from datetime import date
from typing import List, Sequence

import pandas as pd
import qrcode

from ..common.datetime_utils import format_datetime_es
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceView

EXPORT_COLUMNS = [
    "#",
    "Nombre",
    "Cédula",
    "Email",
    "Teléfono",
    "Código de Votación",
    "Fecha de Confirmación",
    "Email Enviado",
    "Estado",
    "Veces Regenerado",
]

STATUS_LABELS = {
    AttendanceStatus.ACTIVE: "Activo",
    AttendanceStatus.CANCELLED: "Cancelado",
    AttendanceStatus.REGENERATED: "Regenerado",
}

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_NAME = "Asistencia"


def export_rows(views: Sequence[AttendanceView]) -> List[dict]:
    rows = []
    for index, view in enumerate(views, start=1):
        record, member = view.record, view.member
        rows.append(
            {
                "#": index,
                "Nombre": member.name,
                "Cédula": member.cedula,
                "Email": member.email,
                "Teléfono": member.phone or "N/A",
                "Código de Votación": record.code,
                "Fecha de Confirmación": format_datetime_es(record.confirmed_at),
                "Email Enviado": "Sí" if record.email_sent else "No",
                "Estado": STATUS_LABELS.get(record.status, record.status.value),
                "Veces Regenerado": record.regenerated_count,
            }
        )
    return rows


def export_filename(fmt: str, today: date) -> str:
    ext = "xlsx" if fmt == "excel" else "csv"
    return f"asistencia-{today.isoformat()}.{ext}"


def normalize_format(value) -> str:
    fmt = (value or "csv").strip().lower()
    if fmt in ("xlsx", "excel"):
        return "excel"
    if fmt != "csv":
        raise ValidationError("Formato no válido. Use csv o excel")
    return fmt


def to_csv_bytes(rows: List[dict]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


def to_xlsx_bytes(rows: List[dict]) -> bytes:
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
    return output.getvalue()


def voting_url(app_url: str, code: str) -> str:
    return f"{app_url.rstrip('/')}/votacion?code={code}"


def qr_png(data: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
