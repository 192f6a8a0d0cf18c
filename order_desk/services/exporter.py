"""Turn rendered documents into files, data URIs and downloadable bytes."""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Sequence

from order_desk.services.orders import OrderRecord
from order_desk.services.pdf import OrderPDF
from order_desk.services.receipts import HeaderSource, render_receipt
from order_desk.services.reports import ReportOptions, render_report

DATA_URI_PREFIX = "data:application/pdf;filename=generated.pdf;base64,"


class ExportError(Exception):
    """Raised when a document cannot be generated or exported."""


@dataclass(frozen=True)
class ExportResult:
    file_name: str
    content: bytes


def report_file_name(title: str, on: date | None = None) -> str:
    stamp = (on or date.today()).isoformat()
    slug = re.sub(r"[^a-z0-9\s]", "", (title or "").lower())
    slug = re.sub(r"\s+", "-", slug.strip())
    return f"{slug}-{stamp}.pdf"


def receipt_file_name(record: OrderRecord) -> str:
    reference = record.reference or "receipt"
    name = re.sub(r"[^a-zA-Z0-9\s]", "", record.name or "customer")
    name = re.sub(r"\s+", "-", name.strip()) or "customer"
    return f"receipt-{reference}-{name}.pdf"


def to_blob_bytes(document: OrderPDF) -> bytes:
    try:
        return document.render()
    except Exception as exc:
        raise ExportError(f"Failed to generate PDF: {exc}") from exc


def to_data_uri(document: OrderPDF) -> str:
    return DATA_URI_PREFIX + base64.b64encode(to_blob_bytes(document)).decode("ascii")


def save(
    document: OrderPDF,
    file_name_hint: str,
    directory: str | Path = ".",
    *,
    on: date | None = None,
) -> Path:
    """
    Write the document under ``directory`` and return the path.

    A hint that already names a ``.pdf`` file (from ``report_file_name`` or
    ``receipt_file_name``) is used as is, minus any directory part. Any other
    hint is treated as a title and turned into ``<title-slug>-<ISO date>.pdf``.
    """
    name = Path(file_name_hint).name
    if not name.lower().endswith(".pdf"):
        name = report_file_name(file_name_hint, on)
    target = Path(directory) / name
    content = to_blob_bytes(document)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except OSError as exc:
        raise ExportError(f"Failed to save PDF: {exc}") from exc
    return target


def export_report(
    records: Sequence[OrderRecord],
    options: ReportOptions | None = None,
    *,
    on: date | None = None,
) -> ExportResult:
    options = options or ReportOptions()
    try:
        document = render_report(records, options)
    except Exception as exc:
        raise ExportError(f"Failed to generate PDF: {exc}") from exc
    return ExportResult(report_file_name(options.title, on), to_blob_bytes(document))


def preview_report(records: Sequence[OrderRecord], options: ReportOptions | None = None) -> str:
    try:
        document = render_report(records, options)
    except Exception as exc:
        raise ExportError(f"Failed to generate PDF: {exc}") from exc
    return to_data_uri(document)


def export_receipt(record: OrderRecord, header_image: HeaderSource = None) -> ExportResult:
    try:
        document = render_receipt(record, header_image)
        content = document.render()
    except Exception as exc:
        raise ExportError(f"Failed to generate receipt PDF: {exc}") from exc
    return ExportResult(receipt_file_name(record), content)
