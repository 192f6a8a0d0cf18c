"""Flask CLI commands for offline PDF exports and font diagnostics."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
from flask import current_app
from flask.cli import AppGroup, with_appcontext

from order_desk.services import fonts
from order_desk.services.exporter import ExportError, receipt_file_name, report_file_name, save
from order_desk.services.orders import OrderRecord, records_from_payload
from order_desk.services.receipts import render_receipt
from order_desk.services.reports import ReportOptions, render_report
from order_desk.services.script import contains_arabic_script, text_direction

FONT_SAMPLES = (
    ("English", "Ahmed Ali"),
    ("Arabic", "محمد أحمد"),
    ("Mixed", "Order 12 - طلب"),
    ("Digits", "0123456789"),
)


def _load_json(source: str) -> Any:
    try:
        return json.loads(Path(source).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"Could not read {source}: {exc}") from exc


def _output_dir(out: str | None) -> Path:
    return Path(out) if out else Path(current_app.config["EXPORTS_DIR"])


def register_cli(app) -> None:
    pdf_group = AppGroup("pdf", help="Generate order PDFs from JSON files.")

    @pdf_group.command("report")
    @click.option("--source", required=True, type=click.Path(exists=True, dir_okay=False))
    @click.option("--out", default=None, help="Output directory (defaults to DATA_ROOT/exports)")
    @click.option("--title", default=None)
    @click.option("--summary", is_flag=True, default=False)
    @click.option("--footer", is_flag=True, default=False)
    @with_appcontext
    def report(source: str, out: str | None, title: str | None, summary: bool, footer: bool) -> None:
        payload = _load_json(source)
        if isinstance(payload, dict):
            payload = payload.get("orders", [])
        if not isinstance(payload, list):
            raise click.ClickException("Expected a list of orders")
        try:
            records = records_from_payload(payload)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        options = ReportOptions(
            title=title or current_app.config["REPORT_TITLE"],
            show_summary=summary,
            show_footer=footer,
        )
        try:
            path = save(render_report(records, options), report_file_name(options.title), _output_dir(out))
        except ExportError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Report with {len(records)} orders written to {path}")

    @pdf_group.command("receipt")
    @click.option("--source", required=True, type=click.Path(exists=True, dir_okay=False))
    @click.option("--out", default=None, help="Output directory (defaults to DATA_ROOT/exports)")
    @click.option("--index", default=0, show_default=True, type=int, help="Order to use when the file holds a list")
    @with_appcontext
    def receipt(source: str, out: str | None, index: int) -> None:
        payload = _load_json(source)
        if isinstance(payload, list):
            try:
                payload = payload[index]
            except IndexError as exc:
                raise click.ClickException(f"No order at index {index}") from exc
        if not isinstance(payload, dict):
            raise click.ClickException("Expected an order object")
        record = OrderRecord.from_dict(payload)
        header = current_app.config.get("RECEIPT_HEADER_IMAGE")
        header = header if header and Path(header).exists() else None
        try:
            path = save(render_receipt(record, header), receipt_file_name(record), _output_dir(out))
        except ExportError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Receipt written to {path}")

    @pdf_group.command("fonts")
    def fonts_status() -> None:
        primary = fonts.get_primary_font()
        if primary is None:
            click.echo("Arabic font: none registered (Helvetica fallback)")
        else:
            click.echo(f"Arabic font: {primary.name} ({len(primary.payload)} bytes)")
        for label, sample in FONT_SAMPLES:
            click.echo(
                f"{label:<8} arabic={contains_arabic_script(sample)!s:<5} "
                f"direction={text_direction(sample).value}"
            )

    app.cli.add_command(pdf_group)
