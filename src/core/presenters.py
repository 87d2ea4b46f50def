"""
Renderização do AuditReport em text, json e csv.

Nenhum formato filtra ou ordena: os recursos saem na ordem do relatório e as
tags na ordem em que a AWS devolveu.
"""
import json
from typing import Callable, Dict, Iterable, List, Mapping, TextIO

from .models import AuditReport

OUTPUT_FORMATS = ("text", "json", "csv")

LIST_SEPARATOR = "; "

CSV_HEADER = ["Service", "Resource ID", "Resource Type", "Tags", "Missing Tags"]


def _flatten_tags(tags: Mapping[str, str]) -> str:
    return LIST_SEPARATOR.join(f"{key}:{value}" for key, value in tags.items())


def render_text(report: AuditReport, stream: TextIO) -> None:
    stream.write("AWS Resource Tag Audit Report\n")
    stream.write("==========================\n")

    for r in report.resources:
        tags = ", ".join(f"{key}:{value}" for key, value in r.tags.items()) or "(none)"

        stream.write(f"\nService: {r.service}\n")
        stream.write(f"Resource ID: {r.resource_id}\n")
        stream.write(f"Resource Type: {r.resource_type}\n")
        stream.write(f"Tags: {tags}\n")
        if r.missing_tags:
            stream.write(f"Missing Tags: {', '.join(r.missing_tags)}\n")
        stream.write("--------------------------\n")

    summary = report.summary()
    stream.write(
        f"\nTotal: {summary['total_resources']} | "
        f"Compliant: {summary['compliant']} | "
        f"Non-compliant: {summary['non_compliant']}\n"
    )


def render_json(report: AuditReport, stream: TextIO) -> None:
    stream.write(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    stream.write("\n")


def _csv_cell(value: str) -> str:
    # aspas quando tem separador de campo, separador de lista, aspas ou quebra de linha
    if any(c in value for c in (",", ";", '"', "\n", "\r")):
        return '"' + value.replace('"', '""') + '"'
    return value


def _csv_row(cells: Iterable[str]) -> str:
    return ",".join(_csv_cell(c) for c in cells) + "\n"


def render_csv(report: AuditReport, stream: TextIO) -> None:
    stream.write(_csv_row(CSV_HEADER))
    for r in report.resources:
        row: List[str] = [
            r.service,
            r.resource_id,
            r.resource_type,
            _flatten_tags(r.tags),
            LIST_SEPARATOR.join(r.missing_tags),
        ]
        stream.write(_csv_row(row))


PRESENTERS: Dict[str, Callable[[AuditReport, TextIO], None]] = {
    "text": render_text,
    "json": render_json,
    "csv": render_csv,
}


def present(report: AuditReport, output: str, stream: TextIO) -> None:
    try:
        presenter = PRESENTERS[output]
    except KeyError:
        raise ValueError(f"unsupported output format: {output}") from None
    presenter(report, stream)
    stream.flush()
