"""JSON report document — the persisted form of a normalized or merged report."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from codereport.config.schema import Severity
from codereport.findings.models import Item, Origin, Report, ReportFile

DOCUMENT_VERSION = "1.0"


class ReportDocumentError(ValueError):
    """Raised when a report document cannot be read or decoded."""


def _item_to_dict(item: Item) -> Dict[str, Any]:
    return {
        "origin": str(item.origin) if item.origin is not None else None,
        "type": item.finding_type,
        "severity": str(item.severity) if item.severity is not None else None,
        "message": item.message,
        **({"line": item.line} if item.line is not None else {}),
        **({"end_line": item.end_line} if item.end_line is not None else {}),
        **({"column": item.column} if item.column is not None else {}),
        **({"end_column": item.end_column} if item.end_column is not None else {}),
        **({"counter": item.counter} if item.counter else {}),
        **({"since": item.since.isoformat()} if item.since else {}),
        **({"new": True} if item.new else {}),
        **({"old": True} if item.old else {}),
        **({"source_text": item.source_text} if item.source_text else {}),
        **({"global": True} if item.is_global else {}),
    }


def to_dict(report: Report) -> Dict[str, Any]:
    """Convert a Report to a JSON-serialisable dict."""
    files: List[Dict[str, Any]] = []
    for f in report.files:
        files.append({
            "name": f.name,
            "classname": f.classname,
            "package": f.package,
            "src_dir": f.src_dir,
            "loc": f.loc,
            "level": f.level,
            "items": [_item_to_dict(item) for item in f.items],
        })
    return {
        "version": DOCUMENT_VERSION,
        "name": report.name,
        "project_home": report.project_home,
        "created": report.created.isoformat(),
        "total_items": report.total_items,
        "files": files,
    }


def _datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _item_from_dict(data: Dict[str, Any]) -> Item:
    origin = data.get("origin")
    severity = data.get("severity")
    return Item(
        origin=Origin.from_string(origin) if origin else None,
        finding_type=data.get("type"),
        severity=Severity.from_string(severity) if severity else None,
        message=data.get("message"),
        line=data.get("line"),
        end_line=data.get("end_line"),
        column=data.get("column"),
        end_column=data.get("end_column"),
        counter=int(data.get("counter") or 0),
        since=_datetime(data.get("since")),
        new=bool(data.get("new", False)),
        old=bool(data.get("old", False)),
        source_text=data.get("source_text"),
        is_global=bool(data.get("global", False)),
    )


def from_dict(data: Dict[str, Any]) -> Report:
    """Rebuild a Report from its dict form."""
    try:
        files = [
            ReportFile(
                name=f.get("name", ""),
                classname=f.get("classname") or "",
                package=f.get("package"),
                src_dir=f.get("src_dir"),
                loc=int(f.get("loc") or 0),
                level=f.get("level", "prod"),
                items=[_item_from_dict(i) for i in f.get("items", [])],
            )
            for f in data.get("files", [])
        ]
        return Report(
            name=data.get("name", "Unknown Project"),
            project_home=data.get("project_home", "."),
            created=_datetime(data.get("created")) or datetime.now(),
            files=files,
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise ReportDocumentError(f"Invalid report document: {exc}") from exc


def render(report: Report) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(report), indent=2)


def write(report: Report, path: Path) -> None:
    Path(path).write_text(render(report), encoding="utf-8")


def load(path: Path) -> Report:
    """Read a report document from *path*."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ReportDocumentError(f"Cannot read report document {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ReportDocumentError(f"Report document {path} is not a JSON object")
    return from_dict(data)
