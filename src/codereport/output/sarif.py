"""SARIF v2.1.0 export — for code scanning dashboards.

OK and FILTERED findings, and coverage hits, are not exported.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from codereport import __version__
from codereport.config.schema import Severity
from codereport.findings.models import Report

SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"

_SEVERITY_MAP = {
    Severity.ERROR: "error",
    Severity.CPD: "error",
    Severity.WARNING: "warning",
    Severity.DESIGN: "warning",
}

_SKIPPED = (Severity.OK, Severity.FILTERED, Severity.COVERAGE)


def sarif_level(severity: Severity) -> str:
    return _SEVERITY_MAP.get(severity, "note")


def to_dict(report: Report) -> Dict[str, Any]:
    """Convert a Report to a SARIF v2.1.0 dict."""
    rules: List[Dict[str, Any]] = []
    seen_rules: set[str] = set()
    results: List[Dict[str, Any]] = []

    for report_file, item in report.iter_items():
        if item.severity is None or item.severity in _SKIPPED:
            continue
        rule_id = item.finding_type or str(item.origin)
        level = sarif_level(item.severity)

        # Rule definition (only once per finding type)
        if rule_id not in seen_rules:
            seen_rules.add(rule_id)
            rules.append({
                "id": rule_id,
                "name": rule_id,
                "shortDescription": {"text": rule_id},
                "defaultConfiguration": {"level": level},
                "properties": {"origin": str(item.origin) if item.origin else None},
            })

        region: Dict[str, Any] = {"startLine": max(item.line or 1, 1)}
        if item.end_line:
            region["endLine"] = max(item.end_line, region["startLine"])
        if item.column:
            region["startColumn"] = item.column
        if item.end_column:
            region["endColumn"] = item.end_column

        result: Dict[str, Any] = {
            "ruleId": rule_id,
            "level": level,
            "message": {"text": item.message or rule_id},
            "properties": {
                "severity": str(item.severity),
                **({"new": True} if item.new else {}),
            },
        }
        if report_file.name:
            result["locations"] = [
                {
                    "physicalLocation": {
                        "artifactLocation": {"uri": report_file.name},
                        "region": region,
                    }
                }
            ]
        results.append(result)

    return {
        "$schema": SARIF_SCHEMA,
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "codereport",
                        "version": __version__,
                        "rules": rules,
                    }
                },
                "results": results,
            }
        ],
    }


def render(report: Report) -> str:
    """Return SARIF JSON string."""
    return json.dumps(to_dict(report), indent=2)
