"""Monthly progress report: HTML document (right-to-left, Hebrew) and its file artifact.

Rendering is deterministic: the same aggregate always yields the same bytes.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import date
from html import escape
from pathlib import Path

from gymtracker.core.constants import REPORT_FILE_EXTENSION, REPORT_FILE_PREFIX
from gymtracker.services.monthly_aggregate import MonthlyAggregate

logger = logging.getLogger(__name__)

HEBREW_MONTHS = (
    "ינואר",
    "פברואר",
    "מרץ",
    "אפריל",
    "מאי",
    "יוני",
    "יולי",
    "אוגוסט",
    "ספטמבר",
    "אוקטובר",
    "נובמבר",
    "דצמבר",
)

# Fixed fill-in instructions printed above the table (not derived from data)
INSTRUCTIONS = (
    "למלא את השורה הראשונה מיד אחרי אימון\\סבב ראשון, ומשם - לעדכן את השורה הבאה כל שבועיים.",
    "להישקל בבוקר, לפני שאכלת או שתית, אחרי שירותים.",
    "משקלי עבודה בחדר כושר - לכתוב את הסה\"כ משקל (שני הצדדים יחדיו), כולל המוט (בתרגילים הרלוונטיים). "
    "מוט של סמיט מאשין - לא להחשיב.",
)

STYLE = """
body { font-family: Arial, sans-serif; margin: 20px; background-color: #f5f5f5; }
.container { background-color: white; padding: 20px; border-radius: 10px; }
h1 { text-align: center; color: #333; }
.instructions { background-color: #e8f4f8; padding: 15px; border-radius: 8px; border-right: 4px solid #007AFF; }
.summary { margin-top: 30px; padding: 20px; background-color: #f8f9fa; border-radius: 8px; }
.stat-item { display: inline-block; margin: 10px 20px 10px 0; padding: 10px; border: 1px solid #ddd; }
.stat-value { font-size: 18px; font-weight: bold; color: #007AFF; }
.stat-label { font-size: 12px; color: #666; }
table { width: 100%; border-collapse: collapse; margin-top: 20px; font-size: 12px; }
th, td { border: 1px solid #ddd; padding: 8px; text-align: center; }
th { background-color: #007AFF; color: white; }
.date-cell { background-color: #e8f4f8; font-weight: bold; min-width: 120px; }
.morning-weight { background-color: #d4edda; }
.weight-cell { background-color: #fff3cd; min-width: 60px; }
""".strip()


def month_title(month: date) -> str:
    return f"{HEBREW_MONTHS[month.month - 1]} {month.year}"


def report_filename(month: date) -> str:
    return f"{REPORT_FILE_PREFIX}-{month.year:04d}-{month.month:02d}.{REPORT_FILE_EXTENSION}"


def _summary_section(aggregate: MonthlyAggregate) -> str:
    stats = (
        (str(aggregate.total_sets), "סטים סה\"כ"),
        (f"{aggregate.total_volume:.1f}", "ק\"ג נפח סה\"כ"),
        (str(aggregate.distinct_exercises), "תרגילים שונים"),
    )
    items = "".join(
        f'<div class="stat-item"><div class="stat-value">{value}</div>'
        f'<div class="stat-label">{escape(label)}</div></div>'
        for value, label in stats
    )
    return f'<div class="summary"><h3>סיכום החודש</h3>{items}</div>'


def _table(aggregate: MonthlyAggregate) -> str:
    head = ['<th class="date-cell">תאריך</th>', '<th class="morning-weight">משקל בוקר</th>']
    head += [f'<th class="exercise-header">{escape(name)}</th>' for name in aggregate.exercises]

    rows = []
    for day in aggregate.days:
        cells = [
            f'<td class="date-cell">{day:%d/%m}</td>',
            '<td class="morning-weight weight-cell"></td>',  # filled in by hand
        ]
        cells += [
            f'<td class="weight-cell">{escape(aggregate.cell(day, name))}</td>' for name in aggregate.exercises
        ]
        rows.append(f"<tr>{''.join(cells)}</tr>")

    return (
        "<table>"
        f"<thead><tr>{''.join(head)}</tr></thead>"
        f"<tbody>{''.join(rows)}</tbody>"
        "</table>"
    )


def render_report(aggregate: MonthlyAggregate, month: date) -> str:
    """Self-contained RTL HTML document for one month."""
    title = f"דוח חודשי - {month_title(month)}"
    instructions = "".join(f"<p>• {escape(line)}</p>" for line in INSTRUCTIONS)
    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html dir="rtl" lang="he">',
            "<head>",
            '<meta charset="UTF-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
            f"<title>{escape(title)}</title>",
            f"<style>\n{STYLE}\n</style>",
            "</head>",
            "<body>",
            '<div class="container">',
            f"<h1>{escape(title)}</h1>",
            f'<div class="instructions"><h3>הוראות מילוי:</h3>{instructions}</div>',
            _summary_section(aggregate),
            _table(aggregate),
            "</div>",
            "</body>",
            "</html>",
            "",
        ]
    )


def persist_report(document: str, month: date, directory: str | Path) -> Path | None:
    """
    Write the document to <directory>/gymtracker-YYYY-MM.html, replacing any previous file.
    The write is atomic (temp file + rename). Returns the path, or None if writing failed.
    """
    target_dir = Path(directory)
    target = target_dir / report_filename(month)
    tmp_name = None
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=target_dir, prefix=f".{target.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(document)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, target)
        return target
    except OSError:
        logger.exception("Failed to write report %s", target)
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        return None
