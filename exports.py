import csv
import io
import json
from datetime import datetime

from models import HealthReport
from utils import format_currency, format_number


SCORE_ROWS = [
    ("Diversification", "diversification"),
    ("Security", "security"),
    ("Governance", "governance"),
    ("Experience", "experience"),
]


def _profile_rows(report: HealthReport) -> list[tuple[str, str]]:
    p = report.portfolio
    return [
        ("Total Value (USD)", format_currency(p.total_value)),
        ("Token Count", str(p.token_count)),
        ("Categories", ", ".join(p.categories)),
        ("Wallet Age (Days)", str(p.wallet_age_days)),
        ("Holding Period (Days)", str(p.holding_period_days)),
        ("Transactions", format_number(p.transaction_count)),
        ("Protocols Used", str(p.unique_protocols)),
        ("Governance Votes", str(p.governance_participation)),
        ("Risk Tokens", str(p.risk_token_count)),
    ]


def to_csv(report: HealthReport) -> bytes:
    """Export a health report to CSV."""
    out = io.StringIO()
    w = csv.writer(out)

    w.writerow(["DEFI HEALTH SCORE REPORT"])
    w.writerow(["Generated", datetime.now().strftime("%Y-%m-%d %H:%M:%S")])
    w.writerow(["Address", report.address])
    w.writerow([])

    # ── Scores ────────────────────────────────────────────────────────
    w.writerow(["SCORES"])
    for label, field in SCORE_ROWS:
        w.writerow([label, round(getattr(report.scores, field))])
    w.writerow(["Overall", report.scores.overall])
    w.writerow(["Tier", report.scores.tier.value])
    w.writerow([])

    # ── Portfolio ─────────────────────────────────────────────────────
    w.writerow(["PORTFOLIO"])
    for label, value in _profile_rows(report):
        w.writerow([label, value])
    w.writerow([])

    # ── Achievements ──────────────────────────────────────────────────
    w.writerow(["ACHIEVEMENTS"])
    w.writerow(["Badge", "Description", "Progress", "Target", "Unlocked"])
    for b in report.achievements:
        w.writerow([
            b.name, b.description, round(b.progress, 2), b.max_progress,
            "yes" if b.unlocked else "no",
        ])
    w.writerow([])

    if report.recommendations:
        w.writerow(["RECOMMENDATIONS"])
        for line in report.recommendations:
            w.writerow([line])

    return out.getvalue().encode("utf-8")


def to_json(report: HealthReport) -> bytes:
    """Export a health report as formatted JSON."""
    return json.dumps(report.model_dump(mode="json"), indent=2).encode("utf-8")


def to_excel(report: HealthReport) -> bytes:
    """Export a health report to a formatted Excel workbook."""
    import openpyxl
    from openpyxl.styles import Alignment, Font, PatternFill
    from openpyxl.utils import get_column_letter

    wb = openpyxl.Workbook()

    # ── Summary Sheet ─────────────────────────────────────────────────
    ws = wb.active
    ws.title = "Summary"

    accent = PatternFill(start_color="6c5ce7", end_color="6c5ce7", fill_type="solid")
    dark = PatternFill(start_color="1a1a2e", end_color="1a1a2e", fill_type="solid")
    white_bold = Font(bold=True, color="FFFFFF")
    bold = Font(bold=True)

    ws.merge_cells("A1:E1")
    ws["A1"] = "DeFi Health Score Report"
    ws["A1"].font = Font(bold=True, size=16, color="FFFFFF")
    ws["A1"].fill = accent
    ws["A1"].alignment = Alignment(horizontal="center")

    rows = [
        ("Address", report.address),
        ("Generated", datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
        ("", ""),
        *[(label, round(getattr(report.scores, f))) for label, f in SCORE_ROWS],
        ("Overall", report.scores.overall),
        ("Tier", report.scores.tier.value),
        ("", ""),
        *_profile_rows(report),
    ]
    for i, (label, value) in enumerate(rows, 3):
        ws[f"A{i}"] = label
        ws[f"A{i}"].font = bold
        ws[f"B{i}"] = value

    # ── Achievements Sheet ────────────────────────────────────────────
    ws2 = wb.create_sheet("Achievements")
    headers = ["Badge", "Description", "Progress", "Target", "Unlocked"]
    for col, h in enumerate(headers, 1):
        cell = ws2.cell(row=1, column=col, value=h)
        cell.font = white_bold
        cell.fill = dark

    for i, b in enumerate(report.achievements, 2):
        ws2.cell(row=i, column=1, value=f"{b.icon} {b.name}")
        ws2.cell(row=i, column=2, value=b.description)
        ws2.cell(row=i, column=3, value=round(b.progress, 2))
        ws2.cell(row=i, column=4, value=b.max_progress)
        ws2.cell(row=i, column=5, value="yes" if b.unlocked else "no")

    # Auto-fit column widths
    for sheet in [ws, ws2]:
        for col in sheet.columns:
            max_len = max(len(str(cell.value or "")) for cell in col)
            letter = get_column_letter(col[0].column)
            sheet.column_dimensions[letter].width = min(max_len + 3, 45)

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
