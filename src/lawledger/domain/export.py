"""Spreadsheet export of summaries and transaction lists.

Row builders turn aggregation results into sheets with the column headers
staff expect; ``write_workbook`` and ``write_csv`` put them on disk.
"""

import csv
import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from lawledger.domain.entities import (
    GroupDetail,
    Personnel,
    QuarterlyStat,
    Transaction,
)
from lawledger.domain.errors import ValidationError
from lawledger.utils.date_parser import display_date

logger = logging.getLogger(__name__)

MAX_COLUMN_WIDTH = 50


@dataclass(frozen=True)
class Sheet:
    """A titled table. Column order follows the keys of the first row."""

    title: str
    rows: tuple[dict[str, Any], ...]
    headers: tuple[str, ...] = ()

    @property
    def columns(self) -> tuple[str, ...]:
        if self.headers:
            return self.headers
        if self.rows:
            return tuple(self.rows[0].keys())
        return ()


def _label(value: Any) -> str:
    if value is None:
        return ""
    return getattr(value, "value", value)


def safe_file_stem(name: str) -> str:
    """Lower-case a name and replace anything but ASCII letters and digits with '_'."""
    return re.sub(r"[^a-z0-9]", "_", name, flags=re.IGNORECASE | re.ASCII).lower()


TRANSACTION_HEADERS = (
    "İşlem No",
    "Tarih",
    "Tür",
    "Durum",
    "Kategori",
    "Açıklama",
    "Hesap",
    "Müvekkil",
    "Proje",
    "Muhatap",
    "Personel",
    "Tutar",
)


def transaction_list_sheet(transactions: Iterable[Transaction], title: str = "Islemler") -> Sheet:
    """Plain transaction list with every field."""
    rows = tuple(
        {
            "İşlem No": t.transaction_number,
            "Tarih": display_date(t.date),
            "Tür": _label(t.type),
            "Durum": _label(t.status),
            "Kategori": t.category,
            "Açıklama": t.description,
            "Hesap": t.account,
            "Müvekkil": t.client,
            "Proje": t.group,
            "Muhatap": t.counterparty,
            "Personel": t.personnel,
            "Tutar": t.amount,
        }
        for t in transactions
    )
    return Sheet(title=title, rows=rows, headers=TRANSACTION_HEADERS)


def group_statement_sheet(detail: GroupDetail) -> Sheet:
    """Project statement: the group's filtered transactions."""
    rows = tuple(
        {
            "İşlem No": t.transaction_number,
            "Tarih": display_date(t.date),
            "Müvekkil": t.client or "-",
            "Tür": _label(t.type),
            "Kategori": t.category,
            "Açıklama": t.description,
            "Muhatap": t.counterparty or "-",
            "Tutar": t.amount,
            "Durum": _label(t.status),
        }
        for t in detail.transactions
    )
    return Sheet(title="Proje Ekstresi", rows=rows)


def account_group_sheets(detail: GroupDetail) -> list[Sheet]:
    """Expense statement: transaction detail plus the monthly outflow summary."""
    detail_rows = tuple(
        {
            "İşlem No": t.transaction_number,
            "Tarih": display_date(t.date),
            "Müvekkil": t.client or "-",
            "Personel": t.personnel or "-",
            "Tür": _label(t.type),
            "Kategori": t.category,
            "Açıklama": t.description,
            "Tutar": t.amount,
            "Durum": _label(t.status),
        }
        for t in detail.transactions
    )
    monthly_rows = tuple(
        {"Dönem": m.month, "Toplam Gider": m.amount} for m in detail.monthly
    )
    return [
        Sheet(title="Islem_Detayi", rows=detail_rows),
        Sheet(title="Aylik_Ozet", rows=monthly_rows, headers=("Dönem", "Toplam Gider")),
    ]


def personnel_quarter_sheets(
    person: Personnel, stat: QuarterlyStat, transactions: Sequence[Transaction]
) -> list[Sheet]:
    """Profit-share statement for one quarter: summary row plus its transactions."""
    summary = {
        "Personel": person.full_name,
        "Dönem": f"{stat.year} - {stat.quarter}. Çeyrek",
        "Toplam Gelir": stat.total_income,
        "Toplam Gider": stat.total_expense,
        "Net Ofis Kârı": stat.net_balance,
        "Hakediş Oranı": f"%{person.bonus_percentage}",
        "Hakediş (%40'lar) Tutarı": stat.share_amount,
    }
    detail_rows = tuple(
        {
            "Tarih": display_date(t.date),
            "İşlem No": t.transaction_number,
            "Tür": _label(t.type),
            "Kategori": t.category,
            "Açıklama": t.description,
            "Müvekkil/Muhatap": t.client or t.counterparty,
            "Tutar": t.amount,
        }
        for t in transactions
    )
    return [
        Sheet(title="Ozet", rows=(summary,)),
        Sheet(
            title="Islem_Dokumu",
            rows=detail_rows,
            headers=("Tarih", "İşlem No", "Tür", "Kategori", "Açıklama", "Müvekkil/Muhatap", "Tutar"),
        ),
    ]


def personnel_ledger_sheet(financial: Iterable[Transaction]) -> Sheet:
    """Current-account movements (DEBT, RECEIVABLE, CURRENT) of one person."""
    rows = tuple(
        {
            "Tarih": display_date(t.date),
            "İşlem No": t.transaction_number,
            "Tür": _label(t.type),
            "Açıklama": t.description,
            "Kategori": t.category,
            "Tutar": t.amount,
        }
        for t in financial
    )
    return Sheet(
        title="Cari_Hareketler",
        rows=rows,
        headers=("Tarih", "İşlem No", "Tür", "Açıklama", "Kategori", "Tutar"),
    )


def _cell_value(value: Any) -> Any:
    if isinstance(value, (str, int, float, Decimal)) or value is None:
        return value
    return str(value)


def write_workbook(file_path: str, sheets: Sequence[Sheet]) -> Path:
    """Write sheets to an XLSX workbook, sizing columns to their content.

    Raises:
        ValidationError: If no sheets are given
    """
    if not sheets:
        raise ValidationError("Nothing to export")

    workbook = Workbook()
    workbook.remove(workbook.active)
    for sheet in sheets:
        worksheet = workbook.create_sheet(title=sheet.title[:31])
        columns = sheet.columns
        worksheet.append(list(columns))
        for cell in worksheet[1]:
            cell.font = Font(bold=True)
        for row in sheet.rows:
            worksheet.append([_cell_value(row.get(column)) for column in columns])

        for idx, column in enumerate(columns, start=1):
            values = [str(row.get(column, "")) for row in sheet.rows]
            max_len = max([len(column), *(len(v) for v in values)]) + 2
            worksheet.column_dimensions[get_column_letter(idx)].width = min(max_len, MAX_COLUMN_WIDTH)

    path = Path(file_path)
    workbook.save(path)
    logger.info("Wrote %d sheet(s) to %s", len(sheets), path)
    return path


def write_csv(file_path: str, sheet: Sheet) -> Path:
    """Write a single sheet as CSV (UTF-8 with BOM so spreadsheet apps detect it)."""
    path = Path(file_path)
    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(sheet.columns), extrasaction="ignore")
        writer.writeheader()
        for row in sheet.rows:
            writer.writerow(row)
    logger.info("Wrote %d row(s) to %s", len(sheet.rows), path)
    return path


def export_sheets(file_path: str, sheets: Sequence[Sheet]) -> Path:
    """Write by file extension: ``.csv`` takes the first sheet only, anything else is XLSX."""
    if not sheets:
        raise ValidationError("Nothing to export")
    if Path(file_path).suffix.lower() == ".csv":
        if len(sheets) > 1:
            logger.warning("CSV holds one sheet; writing '%s' only", sheets[0].title)
        return write_csv(file_path, sheets[0])
    return write_workbook(file_path, sheets)


def default_export_name(label: str, kind: str, today: Optional[date] = None) -> str:
    """File name such as ``acme_Proje_Ekstresi_2024-03-15.xlsx``."""
    day = (today or date.today()).isoformat()
    return f"{safe_file_stem(label)}_{kind}_{day}.xlsx"
