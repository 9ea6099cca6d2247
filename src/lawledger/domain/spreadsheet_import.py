"""Spreadsheet import domain service.

Rows from a CSV or XLSX sheet are mapped onto ledger fields through a
user-supplied mapping (ledger field -> column header), lightly coerced and
bulk-inserted. Imported rows are always approved.
"""

import csv
import logging
from dataclasses import dataclass
from zipfile import BadZipFile
from datetime import date
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from lawledger.database.base import Database
from lawledger.domain.entities import (
    ImportResult,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from lawledger.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    missing_required_fields,
    template_not_found,
)
from lawledger.domain.import_template import ImportTemplateService
from lawledger.domain.normalizer import BULK_MARKER, bulk_transaction_numbers, normalize_row
from lawledger.utils.amount_parser import parse_spreadsheet_amount
from lawledger.utils.date_parser import compact_date, normalize_import_date

logger = logging.getLogger(__name__)

IMPORT_FIELDS = (
    "date",
    "amount",
    "description",
    "type",
    "category",
    "account",
    "client",
    "group",
    "counterparty",
)
REQUIRED_FIELDS = ("date", "amount", "description")
DEFAULT_METHOD = "Diğer"
PREVIEW_ROWS = 5

INCOME_WORDS = ("gelir", "income", "alacak")
EXPENSE_WORDS = ("gider", "expense", "borç")

XLSX_SUFFIXES = {".xlsx", ".xlsm"}
CSV_SUFFIXES = {".csv", ".txt"}
CSV_ENCODINGS = ("utf-8-sig", "cp1254")


@dataclass(frozen=True)
class SpreadsheetData:
    """Header row and data rows of a sheet, each row keyed by header."""

    headers: tuple[str, ...]
    rows: tuple[dict[str, Any], ...]


def validate_mapping(mapping: Mapping[str, Optional[str]]) -> list[str]:
    """Return the required fields the mapping leaves unmapped.

    Raises:
        ValidationError: If the mapping names a field that cannot be imported
    """
    unknown = sorted(set(mapping) - set(IMPORT_FIELDS))
    if unknown:
        raise ValidationError(
            f"Unknown import field(s): {', '.join(unknown)}. "
            f"Valid fields: {', '.join(IMPORT_FIELDS)}"
        )
    return [field for field in REQUIRED_FIELDS if not mapping.get(field)]


def normalize_import_type(value: Any) -> TransactionType:
    """Map free-text type cells onto INCOME or EXPENSE.

    Matching is a case-insensitive substring test; anything unrecognized is
    an expense.
    """
    if value is None:
        return TransactionType.EXPENSE
    # Turkish dotted/dotless capitals do not casefold to a plain "i"
    text = str(value).replace("İ", "i").replace("I", "i").casefold()
    if any(word in text for word in INCOME_WORDS):
        return TransactionType.INCOME
    if any(word in text for word in EXPENSE_WORDS):
        return TransactionType.EXPENSE
    return TransactionType.EXPENSE


def _text_cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def map_row(row: Mapping[str, Any], mapping: Mapping[str, Optional[str]]) -> dict[str, Any]:
    """Transform one spreadsheet row into stored transaction fields.

    Dates become ``YYYY-MM-DD`` when they are native dates or ``DD.MM.YYYY``
    text and are kept as given otherwise. Amount text is cleaned and parsed
    (unparseable amounts become 0). Status is always approved and the
    payment method defaults to "Diğer".
    """
    def cell(field: str) -> Any:
        column = mapping.get(field)
        if not column:
            return None
        return row.get(column)

    raw_date = normalize_import_date(cell("date"))
    fields: dict[str, Any] = {
        "date": _text_cell(raw_date),
        "amount": parse_spreadsheet_amount(cell("amount")),
        "type": normalize_import_type(cell("type")),
        "status": TransactionStatus.APPROVED,
        "method": DEFAULT_METHOD,
    }
    for field in ("description", "category", "account", "client", "group", "counterparty"):
        fields[field] = _text_cell(cell(field))
    return fields


def preview(
    rows: Sequence[Mapping[str, Any]],
    mapping: Mapping[str, Optional[str]],
    limit: int = PREVIEW_ROWS,
) -> list[Transaction]:
    """Show how the first rows would be imported, without writing anything."""
    return [normalize_row({"id": "", **map_row(row, mapping)}) for row in rows[:limit]]


def _header(value: Any, index: int) -> str:
    text = _text_cell(value)
    return text or f"Column{index + 1}"


def _read_csv(path: Path, encoding: str) -> SpreadsheetData:
    with open(path, "r", encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
        except csv.Error:
            delimiter = ","

        reader = csv.reader(f, delimiter=delimiter)
        header_row = next(reader, None)
        if header_row is None:
            raise ValidationError(f"Spreadsheet is empty: {path}")
        headers = tuple(_header(value, i) for i, value in enumerate(header_row))

        rows = []
        for values in reader:
            if not any(v.strip() for v in values):
                continue
            rows.append(dict(zip(headers, values)))
    return SpreadsheetData(headers=headers, rows=tuple(rows))


def _read_xlsx(path: Path) -> SpreadsheetData:
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException) as e:
        raise ValidationError(f"Not a readable XLSX workbook: {path} ({e})") from e
    try:
        sheet = workbook.worksheets[0]
        row_iter = sheet.iter_rows(values_only=True)
        header_row = next(row_iter, None)
        if header_row is None:
            raise ValidationError(f"Spreadsheet is empty: {path}")
        headers = tuple(_header(value, i) for i, value in enumerate(header_row))

        rows = []
        for values in row_iter:
            if all(v is None or (isinstance(v, str) and not v.strip()) for v in values):
                continue
            rows.append(dict(zip(headers, values)))
    finally:
        workbook.close()
    return SpreadsheetData(headers=headers, rows=tuple(rows))


def read_spreadsheet(file_path: str) -> SpreadsheetData:
    """Read the first sheet of a CSV or XLSX file; the first row holds the headers.

    CSV files are read as UTF-8 first, then as Windows-1254 (Turkish).

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the file type is not supported, the file cannot be
            decoded or opened, or the sheet is empty
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Spreadsheet not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix in XLSX_SUFFIXES:
        return _read_xlsx(path)
    if suffix in CSV_SUFFIXES:
        for encoding in CSV_ENCODINGS:
            try:
                return _read_csv(path, encoding)
            except UnicodeDecodeError:
                logger.debug("%s is not %s encoded", path, encoding)
        raise ValidationError(
            f"Could not decode {path}; save it as UTF-8 or Windows-1254 (Turkish)"
        )
    raise ValidationError(
        f"Unsupported spreadsheet type '{suffix}'. Use .csv or .xlsx files."
    )


class SpreadsheetImportService:
    """Service for importing transactions from spreadsheets."""

    def __init__(self, db: Database):
        """Initialize spreadsheet import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.template_service = ImportTemplateService(db)

    def resolve_mapping(
        self,
        mapping: Optional[Mapping[str, str]] = None,
        template_name: Optional[str] = None,
    ) -> dict[str, str]:
        """Combine a saved template with explicit column choices.

        Explicit entries override the template's.

        Raises:
            NotFoundError: If the template doesn't exist
        """
        resolved: dict[str, str] = {}
        if template_name:
            template = self.template_service.get_template(template_name)
            if template is None:
                raise NotFoundError(template_not_found(template_name))
            resolved.update(template.mapping)
        if mapping:
            resolved.update({field: column for field, column in mapping.items() if column})
        return resolved

    def import_rows(
        self,
        rows: Sequence[Mapping[str, Any]],
        mapping: Mapping[str, Optional[str]],
        save_template_as: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ImportResult:
        """Import spreadsheet rows as approved transactions.

        The mapping is checked before any row is touched. All rows are
        inserted in a single batch with unique ``YYYYMMDD-BLK-NNNNN`` numbers.
        A failure to save the optional template is reported but does not undo
        the import.

        Args:
            rows: Spreadsheet rows keyed by column header
            mapping: Ledger field -> column header
            save_template_as: Optional name to save the mapping under
            today: Day used for numbering (defaults to the current date)

        Returns:
            ImportResult with the created numbers

        Raises:
            ValidationError: If required fields are unmapped or there are no rows
            StoreError: If the batch insert fails
        """
        missing = validate_mapping(mapping)
        if missing:
            raise ValidationError(missing_required_fields(missing))
        if not rows:
            raise ValidationError("No rows to import")

        columns = set(rows[0].keys())
        for field, column in mapping.items():
            if column and column not in columns:
                logger.warning("Mapped column %r for %s is not in the sheet", column, field)

        day = today or date.today()
        mapped = [map_row(row, mapping) for row in rows]
        existing = self.db.list_transaction_numbers(prefix=f"{compact_date(day)}-{BULK_MARKER}-")
        numbers = bulk_transaction_numbers(existing, len(mapped), day)
        for fields, number in zip(mapped, numbers):
            fields["transaction_number"] = number

        self.db.create_transactions(mapped)
        logger.info("Imported %d transaction(s)", len(mapped))

        template_saved = False
        errors: list[str] = []
        if save_template_as:
            try:
                self.template_service.create_template(save_template_as, dict(mapping))
                template_saved = True
            except DomainError as e:
                logger.warning("Import template '%s' was not saved: %s", save_template_as, e)
                errors.append(f"Template not saved: {e}")

        return ImportResult(
            imported=len(mapped),
            transaction_numbers=tuple(numbers),
            template_saved=template_saved,
            errors=tuple(errors),
        )

    def import_file(
        self,
        file_path: str,
        mapping: Optional[Mapping[str, str]] = None,
        template_name: Optional[str] = None,
        save_template_as: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ImportResult:
        """Read a spreadsheet file and import it. See ``import_rows``."""
        resolved = self.resolve_mapping(mapping, template_name)
        data = read_spreadsheet(file_path)
        return self.import_rows(data.rows, resolved, save_template_as=save_template_as, today=today)
