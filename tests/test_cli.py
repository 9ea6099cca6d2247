"""Tests for the command line interface."""

from openpyxl import load_workbook

from lawledger.cli.main import cli
from lawledger.config import NO_CLIENT_LABEL


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


class TestTransactionCommands:
    def test_add_and_list(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner, temp_db,
            "tx", "add", "--date", "15.03.2024", "--amount", "1.250,50", "--type", "Gelir",
            "--client", "Acme", "--description", "Vekalet ücreti",
        )
        assert result.exit_code == 0, result.output
        assert "Created transaction" in result.output
        assert "1,250.50" in result.output

        result = _invoke(cli_runner, temp_db, "tx", "list", "--search", "acme")
        assert result.exit_code == 0
        assert "Vekalet ücreti" in result.output
        assert "1 of 1 transaction(s)" in result.output

    def test_current_payment_is_shown_as_outflow(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner, temp_db,
            "tx", "add", "--date", "2024-03-15", "--amount", "500", "--type", "Cari",
            "--client", "Acme", "--payment",
        )
        assert result.exit_code == 0, result.output
        assert "-        500.00" in result.output

    def test_add_with_unknown_type(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "tx", "add", "--amount", "10", "--type", "Hibe")

        assert result.exit_code == 1
        assert "Error: Unknown transaction type 'Hibe'" in result.output

    def test_update_edit_and_delete(self, cli_runner, temp_db, sample_ledger):
        fee = sample_ledger["fee"]

        result = _invoke(cli_runner, temp_db, "tx", "update", fee, "--client", "Gamma")
        assert result.exit_code == 0, result.output

        result = _invoke(cli_runner, temp_db, "tx", "edit", fee, "status", "İnceleniyor")
        assert result.exit_code == 0, result.output
        assert "Updated status" in result.output

        result = _invoke(cli_runner, temp_db, "tx", "list", "--status", "PENDING")
        assert "Gamma" in result.output

        result = _invoke(cli_runner, temp_db, "tx", "delete", fee, sample_ledger["court"], "--yes")
        assert result.exit_code == 0
        assert "Deleted 2 transactions" in result.output

    def test_update_keeps_payment_sign(self, cli_runner, temp_db, transaction_service):
        txn_id = transaction_service.create_transaction(
            date="2024-03-15", amount=500, type="Cari", client="Acme", is_payment=True
        )

        result = _invoke(cli_runner, temp_db, "tx", "update", txn_id, "--amount", "-300")
        assert result.exit_code == 0, result.output

        result = _invoke(cli_runner, temp_db, "tx", "list")
        assert "-        300.00" in result.output

        result = _invoke(cli_runner, temp_db, "tx", "update", txn_id, "--accrual")
        assert result.exit_code == 0, result.output
        assert "-        300.00" not in _invoke(cli_runner, temp_db, "tx", "list").output

    def test_edit_number_is_refused(self, cli_runner, temp_db, sample_ledger):
        result = _invoke(cli_runner, temp_db, "tx", "edit", sample_ledger["fee"], "transaction_number", "X")

        assert result.exit_code == 1
        assert "cannot be edited inline" in result.output

    def test_delete_can_be_cancelled(self, cli_runner, temp_db, sample_ledger):
        result = _invoke(cli_runner, temp_db, "tx", "delete", sample_ledger["fee"], input="n\n")

        assert "Deletion cancelled." in result.output
        assert "4 of 4" in _invoke(cli_runner, temp_db, "tx", "list").output


class TestRosterCommands:
    def test_bank_accounts(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "bank", "add", "Garanti", "--balance", "250", "--currency", "usd")
        assert result.exit_code == 0, result.output

        result = _invoke(cli_runner, temp_db, "bank", "list")
        assert "Garanti" in result.output
        assert "USD" in result.output

        result = _invoke(cli_runner, temp_db, "bank", "add", "Kasa", "--currency", "GBP")
        assert result.exit_code == 1
        assert "Unknown currency" in result.output

    def test_personnel(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "personnel", "add", "Cem Kaya", "--bonus", "40", "--title", "Avukat")
        assert result.exit_code == 0, result.output

        result = _invoke(cli_runner, temp_db, "personnel", "add", "Cem Kaya")
        assert result.exit_code == 1
        assert "already exists" in result.output

        result = _invoke(cli_runner, temp_db, "personnel", "add", "Deniz", "--bonus", "140")
        assert result.exit_code == 1

        result = _invoke(cli_runner, temp_db, "personnel", "list")
        assert "Cem Kaya" in result.output
        assert "%40" in result.output

        result = _invoke(cli_runner, temp_db, "personnel", "update", "Cem Kaya", "--bonus", "50")
        assert result.exit_code == 0, result.output
        assert "%50" in _invoke(cli_runner, temp_db, "personnel", "list").output

        result = _invoke(cli_runner, temp_db, "personnel", "delete", "Cem Kaya", "--yes")
        assert "Removed 'Cem Kaya'" in result.output
        assert _invoke(cli_runner, temp_db, "personnel", "delete", "Cem Kaya", "--yes").exit_code == 1

    def test_categories(self, cli_runner, temp_db):
        assert _invoke(cli_runner, temp_db, "category", "add", "Harç", "--type", "Gider").exit_code == 0
        assert _invoke(cli_runner, temp_db, "category", "add", "Vekalet", "--type", "INCOME").exit_code == 0

        result = _invoke(cli_runner, temp_db, "category", "list", "--type", "Gider")
        assert "Harç" in result.output
        assert "Vekalet" not in result.output

        assert _invoke(cli_runner, temp_db, "category", "delete", "Harç").exit_code == 0
        assert _invoke(cli_runner, temp_db, "category", "delete", "Harç").exit_code == 1


class TestImportCommand:
    def _csv(self, tmp_path):
        path = tmp_path / "ekstre.csv"
        path.write_text(
            "Tarih;Tutar;Açıklama;Tür\n15.03.2024;1.250,50;Harç;Gider\n16.03.2024;3000;Vekalet;Gelir\n",
            encoding="utf-8",
        )
        return str(path)

    def test_import_and_save_template(self, cli_runner, temp_db, tmp_path):
        path = self._csv(tmp_path)

        result = _invoke(
            cli_runner, temp_db,
            "import", path, "--map", "date=Tarih", "--map", "amount=Tutar",
            "--map", "description=Açıklama", "--map", "type=Tür", "--save-template", "banka",
        )
        assert result.exit_code == 0, result.output
        assert "Imported: 2 transactions" in result.output
        assert "-BLK-00001" in result.output
        assert "Saved mapping as template 'banka'" in result.output

        result = _invoke(cli_runner, temp_db, "template", "list")
        assert "banka" in result.output

        result = _invoke(cli_runner, temp_db, "import", path, "--template", "banka")
        assert result.exit_code == 0, result.output
        assert "-BLK-00003" in result.output

    def test_preview_writes_nothing(self, cli_runner, temp_db, tmp_path):
        result = _invoke(
            cli_runner, temp_db,
            "import", self._csv(tmp_path), "--map", "date=Tarih", "--map", "amount=Tutar",
            "--map", "description=Açıklama", "--preview",
        )

        assert result.exit_code == 0, result.output
        assert "Rows: 2" in result.output
        assert "1,250.50" in result.output
        assert "No transactions found." in _invoke(cli_runner, temp_db, "tx", "list").output

    def test_missing_required_mapping(self, cli_runner, temp_db, tmp_path):
        result = _invoke(cli_runner, temp_db, "import", self._csv(tmp_path), "--map", "date=Tarih")

        assert result.exit_code == 1
        assert "Required fields are not mapped: amount, description" in result.output

    def test_bad_map_option(self, cli_runner, temp_db, tmp_path):
        result = _invoke(cli_runner, temp_db, "import", self._csv(tmp_path), "--map", "Tarih")

        assert result.exit_code == 1
        assert "Invalid --map" in result.output

    def test_unreadable_files_are_reported(self, cli_runner, temp_db, tmp_path):
        corrupt = tmp_path / "ekstre.xlsx"
        corrupt.write_bytes(b"not a workbook")

        result = _invoke(cli_runner, temp_db, "import", str(corrupt), "--map", "date=Tarih")

        assert result.exit_code == 1
        assert "Error: Not a readable XLSX workbook" in result.output

    def test_windows_turkish_csv(self, cli_runner, temp_db, tmp_path):
        path = tmp_path / "ekstre.csv"
        path.write_bytes("Tarih;Tutar;Açıklama\n15.03.2024;250;Harç\n".encode("cp1254"))

        result = _invoke(
            cli_runner, temp_db,
            "import", str(path), "--map", "date=Tarih", "--map", "amount=Tutar", "--map", "description=Açıklama",
        )

        assert result.exit_code == 0, result.output
        assert "Imported: 1 transactions" in result.output


class TestReportCommands:
    def test_dashboard(self, cli_runner, temp_db, sample_ledger):
        result = _invoke(cli_runner, temp_db, "report", "dashboard")

        assert result.exit_code == 0, result.output
        assert "AYAB Finans" in result.output
        assert "1,000.00" in result.output
        assert "1,600.00" in result.output
        assert "Recent transactions:" in result.output
        assert "9,999.00" not in result.output

    def test_groups(self, cli_runner, temp_db, sample_ledger):
        result = _invoke(cli_runner, temp_db, "report", "groups", "--sort", "expense", "--search", "acme")

        assert result.exit_code == 0, result.output
        assert "Dava 1" in result.output
        assert "Dava 2" not in result.output

    def test_account_group_detail(self, cli_runner, temp_db, sample_ledger):
        result = _invoke(
            cli_runner, temp_db, "report", "accounts", "--group", "Dava 1", "--exclude", NO_CLIENT_LABEL
        )

        assert result.exit_code == 0, result.output
        assert "Clients: Acme" in result.output
        assert "2024-05" in result.output

    def test_bank_reconciliation(self, cli_runner, temp_db, sample_ledger):
        result = _invoke(cli_runner, temp_db, "report", "bank")

        assert result.exit_code == 0, result.output
        assert "Ziraat" in result.output
        assert "NOT reconciled" in result.output

    def test_personnel_and_quarters(self, cli_runner, temp_db, sample_ledger):
        result = _invoke(cli_runner, temp_db, "report", "personnel", "--sort", "count-desc")
        assert result.exit_code == 0, result.output
        assert "Ayşe Yılmaz" in result.output

        result = _invoke(cli_runner, temp_db, "report", "quarters", "Ayşe Yılmaz", "--ledger")
        assert result.exit_code == 0, result.output
        assert "2024-Q2" in result.output
        assert "240.00" in result.output

        result = _invoke(cli_runner, temp_db, "report", "quarters", "Nobody")
        assert result.exit_code == 1

    def test_unmatched_references_are_listed(self, cli_runner, temp_db, sample_ledger, transaction_service):
        transaction_service.create_transaction(date="2024-05-20", amount=10, type="Gider", account="Garanti")

        result = _invoke(cli_runner, temp_db, "report", "bank")

        assert "account 'Garanti': 1 transaction(s)" in result.output


class TestExportCommands:
    def test_group_statement(self, cli_runner, temp_db, sample_ledger, tmp_path):
        out = tmp_path / "dava.xlsx"

        result = _invoke(cli_runner, temp_db, "export", "group", "Dava 1", "-o", str(out))

        assert result.exit_code == 0, result.output
        assert load_workbook(out).sheetnames == ["Proje Ekstresi"]

    def test_account_group(self, cli_runner, temp_db, sample_ledger, tmp_path):
        out = tmp_path / "masraf.xlsx"

        result = _invoke(cli_runner, temp_db, "export", "account-group", "Dava 1", "-o", str(out))

        assert result.exit_code == 0, result.output
        assert load_workbook(out).sheetnames == ["Islem_Detayi", "Aylik_Ozet"]

    def test_personnel_quarter_and_ledger(self, cli_runner, temp_db, sample_ledger, tmp_path):
        out = tmp_path / "hakedis.xlsx"
        result = _invoke(
            cli_runner, temp_db,
            "export", "personnel", "Ayşe Yılmaz", "--year", "2024", "--quarter", "2", "-o", str(out),
        )
        assert result.exit_code == 0, result.output
        assert load_workbook(out).sheetnames == ["Ozet", "Islem_Dokumu"]

        out = tmp_path / "cari.xlsx"
        result = _invoke(cli_runner, temp_db, "export", "personnel", "Ayşe Yılmaz", "-o", str(out))
        assert result.exit_code == 0, result.output
        assert load_workbook(out).sheetnames == ["Cari_Hareketler"]

        result = _invoke(cli_runner, temp_db, "export", "personnel", "Ayşe Yılmaz", "--year", "2024")
        assert result.exit_code == 1

        result = _invoke(
            cli_runner, temp_db, "export", "personnel", "Ayşe Yılmaz", "--year", "2019", "--quarter", "1"
        )
        assert result.exit_code == 1
        assert "No transactions" in result.output

    def test_transactions_csv(self, cli_runner, temp_db, sample_ledger, tmp_path):
        out = tmp_path / "islemler.csv"

        result = _invoke(cli_runner, temp_db, "export", "transactions", "--type", "Gelir", "-o", str(out))

        assert result.exit_code == 0, result.output
        lines = out.read_text(encoding="utf-8-sig").splitlines()
        assert lines[0].startswith("İşlem No,")
        assert len(lines) == 3


class TestSettingsCommands:
    def test_set_and_show(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "settings", "set-name", "Yılmaz Hukuk", "--logo", "logo.png")
        assert result.exit_code == 0, result.output

        result = _invoke(cli_runner, temp_db, "settings", "show")
        assert "Yılmaz Hukuk" in result.output
        assert "logo.png" in result.output
        assert temp_db.database_path in result.output

    def test_empty_name(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "settings", "set-name", " ")

        assert result.exit_code == 1
        assert "cannot be empty" in result.output
