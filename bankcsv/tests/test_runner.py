"""
Tests for end-to-end parsing, failure escalation and export.
"""
import csv
import pytest

from bankcsv import parse_statement, StatementParser
from bankcsv.core.errors import NoTransactionsError, StatementError
from bankcsv.core.runner import write_csv, write_json
from bankcsv.models.schema import COLUMN_LABELS, ParseResult, ParseStatus


class TestParseStatement:

    def test_generic_file(self, generic_file):
        result = parse_statement(generic_file)

        assert result.status == ParseStatus.OK
        assert result.bank == "Generic CSV"
        assert result.short_token == "Bank"
        assert result.source == str(generic_file)
        assert len(result.transactions) == 2

    def test_bank_hint(self, fnb_file):
        result = parse_statement(fnb_file, bank_hint="FNB business")
        assert result.bank == "FNB"
        assert len(result.transactions) == 2

    def test_fnb_without_rows_escalates(self, write_statement):
        path = write_statement("fnb_empty.txt", ["nothing useful here"])

        with pytest.raises(NoTransactionsError) as exc_info:
            StatementParser(bank_hint="FNB").parse(path)

        assert isinstance(exc_info.value, StatementError)
        assert exc_info.value.source == str(path)

    def test_empty_result_is_not_an_error(self, write_statement):
        result = parse_statement(write_statement("absa_empty.csv", ["hello world"]), bank_hint="ABSA")
        assert result.status == ParseStatus.EMPTY

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_statement(tmp_path / "missing.csv")


class TestExport:

    def test_json_round_trip(self, generic_file, tmp_path):
        result = parse_statement(generic_file)
        output = tmp_path / "out.json"

        write_json(result, output)

        loaded = ParseResult.model_validate_json(output.read_text(encoding="utf-8"))
        assert loaded == result

    def test_csv_uses_column_labels(self, generic_file, tmp_path):
        result = parse_statement(generic_file)
        output = tmp_path / "out.csv"

        write_csv(result, output)

        with open(output, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))

        assert rows[0] == ["Ext. Tran. ID", "Ext. Ref. Nbr.", "Tran. Date", "Tran. Desc.", "Receipt", "Disbursement"]
        assert rows[0] == list(COLUMN_LABELS.values())
        assert rows[1] == ["1", "REF001", "2023-05-01", "Coffee", "45.00", "0.00"]
        assert rows[2] == ["2", "REF002", "2023-05-01", "Rent", "0.00", "1200.00"]
