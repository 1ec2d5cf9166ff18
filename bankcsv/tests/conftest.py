"""
Shared fixtures: sample statement exports written into tmp_path.
"""
import pytest


ABSA_LINES = [
    "ALL,ACCOUNT SUMMARY,,,",
    "4048123456,CHQ,20230430,BALANCE B/FORWARD,0.00",
    "4048123456,CHQ,20230501,DT,D,1500.00,DID,CASHFOCUS PAYMENT SUPPLIER REF:778812",
    "4048123456,CHQ,20230502,CT,C,250.50,CMT,SETTLEMENT FROM CUSTOMER 1234567",
]

FNB_HEADER_LINES = [
    "Date,Description,Amount,Balance,Reference",
    "01/05/2023,POS PURCHASE WOOLWORTHS,-150.00,1850.00,",
    "02/05/2023,SALARY ACME,25000.00,26850.00,SAL123",
]

FNB_HEADERLESS_LINES = [
    "2023-05-01,CARD PURCHASE SPAR 00123456,120.00,0.00,4880.00",
    "2023-05-02,EFT CREDIT REF 99887,0.00,500.00,5380.00",
]

STANDARD_NEW_LINES = [
    "Account Number,0123456789",
    "Account Name,ACME LTD",
    "Currency,ZAR",
    "",
    "Date,Value Date,Statement Description,Amount,Balance,Type,Originator,Customer Reference",
    "01/05/2023,01/05/2023,OPENING BALANCE,0.00,1000.00,,,",
    "02/05/2023,02/05/2023,DEBIT ORDER INSURE CO,-350.00,650.00,DO,INSURECO,POL998877",
    "03/05/2023,03/05/2023,DEPOSIT,1200.50,1850.50,,,CUST42",
    "31/05/2023,31/05/2023,CLOSING BALANCE,0.00,1850.50,,,",
]

STANDARD_LEGACY_QUOTED_LINES = [
    '"ACC-NO","0123456789","BRANCH","051001"',
    '"HIST","020230501","REF0001","+000000001250.00","DEPOSIT RECEIVED","X"',
    '"HIST","020230502","REF0002","-000000000300.50","BANK CHARGES","X"',
    '"","020230503","REF0003","+000000000010.00","INTEREST","X"',
]

STANDARD_LEGACY_DELIMITED_LINES = [
    "ACCOUNT: 0123456789",
    "2023/05/01,EFT123,-45.00,MONTHLY FEE",
    "20230502,DEP77,900.00,CASH DEPOSIT",
    "CLOSING BALANCE,,,",
]

GENERIC_LINES = [
    "1,REF001,2023-05-01,Coffee,45.00",
    "2,REF002,01/05/2023,Rent,-1200.00",
]


@pytest.fixture
def write_statement(tmp_path):
    """Factory writing a list of lines to a statement file under tmp_path."""
    def _write(name, lines, encoding="utf-8", newline="\n"):
        path = tmp_path / name
        path.write_bytes(newline.join(lines).encode(encoding) + newline.encode(encoding))
        return path
    return _write


@pytest.fixture
def absa_file(write_statement):
    return write_statement("absa.csv", ABSA_LINES)


@pytest.fixture
def fnb_file(write_statement):
    return write_statement("fnb.csv", FNB_HEADER_LINES)


@pytest.fixture
def fnb_headerless_file(write_statement):
    return write_statement("fnb_headerless.csv", FNB_HEADERLESS_LINES)


@pytest.fixture
def standard_new_file(write_statement):
    return write_statement("standard_new.csv", STANDARD_NEW_LINES)


@pytest.fixture
def standard_legacy_quoted_file(write_statement):
    return write_statement("standard_legacy.csv", STANDARD_LEGACY_QUOTED_LINES)


@pytest.fixture
def standard_legacy_delimited_file(write_statement):
    return write_statement("standard_delimited.txt", STANDARD_LEGACY_DELIMITED_LINES)


@pytest.fixture
def generic_file(write_statement):
    return write_statement("generic.csv", GENERIC_LINES)


@pytest.fixture
def unmatched_file(write_statement):
    return write_statement("unknown.txt", ["foo;bar;baz", "qux;quux;corge"])
