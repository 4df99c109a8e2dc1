from datetime import datetime

import pytest
from openpyxl import Workbook

from ledgerlens.errors import FormatError
from ledgerlens.matcher import find_definitions, parse_all
from ledgerlens.models import DefinitionKey
from ledgerlens.sources import excel_date_format, read_rows, read_xlsx_rows, rows_from_text


def test_rows_from_text():
    rows = rows_from_text('Date,Description,Amount\n2023-10-01,"Coffee, large",4.50\n')
    assert rows == [["Date", "Description", "Amount"], ["2023-10-01", "Coffee, large", "4.50"]]


def test_rows_from_text_skips_blank_lines():
    rows = rows_from_text("a,b\n\n\nc,d\n")
    assert rows == [["a", "b"], ["c", "d"]]


def test_rows_from_text_bad_quoting():
    with pytest.raises(FormatError):
        rows_from_text('a,"b"x,c\n')


def test_read_rows_strips_bom(tmp_path):
    path = tmp_path / "bom.csv"
    path.write_bytes("\ufeffDate,Amount\n2023-10-01,1.00\n".encode("utf-8"))
    assert read_rows(path)[0] == ["Date", "Amount"]


def test_read_rows_rejects_non_utf8(tmp_path):
    path = tmp_path / "latin.csv"
    path.write_bytes("Date,Description\n2023-10-01,Caf\xe9\n".encode("latin-1"))
    with pytest.raises(FormatError):
        read_rows(path)


def test_read_rows_unsupported_extension(tmp_path):
    path = tmp_path / "statement.pdf"
    path.write_bytes(b"%PDF-1.4")
    with pytest.raises(ValueError, match="Unsupported file type"):
        read_rows(path)


def test_read_xlsx_rows(tmp_path):
    path = tmp_path / "statement.xlsx"
    wb = Workbook()
    ws = wb.active
    ws.append(["Tags", "Date", "Description", "Amount"])
    ws.append([None, datetime(2023, 10, 1), "GROCERY STORE", 45.67])
    ws.append([None, None, None, None])
    ws.append(["Travel", datetime(2023, 10, 2), "AIRLINE", -120.5])
    wb.save(path)

    rows = read_xlsx_rows(path)
    assert rows == [
        ["Tags", "Date", "Description", "Amount"],
        ["", "2023-10-01", "GROCERY STORE", "45.67"],
        ["Travel", "2023-10-02", "AIRLINE", "-120.5"],
    ]


def test_xlsx_export_is_detected(tmp_path):
    path = tmp_path / "statement.xlsx"
    wb = Workbook()
    ws = wb.active
    ws.append(["Tags", "Date", "Description", "Amount"])
    ws.append(["Food", datetime(2023, 10, 1), "GROCERY STORE", 45.67])
    wb.save(path)

    rows = read_rows(path)
    assert find_definitions(rows) == {DefinitionKey.MIGRATION}
    expenses = parse_all(rows, DefinitionKey.MIGRATION)
    assert expenses[0].tags == {"Food"}
    assert expenses[0].amount == 45.67


def test_read_xlsx_rows_not_a_workbook(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_text("not a zip file")
    with pytest.raises(FormatError):
        read_xlsx_rows(path)


@pytest.mark.parametrize("number_format, expected", [
    ("mm/dd/yyyy", "%m/%d/%Y"),
    ("m/d/yyyy", "%m/%d/%Y"),
    ("dd-mm-yyyy", "%d-%m-%Y"),
    ("yyyy-mm-dd h:mm:ss", "%Y-%m-%d"),
    ("mm-dd-yy", "%m/%d/%Y"),
    ("[$-409]d-mmm-yy;@", "%d-%b-%y"),
    ("General", "%Y-%m-%d"),
    (None, "%Y-%m-%d"),
])
def test_excel_date_format(number_format, expected):
    assert excel_date_format(number_format) == expected


def _dated_workbook(path, header, data, date_columns, number_format):
    wb = Workbook()
    ws = wb.active
    ws.append(header)
    for values in data:
        ws.append(values)
    for row in ws.iter_rows(min_row=2):
        for index in date_columns:
            row[index].number_format = number_format
    wb.save(path)


def test_xlsx_us_dates_match_their_definition(tmp_path):
    path = tmp_path / "discover.xlsx"
    _dated_workbook(
        path,
        ["Trans. Date", "Post Date", "Description", "Amount", "Category"],
        [
            [datetime(2023, 10, 1), datetime(2023, 10, 2), "GROCERY STORE", 45.67, "Supermarkets"],
            [datetime(2023, 10, 3), datetime(2023, 10, 3), "INTERNET PAYMENT", -500.0, "Payments"],
        ],
        date_columns=(0, 1),
        number_format="mm/dd/yyyy",
    )

    rows = read_rows(path)
    assert rows[1][:2] == ["10/01/2023", "10/02/2023"]
    assert find_definitions(rows) == {DefinitionKey.DISCOVER}
    expenses = parse_all(rows, DefinitionKey.DISCOVER)
    assert expenses[0].date == datetime(2023, 10, 1)
    assert [e.amount for e in expenses] == [45.67, -500.0]


def test_xlsx_day_first_dates_match_their_definition(tmp_path):
    path = tmp_path / "max.xlsx"
    _dated_workbook(
        path,
        ["Transaction Date", "Merchant", "Category", "Card", "Type", "Charge Amount",
         "Charge Currency", "Original Amount", "Original Currency"],
        [[datetime(2023, 10, 5), "ONLINE STORE", "Shopping", "1234", "Regular", 185.0, "₪", 50.0, "$"]],
        date_columns=(0,),
        number_format="dd-mm-yyyy",
    )

    rows = read_rows(path)
    assert rows[1][0] == "05-10-2023"
    assert find_definitions(rows) == {DefinitionKey.MAX_CARD}
    assert parse_all(rows, DefinitionKey.MAX_CARD)[0].amount == 50.0
