# -*- coding: utf-8 -*-
"""Fixtures comuns: aba falsa com a mesma interface usada do gspread.Worksheet."""

import re

import pytest


class FakeWorksheet:
    """Planilha em memória. Linhas e colunas 1-based, como no gspread."""

    def __init__(self, rows=None):
        self.rows = [list(r) for r in (rows or [])]
        self.calls = []

    def _ensure(self, row_num, col_num):
        while len(self.rows) < row_num:
            self.rows.append([])
        row = self.rows[row_num - 1]
        while len(row) < col_num:
            row.append("")

    def row_values(self, row_num):
        if row_num > len(self.rows):
            return []
        row = list(self.rows[row_num - 1])
        while row and row[-1] == "":
            row.pop()
        return row

    def col_values(self, col_num):
        values = [r[col_num - 1] if len(r) >= col_num else "" for r in self.rows]
        while values and values[-1] == "":
            values.pop()
        return values

    def get_all_values(self):
        return [list(r) for r in self.rows]

    def append_row(self, values, value_input_option=None):
        self.calls.append(("append_row", value_input_option))
        self.rows.append([str(v) for v in values])

    def update(self, values=None, range_name=None, value_input_option=None):
        self.calls.append(("update", range_name))
        m = re.fullmatch(r"A(\d+)", range_name)
        start = int(m.group(1))
        for offset, row in enumerate(values):
            row_num = start + offset
            self._ensure(row_num, len(row))
            self.rows[row_num - 1][: len(row)] = [str(v) for v in row]

    def update_cell(self, row_num, col_num, value):
        self._ensure(row_num, col_num)
        self.rows[row_num - 1][col_num - 1] = str(value)

    def delete_rows(self, row_num):
        self.calls.append(("delete_rows", row_num))
        del self.rows[row_num - 1]


@pytest.fixture
def fake_ws():
    return FakeWorksheet()


@pytest.fixture
def make_ws():
    return FakeWorksheet
