# -*- coding: utf-8 -*-
"""Testes das operações de linha sobre a aba (sem acesso à API)."""

import gspread
import pytest

from config import TABLES
from members import FamilyMember, MemberRecord
import sheets

MEMBER_HEADERS = TABLES["members"]
FAMILY_HEADERS = TABLES["family_members"]


def _row(headers, **values):
    return [values.get(h, "") for h in headers]


class TestCells:

    def test_to_cell(self):
        assert sheets.to_cell(None) == ""
        assert sheets.to_cell(True) == "TRUE"
        assert sheets.to_cell(False) == "FALSE"
        assert sheets.to_cell(3) == "3"

    def test_as_bool(self):
        assert sheets.as_bool("TRUE")
        assert sheets.as_bool(" sim ")
        assert sheets.as_bool(True)
        assert not sheets.as_bool("FALSE")
        assert not sheets.as_bool("")
        assert not sheets.as_bool(None)


class TestEnsureHeaders:
    """ensure_headers."""

    def test_empty_sheet_gets_headers(self, fake_ws):
        assert sheets.ensure_headers(fake_ws, ["id", "name"]) == ["id", "name"]
        assert fake_ws.row_values(1) == ["id", "name"]

    def test_missing_columns_are_appended(self, make_ws):
        ws = make_ws([["id", "name", "legacy"]])
        headers = sheets.ensure_headers(ws, ["id", "name", "email", "phone"])
        assert headers == ["id", "name", "legacy", "email", "phone"]
        assert ws.row_values(1) == headers


class TestRecords:
    """Leitura, inserção, alteração e exclusão."""

    def test_read_records_pads_and_skips_blank_rows(self, make_ws):
        ws = make_ws([["a", "b"], ["1"], ["", ""], ["2", "3"]])
        assert sheets.read_records(ws) == [{"a": "1", "b": ""}, {"a": "2", "b": "3"}]

    def test_read_records_without_data(self, make_ws):
        assert sheets.read_records(make_ws([])) == []
        assert sheets.read_records(make_ws([["a", "b"]])) == []

    def test_insert_fills_id_and_created_at(self, make_ws):
        headers = ["id", "title", "is_active", "created_at"]
        ws = make_ws([headers])
        saved = sheets.insert_record(ws, headers, {"title": "Culto", "is_active": True, "ignored": "x"})
        assert saved["id"]
        assert saved["created_at"]
        assert ws.rows[1] == [saved["id"], "Culto", "TRUE", saved["created_at"]]
        assert ("append_row", "RAW") in ws.calls

    def test_update_ignores_immutable_columns(self, make_ws):
        headers = ["id", "title", "created_at"]
        ws = make_ws([headers, ["r1", "Velho", "2026-01-01"]])
        sheets.update_record(ws, headers, "r1", {"title": "Novo", "created_at": "2030-01-01", "id": "r2"})
        assert ws.rows[1] == ["r1", "Novo", "2026-01-01"]

    def test_update_missing_row(self, make_ws):
        ws = make_ws([["id", "title"]])
        with pytest.raises(sheets.RecordNotFound):
            sheets.update_record(ws, ["id", "title"], "nope", {"title": "x"})

    def test_delete(self, make_ws):
        ws = make_ws([["id"], ["r1"], ["r2"]])
        sheets.delete_record(ws, "r2")
        assert ws.get_all_values() == [["id"], ["r1"]]
        with pytest.raises(sheets.RecordNotFound):
            sheets.delete_record(ws, "r2")


class TestInsertMember:
    """insert_member garante ID de membro livre."""

    def test_free_id_is_kept(self, make_ws):
        ws = make_ws([MEMBER_HEADERS])
        saved = sheets.insert_member(ws, MEMBER_HEADERS, MemberRecord(member_id="NEW000001", created_at="t", full_name="Ana"))
        assert saved["member_id"] == "NEW000001"
        assert sheets.read_records(ws)[0]["full_name"] == "Ana"

    def test_collision_regenerates(self, make_ws, monkeypatch):
        ws = make_ws([MEMBER_HEADERS, _row(MEMBER_HEADERS, id="r1", member_id="TAKEN0001")])
        monkeypatch.setattr(sheets, "generate_member_id", lambda: "FREE00001")
        saved = sheets.insert_member(ws, MEMBER_HEADERS, MemberRecord(member_id="TAKEN0001", created_at="t"))
        assert saved["member_id"] == "FREE00001"
        assert [r["member_id"] for r in sheets.read_records(ws)] == ["TAKEN0001", "FREE00001"]

    def test_gives_up_after_attempts(self, make_ws, monkeypatch):
        ws = make_ws([MEMBER_HEADERS, _row(MEMBER_HEADERS, id="r1", member_id="TAKEN0001")])
        monkeypatch.setattr(sheets, "generate_member_id", lambda: "TAKEN0001")
        with pytest.raises(sheets.MemberIdCollision):
            sheets.insert_member(ws, MEMBER_HEADERS, MemberRecord(member_id="TAKEN0001", created_at="t"), attempts=3)
        assert len(sheets.read_records(ws)) == 1


class TestFamilyMembers:
    """Familiares por membro principal."""

    def _ws(self, make_ws):
        return make_ws([
            FAMILY_HEADERS,
            _row(FAMILY_HEADERS, id="r1", main_member_id="OWNER", full_name="Maria",
                 birth_date="1992-01-01", relationship="spouse", created_at="2026-01-01"),
            _row(FAMILY_HEADERS, id="r2", main_member_id="OTHER", full_name="João",
                 birth_date="1980-01-01", relationship="parent", created_at="2026-01-01"),
        ])

    def test_family_of(self, make_ws):
        family = sheets.family_of(self._ws(make_ws), "OWNER")
        assert [m.id for m in family] == ["r1"]
        assert isinstance(family[0], FamilyMember)

    def test_save_updates_inserts_and_skips_incomplete(self, make_ws):
        ws = self._ws(make_ws)
        current = sheets.family_of(ws, "OWNER")[0]
        members = [
            FamilyMember(**dict(current.to_record(), full_name="Maria Souza")),
            FamilyMember(full_name="Léo", birth_date="2015-02-01", relationship="child"),
            FamilyMember(full_name="Sem data"),
        ]

        reloaded = sheets.save_family_members(ws, FAMILY_HEADERS, "OWNER", members)

        assert [m.full_name for m in reloaded] == ["Maria Souza", "Léo"]
        assert reloaded[0].id == "r1"
        assert reloaded[0].created_at == "2026-01-01"
        assert reloaded[1].id
        assert reloaded[1].main_member_id == "OWNER"
        assert len(sheets.read_records(ws)) == 3


class TestConfigValues:

    def test_set_then_get(self, make_ws):
        ws = make_ws([["key", "value"]])
        assert sheets.get_config_value(ws, "daily_verse", default="-") == "-"
        sheets.set_config_value(ws, "daily_verse", "Salmo 23")
        sheets.set_config_value(ws, "daily_verse", "João 3:16")
        assert sheets.get_config_value(ws, "daily_verse") == "João 3:16"
        assert len(sheets.read_records(ws)) == 1


class TestRegisterMember:
    """register_member: membro primeiro, familiares depois."""

    FAMILY = (FamilyMember(full_name="Léo", birth_date="2015-02-01", relationship="child"),)

    def test_member_and_family_saved(self, make_ws):
        member_ws, family_ws = make_ws([MEMBER_HEADERS]), make_ws([FAMILY_HEADERS])
        saved, family_saved = sheets.register_member(
            member_ws, MEMBER_HEADERS, family_ws, FAMILY_HEADERS,
            MemberRecord(member_id="NEW000001", created_at="t", full_name="Ana"), self.FAMILY,
        )
        assert family_saved is True
        assert [m.main_member_id for m in sheets.family_of(family_ws, saved["member_id"])] == ["NEW000001"]

    def test_family_failure_keeps_single_member(self, make_ws):
        member_ws, family_ws = make_ws([MEMBER_HEADERS]), make_ws([FAMILY_HEADERS])

        def quota(*args, **kwargs):
            raise gspread.exceptions.GSpreadException("quota")

        family_ws.append_row = quota
        saved, family_saved = sheets.register_member(
            member_ws, MEMBER_HEADERS, family_ws, FAMILY_HEADERS,
            MemberRecord(member_id="NEW000001", created_at="t", full_name="Ana"), self.FAMILY,
        )
        assert family_saved is False
        assert saved["member_id"] == "NEW000001"
        assert [r["member_id"] for r in sheets.read_records(member_ws)] == ["NEW000001"]
        assert sheets.read_records(family_ws) == []

    def test_without_family_skips_family_sheet(self, make_ws):
        member_ws = make_ws([MEMBER_HEADERS])
        saved, family_saved = sheets.register_member(
            member_ws, MEMBER_HEADERS, None, FAMILY_HEADERS,
            MemberRecord(member_id="NEW000001", created_at="t"),
        )
        assert family_saved is True
        assert len(sheets.read_records(member_ws)) == 1
