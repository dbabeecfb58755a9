# -*- coding: utf-8 -*-
"""Testes do ID de membro, montagem de registros e lista de familiares."""

from datetime import datetime, timezone

import pytest

from config import MEMBER_ID_LENGTH
from members import (
    MEMBER_ID_ALPHABET,
    UNKNOWN_MEMBER,
    FamilyMember,
    FamilyRoster,
    assemble_family_record,
    assemble_member_record,
    display_name,
    generate_member_id,
    missing_required_fields,
    profile_changes,
)

NOW = datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)

FORM = {
    "full_name": "Ana Souza",
    "birth_date": "1990-05-04",
    "document_type": "dni",
    "document_number": "12345678A",
    "phone": "+34 600 000 000",
    "email": "ana@example.com",
    "address": "Calle Mayor 1",
    "city": "Madrid",
    "zip_code": "28013",
    "country": "Espanha",
    "church_name": "AD Bon Pastor",
}


class TestGenerateMemberId:
    """generate_member_id."""

    def test_length_and_alphabet(self):
        for _ in range(200):
            member_id = generate_member_id()
            assert len(member_id) == MEMBER_ID_LENGTH
            assert set(member_id) <= set(MEMBER_ID_ALPHABET)

    def test_custom_length(self):
        assert len(generate_member_id(4)) == 4

    def test_collisions_are_rare(self):
        ids = [generate_member_id() for _ in range(10000)]
        assert len(set(ids)) >= 9990


class TestAssembleMemberRecord:
    """assemble_member_record."""

    def test_fields_pass_through(self):
        record = assemble_member_record(FORM, photo_url="data:image/jpeg;base64,AAA", now=NOW)
        data = record.to_record()
        for key, value in FORM.items():
            assert data[key] == value
        assert data["profile_photo_url"] == "data:image/jpeg;base64,AAA"

    def test_new_id_and_timestamp(self):
        record = assemble_member_record(FORM, now=NOW)
        assert len(record.member_id) == MEMBER_ID_LENGTH
        assert record.created_at == NOW.isoformat()
        assert record.profile_photo_url == ""

    def test_caller_cannot_choose_generated_fields(self):
        fields = dict(FORM, member_id="HACKED", created_at="1999-01-01", unknown="x")
        record = assemble_member_record(fields, now=NOW)
        assert record.member_id != "HACKED"
        assert record.created_at == NOW.isoformat()
        assert "unknown" not in record.to_record()

    def test_default_timestamp_is_utc(self):
        record = assemble_member_record(FORM)
        assert record.created_at.endswith("+00:00")


class TestAssembleFamilyRecord:

    def test_linked_to_owner(self):
        member = assemble_family_record(
            {"full_name": "Léo", "birth_date": "2015-02-01", "relationship": "child", "id": "x"},
            main_member_id="ABC123XYZ", now=NOW,
        )
        assert member.main_member_id == "ABC123XYZ"
        assert member.id == ""
        assert member.created_at == NOW.isoformat()
        assert member.is_complete()


class TestMissingRequiredFields:

    def test_reports_blank_fields_in_order(self):
        fields = dict(FORM, phone="  ", email="")
        assert missing_required_fields(fields) == ["phone", "email"]

    def test_complete_form(self):
        assert missing_required_fields(FORM) == []


class TestDisplayName:

    def test_known_member(self):
        assert display_name({"A1": {"full_name": "Ana"}}, "A1") == "Ana"

    def test_missing_member_gets_placeholder(self):
        assert display_name({}, "A1") == UNKNOWN_MEMBER
        assert display_name({"A1": {"full_name": ""}}, "A1") == UNKNOWN_MEMBER
        assert display_name({"A1": {"full_name": "Ana"}}, None) == UNKNOWN_MEMBER


class TestFamilyMember:

    def test_from_record_ignores_extra_columns(self):
        member = FamilyMember.from_record({"id": "1", "full_name": "Léo", "extra": "x", "phone": None})
        assert member.id == "1"
        assert member.full_name == "Léo"
        assert member.phone == ""

    def test_is_complete(self):
        assert not FamilyMember(full_name="Léo").is_complete()
        assert FamilyMember(full_name="Léo", birth_date="2015-01-01", relationship="child").is_complete()


class TestFamilyRoster:
    """Operações da lista de familiares."""

    def test_add_links_to_owner(self):
        changes = []
        roster = FamilyRoster("OWNER", on_change=changes.append)
        member = roster.add()
        assert len(roster) == 1
        assert member.main_member_id == "OWNER"
        assert changes == [roster.members]

    def test_update_changes_only_that_entry(self):
        roster = FamilyRoster("OWNER")
        roster.add()
        roster.add()
        roster.update(1, full_name="Léo", relationship="child")
        assert roster[1].full_name == "Léo"
        assert roster[1].relationship == "child"
        assert roster[0].full_name == ""

    def test_update_unknown_field_is_rejected(self):
        roster = FamilyRoster("OWNER")
        roster.add()
        with pytest.raises(TypeError):
            roster.update(0, nickname="x")

    def test_update_locked_field_is_rejected(self):
        roster = FamilyRoster("OWNER")
        roster.add()
        with pytest.raises(ValueError):
            roster.update(0, main_member_id="OTHER")
        assert roster[0].main_member_id == "OWNER"

    def test_remove_unsaved_entry_needs_no_delete(self):
        roster = FamilyRoster("OWNER")
        roster.add()
        roster.remove(0)
        assert len(roster) == 0

    def test_remove_saved_entry_deletes_row_first(self):
        deleted = []

        def delete_row(record_id):
            assert len(roster) == 2
            deleted.append(record_id)

        roster = FamilyRoster("OWNER", members=[FamilyMember(id="r1"), FamilyMember(id="r2")])
        roster.remove(0, delete_row=delete_row)
        assert deleted == ["r1"]
        assert [m.id for m in roster] == ["r2"]

    def test_failed_delete_keeps_list(self):
        def delete_row(record_id):
            raise LookupError(record_id)

        roster = FamilyRoster("OWNER", members=[FamilyMember(id="r1")])
        with pytest.raises(LookupError):
            roster.remove(0, delete_row=delete_row)
        assert [m.id for m in roster] == ["r1"]

    def test_remove_saved_entry_without_delete_row(self):
        roster = FamilyRoster("OWNER", members=[FamilyMember(id="r1")])
        with pytest.raises(ValueError):
            roster.remove(0)
        assert len(roster) == 1

    def test_savable_skips_incomplete(self):
        roster = FamilyRoster("OWNER")
        roster.add()
        roster.add()
        roster.update(0, full_name="Léo", birth_date="2015-01-01", relationship="child")
        assert [m.full_name for m in roster.savable()] == ["Léo"]

    def test_replace(self):
        roster = FamilyRoster("OWNER")
        roster.add()
        roster.replace([FamilyMember(id="r9")])
        assert roster.members == (FamilyMember(id="r9"),)


class TestProfileChanges:
    """Edição dos próprios dados pelo membro."""

    CURRENT = dict(FORM, id="r1", member_id="ABC123XYZ", created_at="2026-01-01", profile_photo_url="")

    def test_only_changed_fields(self):
        fields = dict(FORM, phone="+34 611 111 111", city="Getafe")
        assert profile_changes(self.CURRENT, fields) == {"phone": "+34 611 111 111", "city": "Getafe"}

    def test_identity_fields_never_change(self):
        fields = dict(FORM, member_id="OTHER0000", created_at="2030-01-01", id="x")
        assert profile_changes(self.CURRENT, fields) == {}

    def test_new_photo(self):
        changes = profile_changes(self.CURRENT, FORM, photo_url="data:image/jpeg;base64,AAA")
        assert changes == {"profile_photo_url": "data:image/jpeg;base64,AAA"}
        assert profile_changes(self.CURRENT, FORM, photo_url=None) == {}
