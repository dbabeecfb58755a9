# -*- coding: utf-8 -*-
"""Aba: meus familiares (consulta pelo ID de membro, edição dos dados e dos familiares)."""

import logging

import gspread
import streamlit as st

from documents import validate_document
from members import FIELD_LABELS, REQUIRED_MEMBER_FIELDS, FamilyRoster, missing_required_fields, profile_changes
from photo_utils import photo_to_data_url
import sheets
from tabs.family_editor import render_family_editor, reset_widgets
from tabs.tab_register import MEMBER_FORM_FIELDS
from tabs.utils import person_fields, photo_input, render_member_card

logger = logging.getLogger(__name__)


def _load_roster(member_id: str) -> FamilyRoster:
    """Lista de familiares do membro (uma leitura por membro selecionado)."""
    roster = st.session_state.get("fam_roster")
    if roster is None or roster.main_member_id != member_id:
        members = sheets.family_of(sheets.get_ws("family_members"), member_id)
        roster = FamilyRoster(main_member_id=member_id, members=members)
        st.session_state.fam_roster = roster
        reset_widgets("fam_edit_m")
    return roster


def _delete_row(record_id: str):
    sheets.delete("family_members", record_id)


def _edit_profile(member: dict):
    """Dados principais do próprio membro. ID de membro e data de cadastro não mudam."""
    prefix = f"fam_profile_{member['member_id']}"
    with st.expander("✏️ Editar meus dados"):
        photo_bytes = photo_input(prefix, title="Nova foto de perfil (opcional)")
        fields = person_fields(prefix, member, MEMBER_FORM_FIELDS, required=REQUIRED_MEMBER_FIELDS)
        if not st.button("💾 Salvar meus dados", key=f"{prefix}_save"):
            return
        missing = missing_required_fields(fields)
        if missing:
            st.error("Preencha os campos obrigatórios: " + ", ".join(FIELD_LABELS[f] for f in missing))
            return
        if not validate_document(fields.get("document_type"), fields.get("document_number")):
            st.error("Número do documento em formato inválido.")
            return
        changes = profile_changes(member, fields, photo_url=photo_to_data_url(photo_bytes) if photo_bytes else None)
        if not changes:
            st.info("Nenhuma alteração para salvar.")
            return
        try:
            sheets.update("members", member["id"], changes)
        except (gspread.exceptions.GSpreadException, LookupError) as e:
            logger.error("could not update member %s: %s", member["member_id"], e)
            st.error("Erro ao salvar seus dados.")
            return
        logger.info("member %s updated: %s", member["member_id"], ", ".join(sorted(changes)))
        reset_widgets(prefix)
        st.toast("Dados atualizados com sucesso!")
        st.rerun()


def render(tab):
    with tab:
        st.title("👨‍👩‍👧 Meus familiares")
        member_id = st.text_input("ID de membro", key="fam_member_id", placeholder="Ex.: 4K7Q2ZP9A").strip().upper()
        if not member_id:
            st.info("Digite o ID de membro que aparece no seu cartão.")
            return

        member = sheets.members_by_member_id().get(member_id)
        if member is None:
            st.warning("ID de membro não encontrado.")
            return

        render_member_card(member)
        _edit_profile(member)

        try:
            roster = _load_roster(member_id)
        except gspread.exceptions.GSpreadException as e:
            logger.error("could not load family of %s: %s", member_id, e)
            st.error("Erro ao carregar familiares.")
            return

        st.subheader("Membros da família")
        if not len(roster):
            st.caption("Nenhum familiar cadastrado.")
        render_family_editor(roster, "fam_edit", delete_row=_delete_row)

        if st.button("💾 Salvar familiares", type="primary"):
            skipped = len(roster) - len(roster.savable())
            try:
                reloaded = sheets.save_family_members(
                    sheets.get_ws("family_members"), sheets.get_headers("family_members"),
                    member_id, roster.members,
                )
            except (gspread.exceptions.GSpreadException, LookupError) as e:
                logger.error("could not save family of %s: %s", member_id, e)
                st.error("Erro ao salvar familiares.")
                return
            finally:
                sheets.invalidate_cache()
            roster.replace(reloaded)
            reset_widgets("fam_edit_m")
            if skipped:
                st.toast(f"{skipped} familiar(es) incompleto(s) não foram salvos.")
            st.toast("Familiares salvos com sucesso!")
            st.rerun()
