# -*- coding: utf-8 -*-
"""Aba: cadastro de membros (membro principal + familiares) e cartão de membro."""

import logging

import gspread
import streamlit as st

from config import DEFAULT_COUNTRY, DEFAULT_DOCUMENT_TYPE
from documents import validate_document
from members import FIELD_LABELS, REQUIRED_MEMBER_FIELDS, FamilyRoster, assemble_member_record, missing_required_fields
from photo_utils import photo_to_data_url
import sheets
from tabs.family_editor import render_family_editor, reset_widgets
from tabs.utils import person_fields, photo_input, render_member_card

logger = logging.getLogger(__name__)

MEMBER_FORM_FIELDS = [
    "full_name", "birth_date", "phone", "email", "address", "city", "zip_code",
    "country", "church_name", "document_type", "document_number",
]
MAIN_DEFAULTS = {"country": DEFAULT_COUNTRY, "document_type": DEFAULT_DOCUMENT_TYPE}


def _roster() -> FamilyRoster:
    """Familiares do cadastro em andamento. O dono ainda não tem member_id."""
    if "reg_family_roster" not in st.session_state:
        st.session_state.reg_family_roster = FamilyRoster(main_member_id="")
    return st.session_state.reg_family_roster


def _submit(fields: dict, photo_bytes, roster: FamilyRoster):
    missing = missing_required_fields(fields)
    if missing:
        st.error("Preencha os campos obrigatórios: " + ", ".join(FIELD_LABELS[f] for f in missing))
        return
    if not validate_document(fields.get("document_type"), fields.get("document_number")):
        st.error("Número do documento em formato inválido.")
        return
    incomplete = [i + 1 for i, m in enumerate(roster) if not m.is_complete()]
    if incomplete:
        st.error("Familiar(es) " + ", ".join(map(str, incomplete)) + ": nome, data de nascimento e parentesco são obrigatórios.")
        return

    record = assemble_member_record(fields, photo_url=photo_to_data_url(photo_bytes) if photo_bytes else None)
    try:
        saved, family_saved = sheets.register_member(
            sheets.get_ws("members"), sheets.get_headers("members"),
            sheets.get_ws("family_members"), sheets.get_headers("family_members"),
            record, roster.members,
        )
    except (gspread.exceptions.GSpreadException, sheets.MemberIdCollision) as e:
        logger.exception("registration failed")
        st.error(f"Falha no cadastro: {e}")
        return
    finally:
        sheets.invalidate_cache()

    logger.info("member registered: %s (%d family)", saved["member_id"], len(roster))
    # limpa formulário e lista de familiares
    reset_widgets("reg_")
    st.session_state.reg_generated_member = saved
    if not family_saved:
        st.session_state.reg_family_pending = True
    st.rerun()


def render(tab):
    with tab:
        generated = st.session_state.get("reg_generated_member")
        if generated:
            st.title("🎉 Parabéns!")
            st.markdown("Seu cartão de membro foi gerado com sucesso. Guarde o seu **ID de membro**.")
            render_member_card(generated)
            if st.session_state.get("reg_family_pending"):
                st.warning(
                    "Seu cadastro foi salvo, mas não foi possível salvar os familiares. "
                    "Inclua-os na aba **Meus familiares** com o seu ID de membro."
                )
            if st.button("Novo cadastro"):
                reset_widgets("reg_")
                st.rerun()
            return

        st.title("✝️ Cadastro de Membros")
        st.caption("Assembleia de Deus Bon Pastor")

        photo_bytes = photo_input("reg")

        st.subheader("Dados principais")
        fields = person_fields("reg_main", MAIN_DEFAULTS, MEMBER_FORM_FIELDS, required=REQUIRED_MEMBER_FIELDS)

        st.subheader("Membros da família")
        roster = _roster()
        render_family_editor(roster, "reg_family")

        st.divider()
        if st.button("📨 Enviar cadastro", type="primary"):
            _submit(fields, photo_bytes, roster)
