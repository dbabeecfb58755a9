# -*- coding: utf-8 -*-
"""Editor da lista de familiares (usado no cadastro e em Meus familiares)."""

import logging

import gspread
import streamlit as st

from members import REQUIRED_FAMILY_FIELDS
from tabs.utils import person_fields

logger = logging.getLogger(__name__)

FAMILY_FORM_FIELDS = [
    "full_name", "birth_date", "relationship", "phone", "address", "city", "zip_code",
    "country", "church_name", "document_type", "document_number", "ministry",
]


def reset_widgets(prefix: str):
    """Apaga o estado dos widgets com o prefixo para que voltem a ler a lista."""
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefix)]:
        del st.session_state[key]


def render_family_editor(roster, prefix: str, delete_row=None):
    """Um bloco por familiar; as alterações vão para roster.update / roster.remove."""
    widget_prefix = f"{prefix}_m"
    for i, member in enumerate(roster.members):
        with st.container(border=True):
            col_title, col_btn = st.columns([5, 1])
            with col_title:
                st.markdown(f"**Familiar {i + 1}**")
            with col_btn:
                if st.button("Remover", key=f"{prefix}_remove_{i}"):
                    try:
                        roster.remove(i, delete_row=delete_row)
                    except (gspread.exceptions.GSpreadException, LookupError) as e:
                        logger.error("could not delete family member %s: %s", member.id, e)
                        st.error("Erro ao remover familiar.")
                    else:
                        if member.id:
                            st.toast("Familiar removido com sucesso!")
                        # os índices mudaram
                        reset_widgets(widget_prefix)
                        st.rerun()
            person_fields(
                f"{widget_prefix}{i}",
                member.to_record(),
                FAMILY_FORM_FIELDS,
                required=REQUIRED_FAMILY_FIELDS,
                on_change=lambda field, value, i=i: roster.update(i, **{field: value}),
            )

    if st.button("➕ Adicionar membro da família", key=f"{prefix}_add", use_container_width=True):
        roster.add()
        st.rerun()
