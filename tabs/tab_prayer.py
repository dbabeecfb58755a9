# -*- coding: utf-8 -*-
"""Aba: pedidos de oração e testemunhos (envio e mural dos aprovados)."""

import logging

import gspread
import streamlit as st

from members import display_name
import sheets

logger = logging.getLogger(__name__)


def _submit_form(form_key: str, table: str, text_field: str, text_label: str, extra: dict, success_msg: str):
    """Formulário comum: ID de membro + título + texto. Entra como não aprovado."""
    with st.form(form_key, clear_on_submit=True):
        member_id = st.text_input("ID de membro *", placeholder="Ex.: 4K7Q2ZP9A")
        title = st.text_input("Título *")
        text = st.text_area(f"{text_label} *")
        submitted = st.form_submit_button("Enviar")
    if not submitted:
        return
    member_id = member_id.strip().upper()
    if not (member_id and title.strip() and text.strip()):
        st.error("Preencha todos os campos obrigatórios.")
        return
    if member_id not in sheets.members_by_member_id():
        st.error("ID de membro não encontrado.")
        return
    record = {"member_id": member_id, "title": title.strip(), text_field: text.strip(), "is_approved": False, **extra}
    try:
        sheets.insert(table, record)
    except gspread.exceptions.GSpreadException as e:
        logger.error("could not insert into %s: %s", table, e)
        st.error("Erro ao enviar. Tente novamente.")
        return
    st.success(success_msg)


def _wall(records, text_field: str, members_by_id: dict, badge=None):
    approved = [r for r in records if sheets.as_bool(r.get("is_approved"))]
    if not approved:
        st.caption("Nada publicado ainda.")
        return
    for r in sorted(approved, key=lambda r: str(r.get("created_at") or ""), reverse=True):
        with st.container(border=True):
            head = f"**{r.get('title', '')}**"
            if badge:
                head += badge(r)
            st.markdown(head)
            st.write(r.get(text_field) or "")
            st.caption(f"{display_name(members_by_id, r.get('member_id'))} · {str(r.get('created_at') or '')[:10]}")


def render(tab):
    with tab:
        st.title("🙏 Oração e Testemunhos")
        try:
            prayers = sheets.load_table("prayer_requests")
            testimonies = sheets.load_table("testimonies")
            members_by_id = sheets.members_by_member_id()
        except gspread.exceptions.GSpreadException as e:
            logger.error("could not load prayer wall: %s", e)
            st.warning("Não foi possível carregar os pedidos e testemunhos.")
            st.stop()

        tab_prayer, tab_testimony = st.tabs(["🙏 Pedidos de oração", "✨ Testemunhos"])
        with tab_prayer:
            with st.expander("Enviar pedido de oração"):
                _submit_form("prayer_form", "prayer_requests", "description", "Pedido",
                             {"is_answered": False}, "Pedido enviado! Ele aparecerá após aprovação.")
            _wall(prayers, "description", members_by_id,
                  badge=lambda r: " · ✅ Respondido" if sheets.as_bool(r.get("is_answered")) else "")
        with tab_testimony:
            with st.expander("Compartilhar testemunho"):
                _submit_form("testimony_form", "testimonies", "content", "Testemunho",
                             {}, "Testemunho enviado! Ele aparecerá após aprovação.")
            _wall(testimonies, "content", members_by_id)
