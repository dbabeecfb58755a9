# -*- coding: utf-8 -*-
"""Aba: comunicados e versículo do dia."""

import logging

import gspread
import streamlit as st

import sheets

logger = logging.getLogger(__name__)


def render(tab):
    with tab:
        st.title("📢 Comunicados")
        try:
            announcements = sheets.load_table("announcements")
            configs = sheets.load_table("app_configurations")
        except gspread.exceptions.GSpreadException as e:
            logger.error("could not load table: %s", e)
            st.warning("Não foi possível carregar os comunicados.")
            st.stop()

        verse = next((c.get("value") for c in configs if c.get("key") == "daily_verse"), "")
        if verse:
            st.info(f"📖 **Versículo do dia:** {verse}")

        if not announcements:
            st.info("Nenhum comunicado no momento.")
            return

        # urgentes primeiro, depois os mais recentes
        ordered = sorted(announcements, key=lambda a: str(a.get("created_at") or ""), reverse=True)
        ordered = sorted(ordered, key=lambda a: not sheets.as_bool(a.get("is_urgent")))
        for a in ordered:
            with st.container(border=True):
                title = a.get("title") or ""
                if sheets.as_bool(a.get("is_urgent")):
                    title = f"🚨 {title} · URGENTE"
                st.markdown(f"**{title}**")
                st.write(a.get("content") or "")
                st.caption(str(a.get("created_at") or "")[:10])
