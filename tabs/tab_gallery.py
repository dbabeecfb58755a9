# -*- coding: utf-8 -*-
"""Aba: galeria de fotos (galerias ativas, filtro por evento)."""

import io
import logging

import gspread
import streamlit as st

from photo_utils import data_url_to_bytes
import sheets

logger = logging.getLogger(__name__)

ALL_EVENTS = "Todas"


def active_galleries(galleries, events, event_name: str = ALL_EVENTS) -> list:
    """Galerias ativas (mais recentes primeiro) com o nome do evento em event_name.

    event_name filtra pelo evento; ALL_EVENTS mostra todas.
    """
    names = {str(e.get("id")): e.get("name") or "" for e in events}
    items = []
    for g in galleries:
        if not sheets.as_bool(g.get("is_active")):
            continue
        item = dict(g, event_name=names.get(str(g.get("event_id") or ""), ""))
        if event_name != ALL_EVENTS and item["event_name"] != event_name:
            continue
        items.append(item)
    return sorted(items, key=lambda g: str(g.get("created_at") or ""), reverse=True)


def _show_image(url: str):
    raw = data_url_to_bytes(url)
    if raw:
        st.image(io.BytesIO(raw), use_container_width=True)
    elif url.startswith("http"):
        st.image(url, use_container_width=True)


def render(tab):
    with tab:
        st.title("📷 Galeria")
        try:
            galleries = sheets.load_table("galleries")
            events = sheets.load_table("events")
        except gspread.exceptions.GSpreadException as e:
            logger.error("could not load galleries: %s", e)
            st.warning("Não foi possível carregar a galeria.")
            st.stop()

        event_options = sorted({g["event_name"] for g in active_galleries(galleries, events) if g["event_name"]})
        selected = ALL_EVENTS
        if event_options:
            selected = st.radio("Evento", [ALL_EVENTS] + event_options, key="gallery_event",
                                horizontal=True, label_visibility="collapsed")

        items = active_galleries(galleries, events, selected)
        if not items:
            st.info("Nenhuma galeria publicada.")
            return
        cols = st.columns(3)
        for i, g in enumerate(items):
            with cols[i % 3]:
                with st.container(border=True):
                    _show_image(str(g.get("image_url") or ""))
                    st.markdown(f"**{g.get('title', '')}**")
                    if g.get("description"):
                        st.caption(g["description"])
                    if g["event_name"]:
                        st.caption(f"📅 {g['event_name']}")
        st.caption("Todas as imagens passam por aprovação antes da publicação.")
