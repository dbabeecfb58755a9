# -*- coding: utf-8 -*-
"""
Ponto de entrada do app de membros (Assembleia de Deus Bon Pastor).
Conecta à planilha e carrega as abas. (Funções separadas em tabs/ e nos módulos auth, sheets, members, documents, stats, postal)
"""

import logging

import gspread
import streamlit as st
from google.oauth2.service_account import Credentials

from config import SPREADSHEET_NAME
import auth
import sheets
from tabs import (
    render_register,
    render_family,
    render_announcements,
    render_calendar,
    render_gallery,
    render_prayer,
    render_retreat,
    render_admin,
)

st.set_page_config(page_title="AD Bon Pastor", page_icon="✝️", layout="wide")

logging.basicConfig(
    level=str(st.secrets.get("log_level", "INFO")).upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ------------------------
# Cliente Google Sheets
# ------------------------
scope = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]
creds = Credentials.from_service_account_info(
    st.secrets["gcp_service_account"],
    scopes=scope,
)
client = gspread.authorize(creds)

auth.init(client, SPREADSHEET_NAME)
sheets.init(client, SPREADSHEET_NAME)
sheets.get_sheet()  # valida a conexão e guarda na sessão

# ------------------------
# Abas (índice guardado na sessão para manter a aba após rerun)
# ------------------------
TAB_LABELS = [
    "✝️ Cadastro",
    "👨‍👩‍👧 Meus familiares",
    "📢 Comunicados",
    "📅 Agenda",
    "📷 Galeria",
    "🙏 Oração",
    "⛺ Retiro",
    "🛡️ Admin",
]
RENDERERS = [
    render_register,
    render_family,
    render_announcements,
    render_calendar,
    render_gallery,
    render_prayer,
    render_retreat,
    render_admin,
]
if "app_tab_index" not in st.session_state:
    st.session_state.app_tab_index = 0

selected_label = st.radio(
    "Menu",
    TAB_LABELS,
    index=min(st.session_state.app_tab_index, len(TAB_LABELS) - 1),
    key="app_tab_radio",
    horizontal=True,
    label_visibility="collapsed",
)
new_index = TAB_LABELS.index(selected_label) if selected_label in TAB_LABELS else 0
if new_index != st.session_state.app_tab_index:
    st.session_state.app_tab_index = new_index
    st.rerun()

tab_container = st.container()
with tab_container:
    RENDERERS[st.session_state.app_tab_index](tab_container)
