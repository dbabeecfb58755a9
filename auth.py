# -*- coding: utf-8 -*-
"""Senha do painel administrativo (guardada criptografada na aba config)."""

import base64
import hashlib
import hmac
import logging

import gspread
import streamlit as st
from cryptography.fernet import Fernet, InvalidToken

from config import CONFIG_WORKSHEET

logger = logging.getLogger(__name__)


def init(client, spreadsheet_name: str):
    """Inicializa o módulo. O app define o cliente e o nome da planilha."""
    global _client, _spreadsheet_name
    _client = client
    _spreadsheet_name = spreadsheet_name


def _get_fernet():
    """Instância Fernet a partir de encryption_key dos Secrets."""
    raw = st.secrets.get("encryption_key")
    if not raw:
        raise ValueError("Defina encryption_key nos Secrets. (Streamlit Cloud: Settings → Secrets)")
    key = base64.urlsafe_b64encode(hashlib.sha256(raw.encode()).digest())
    return Fernet(key)


def _get_config_worksheet():
    """Aba 'config' da mesma planilha. Cria se não existir."""
    sheet = _client.open(_spreadsheet_name)
    try:
        return sheet.worksheet(CONFIG_WORKSHEET)
    except gspread.exceptions.WorksheetNotFound:
        sheet.add_worksheet(title=CONFIG_WORKSHEET, rows=2, cols=2)
        return sheet.worksheet(CONFIG_WORKSHEET)


def get_stored_password():
    """Lê e descriptografa a senha em config!A1. Sem senha gravada -> None."""
    enc = _get_config_worksheet().acell("A1").value
    if not enc or not enc.strip():
        return None
    try:
        return _get_fernet().decrypt(enc.strip().encode()).decode()
    except InvalidToken:
        logger.error("stored admin password cannot be decrypted with the current encryption_key")
        raise ValueError("A senha gravada não confere com a encryption_key atual.")


def set_stored_password(plain_password: str):
    """Criptografa a senha e grava em config!A1."""
    enc = _get_fernet().encrypt(plain_password.encode()).decode()
    _get_config_worksheet().update_acell("A1", enc)


def check_admin_password():
    """Pede a senha do painel. Já autenticado na sessão -> True; senão st.stop()."""
    if st.session_state.get("admin_authenticated"):
        return True

    with st.spinner("Conectando à planilha..."):
        try:
            expected = get_stored_password()
        except ValueError as e:
            st.error(str(e))
            st.stop()
        except gspread.exceptions.GSpreadException as e:
            logger.error("could not read admin password: %s", e)
            st.error("Não foi possível conectar à planilha. Verifique o nome e o compartilhamento (conta de serviço).")
            st.stop()

    is_first_run = expected is None
    if is_first_run:
        expected = st.secrets.get("default_password")
        if not expected:
            st.error("Primeira execução. Defina **default_password** nos Secrets.")
            st.stop()

    st.subheader("🔐 Painel administrativo")
    with st.form("admin_entry_form"):
        pw = st.text_input("Senha", type="password", key="admin_password")
        submitted = st.form_submit_button("Entrar")
    if submitted:
        if hmac.compare_digest(pw.encode(), expected.encode()):
            logger.info("admin login")
            st.session_state.admin_authenticated = True
            if is_first_run:
                st.session_state.must_change_password = True
            st.rerun()
        else:
            logger.warning("admin login failed")
            st.error("Senha incorreta.")
    st.stop()


def show_change_password_if_needed():
    """Troca de senha obrigatória após o primeiro login. Mantém st.stop() até concluir."""
    if not st.session_state.get("must_change_password"):
        return
    st.subheader("🔐 Alterar senha")
    st.markdown("Primeiro acesso: defina uma nova senha para o painel.")
    p1 = st.text_input("Nova senha", type="password", key="new_pw1")
    p2 = st.text_input("Confirmar nova senha", type="password", key="new_pw2")
    if st.button("Salvar senha"):
        if not p1 or not p2:
            st.error("Digite a nova senha.")
        elif p1 != p2:
            st.error("As senhas não coincidem.")
        else:
            try:
                set_stored_password(p1)
                del st.session_state.must_change_password
                st.success("Senha alterada. Use a nova senha no próximo acesso.")
                st.rerun()
            except (ValueError, gspread.exceptions.GSpreadException) as e:
                st.error(f"Falha ao salvar: {e}")
    st.stop()
