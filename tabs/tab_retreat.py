# -*- coding: utf-8 -*-
"""Aba: inscrição no retiro."""

import logging

import gspread
import streamlit as st

from config import INSTALLMENT_OPTIONS, PAYMENT_METHODS, RETREAT_PRICE
import sheets

logger = logging.getLogger(__name__)

RETREAT_INFO = {
    "Data": "01/05/2026",
    "Local": "Sítio Vale da Paz",
    "Valor": f"€ {RETREAT_PRICE:.2f}",
    "Prazo de inscrição": "15/04/2026",
}


def _installment_label(n: str) -> str:
    if n == "1":
        return f"À vista - € {RETREAT_PRICE:.2f}"
    return f"{n}x de € {RETREAT_PRICE / int(n):.2f}"


def render(tab):
    with tab:
        st.title("⛺ Retiro")
        cols = st.columns(len(RETREAT_INFO))
        for col, (label, value) in zip(cols, RETREAT_INFO.items()):
            col.metric(label, value)

        if st.session_state.get("retreat_done"):
            st.success("Inscrição realizada! Sua inscrição está pendente até a confirmação do pagamento.")
            if st.button("Nova inscrição"):
                del st.session_state.retreat_done
                st.rerun()
            return

        with st.form("retreat_form"):
            full_name = st.text_input("Nome completo *")
            email = st.text_input("E-mail *")
            phone = st.text_input("Telefone *")
            member_id = st.text_input("ID de membro (se tiver)")
            payment_method = st.selectbox("Forma de pagamento *", list(PAYMENT_METHODS.keys()),
                                          format_func=lambda k: PAYMENT_METHODS[k], index=None, placeholder="Selecione")
            installments = st.selectbox("Parcelas *", INSTALLMENT_OPTIONS, format_func=_installment_label)
            submitted = st.form_submit_button("Inscrever-me")
        if not submitted:
            return

        if not (full_name.strip() and email.strip() and phone.strip() and payment_method):
            st.error("Por favor, preencha todos os campos obrigatórios.")
            return
        member_id = member_id.strip().upper()
        if member_id and member_id not in sheets.members_by_member_id():
            st.error("ID de membro não encontrado.")
            return
        try:
            sheets.insert("retreat_registrations", {
                "member_id": member_id, "full_name": full_name.strip(), "email": email.strip(),
                "phone": phone.strip(), "payment_method": payment_method, "installments": installments,
                "status": "Pendente",
            })
        except gspread.exceptions.GSpreadException as e:
            logger.error("retreat signup failed: %s", e)
            st.error("Erro ao enviar a inscrição. Tente novamente.")
            return
        logger.info("retreat signup: %s", full_name.strip())
        st.session_state.retreat_done = True
        st.rerun()
