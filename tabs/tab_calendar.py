# -*- coding: utf-8 -*-
"""Aba: agenda de eventos (próximos e anteriores)."""

import logging
from datetime import date

import gspread
import pandas as pd
import streamlit as st

import sheets

logger = logging.getLogger(__name__)

MONTHS_PT = ["", "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho", "Julho",
             "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro"]


def events_frame(events) -> pd.DataFrame:
    """Eventos com data válida, ordenados por data e hora."""
    df = pd.DataFrame(events, columns=["id", "name", "description", "event_date", "event_time"])
    if df.empty:
        return df
    df["event_date"] = pd.to_datetime(df["event_date"], errors="coerce")
    df = df.dropna(subset=["event_date"])
    df["event_time"] = df["event_time"].fillna("").astype(str)
    df["description"] = df["description"].fillna("").astype(str)
    return df.sort_values(["event_date", "event_time"]).reset_index(drop=True)


def render(tab):
    with tab:
        st.title("📅 Agenda")
        try:
            df = events_frame(sheets.load_table("events"))
        except gspread.exceptions.GSpreadException as e:
            logger.error("could not load table: %s", e)
            st.warning("Não foi possível carregar os eventos.")
            st.stop()

        if df.empty:
            st.info("Nenhum evento agendado.")
            return

        today = pd.Timestamp(date.today())
        upcoming = df[df["event_date"] >= today]
        past = df[df["event_date"] < today]

        st.subheader("Próximos eventos")
        if upcoming.empty:
            st.caption("Nenhum evento futuro.")
        for (year, month), group in upcoming.groupby([upcoming["event_date"].dt.year, upcoming["event_date"].dt.month]):
            st.markdown(f"#### {MONTHS_PT[month]} {year}")
            for _, ev in group.iterrows():
                when = ev["event_date"].strftime("%d/%m")
                if ev["event_time"]:
                    when += f" · {ev['event_time'][:5]}"
                with st.container(border=True):
                    st.markdown(f"**{ev['name']}** · {when}")
                    if ev["description"]:
                        st.caption(str(ev["description"]))

        if not past.empty:
            with st.expander(f"Eventos anteriores ({len(past)})"):
                st.dataframe(
                    pd.DataFrame({
                        "Data": past["event_date"].dt.strftime("%d/%m/%Y"),
                        "Evento": past["name"],
                        "Descrição": past["description"],
                    }).iloc[::-1],
                    use_container_width=True, hide_index=True,
                )
