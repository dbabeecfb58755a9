# -*- coding: utf-8 -*-
"""Aba: painel administrativo (visão geral, membros, retiro, conteúdos, oração)."""

import logging
from datetime import date

import gspread
import pandas as pd
import plotly.express as px
import streamlit as st

import auth
from config import PAYMENT_METHODS, RETREAT_STATUSES
from documents import document_label, validate_document
from members import display_name
from photo_utils import photo_to_data_url
import sheets
from stats import dashboard_summary, distribution_frame

logger = logging.getLogger(__name__)

CHART_CONFIG = {"displayModeBar": False, "scrollZoom": False}


def _y_dtick(max_val: float) -> int:
    """Eixo de contagem: escala automática com passo mínimo 1."""
    if max_val <= 10:
        return 1
    if max_val <= 30:
        return 5
    if max_val <= 100:
        return 10
    return 20


def _write(action, success_msg: str, error_msg: str, *args):
    """Executa uma gravação, notifica e recarrega; erro vira notificação genérica."""
    try:
        action(*args)
    except (gspread.exceptions.GSpreadException, LookupError) as e:
        logger.error("%s: %s", error_msg, e)
        st.error(error_msg)
        return
    st.toast(success_msg)
    st.rerun()


def _overview(members, registrations, announcements, configs):
    summary = dashboard_summary(members, registrations, announcements)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Membros", summary["total_members"])
    c2.metric("Inscritos no retiro", summary["retreat_signups"])
    c3.metric("Pagamentos pendentes", summary["pending_payments"])
    c4.metric("Valor pendente", f"€ {summary['pending_payment_value']}")

    col_age, col_pay = st.columns(2)
    with col_age:
        st.subheader("Faixa etária")
        age_df = distribution_frame(summary["age_distribution"])
        if age_df["Membros"].sum() == 0:
            st.caption("Sem datas de nascimento cadastradas.")
        else:
            fig = px.pie(age_df, names="Faixa", values="Membros", category_orders={"Faixa": list(age_df["Faixa"])})
            fig.update_traces(sort=False, hovertemplate="%{label}: %{value} membros<extra></extra>")
            st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)
    with col_pay:
        st.subheader("Pagamentos do retiro")
        pay_df = distribution_frame(summary["payment_status"], value_name="Inscrições", label_name="Situação")
        if pay_df.empty:
            st.caption("Nenhuma inscrição ainda.")
        else:
            fig = px.bar(pay_df, x="Situação", y="Inscrições")
            fig.update_traces(hovertemplate="%{x}: %{y:.0f}<extra></extra>")
            fig.update_layout(
                xaxis_title="", yaxis=dict(dtick=_y_dtick(pay_df["Inscrições"].max()), tickformat=".0f"),
                dragmode=False,
            )
            st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)

    st.subheader("Comunicados recentes")
    for a in summary["recent_announcements"]:
        st.markdown(f"- **{a.get('title', '')}** · {str(a.get('created_at') or '')[:10]}")
    if not summary["recent_announcements"]:
        st.caption("Nenhum comunicado.")

    st.subheader("Versículo do dia")
    verse = next((c.get("value") for c in configs if c.get("key") == "daily_verse"), "")
    new_verse = st.text_area("Versículo", value=verse, key="admin_daily_verse", label_visibility="collapsed")
    if st.button("Salvar versículo", key="admin_save_verse"):
        def _save():
            sheets.set_config_value(sheets.get_ws("app_configurations"), "daily_verse", new_verse.strip())
            sheets.invalidate_cache()
        _write(_save, "Versículo atualizado!", "Erro ao salvar versículo")


def _members(members, family):
    family_count = {}
    for f in family:
        key = str(f.get("main_member_id"))
        family_count[key] = family_count.get(key, 0) + 1
    search = st.text_input("🔍 Buscar por nome, ID, cidade ou igreja", key="admin_member_search").strip().lower()
    rows = []
    for m in members:
        row = {
            "ID": m.get("member_id", ""),
            "Nome": m.get("full_name", ""),
            "Nascimento": m.get("birth_date", ""),
            "Telefone": m.get("phone", ""),
            "E-mail": m.get("email", ""),
            "Cidade": m.get("city", ""),
            "Igreja": m.get("church_name", ""),
            "Documento": f"{document_label(m.get('document_type'))} {m.get('document_number', '')}".strip(),
            "Doc. válido": "✅" if validate_document(m.get("document_type"), m.get("document_number")) else "⚠️",
            "Familiares": family_count.get(str(m.get("member_id")), 0),
            "Cadastro": str(m.get("created_at") or "")[:10],
        }
        if search and not any(search in str(row[c]).lower() for c in ("ID", "Nome", "Cidade", "Igreja")):
            continue
        rows.append(row)
    df = pd.DataFrame(rows)
    st.caption(f"{len(df)} membro(s)")
    if df.empty:
        return
    df = df.sort_values("Cadastro", ascending=False)
    st.dataframe(df, use_container_width=True, hide_index=True)
    st.download_button("⬇️ Exportar CSV", df.to_csv(index=False).encode("utf-8-sig"),
                       file_name=f"membros_{date.today().isoformat()}.csv", mime="text/csv")


def _retreat(registrations, members_by_id):
    if not registrations:
        st.info("Nenhuma inscrição no retiro.")
        return
    status_filter = st.selectbox("Situação", ["Todas"] + RETREAT_STATUSES, key="admin_retreat_filter")
    for reg in registrations:
        status = reg.get("status") or "Pendente"
        if status_filter != "Todas" and status != status_filter:
            continue
        with st.container(border=True):
            col_info, col_status, col_btn = st.columns([4, 2, 1])
            with col_info:
                linked = display_name(members_by_id, reg.get("member_id")) if reg.get("member_id") else "sem ID de membro"
                st.markdown(f"**{reg.get('full_name', '')}** · {reg.get('phone', '')} · {reg.get('email', '')}")
                st.caption(
                    f"{PAYMENT_METHODS.get(reg.get('payment_method'), reg.get('payment_method') or '—')}"
                    f" · {reg.get('installments') or 1}x · {linked}"
                )
            with col_status:
                idx = RETREAT_STATUSES.index(status) if status in RETREAT_STATUSES else 0
                new_status = st.selectbox("Situação", RETREAT_STATUSES, index=idx, key=f"admin_status_{reg['id']}",
                                          label_visibility="collapsed")
            with col_btn:
                if st.button("Salvar", key=f"admin_status_save_{reg['id']}", disabled=new_status == status):
                    _write(sheets.update, "Status de pagamento atualizado!", "Erro ao atualizar status",
                           "retreat_registrations", reg["id"], {"status": new_status})


def _announcements(announcements):
    with st.form("admin_announcement_form", clear_on_submit=True):
        title = st.text_input("Título *")
        content = st.text_area("Conteúdo *")
        is_urgent = st.toggle("Urgente")
        submitted = st.form_submit_button("Publicar comunicado")
    if submitted:
        if not (title.strip() and content.strip()):
            st.error("Título e conteúdo são obrigatórios.")
        else:
            _write(sheets.insert, "Comunicado criado com sucesso!", "Erro ao criar comunicado",
                   "announcements", {"title": title.strip(), "content": content.strip(), "is_urgent": is_urgent})
    for a in sorted(announcements, key=lambda a: str(a.get("created_at") or ""), reverse=True):
        col_info, col_btn = st.columns([6, 1])
        with col_info:
            flag = "🚨 " if sheets.as_bool(a.get("is_urgent")) else ""
            st.markdown(f"{flag}**{a.get('title', '')}** · {str(a.get('created_at') or '')[:10]}")
        with col_btn:
            if st.button("Excluir", key=f"admin_del_ann_{a['id']}"):
                _write(sheets.delete, "Comunicado excluído.", "Erro ao excluir comunicado", "announcements", a["id"])


def _events(events):
    with st.form("admin_event_form", clear_on_submit=True):
        name = st.text_input("Nome do evento *")
        description = st.text_area("Descrição")
        col_d, col_t = st.columns(2)
        event_date = col_d.date_input("Data *", value=date.today(), format="DD/MM/YYYY")
        event_time = col_t.time_input("Horário", value=None)
        submitted = st.form_submit_button("Criar evento")
    if submitted:
        if not name.strip():
            st.error("O nome do evento é obrigatório.")
        else:
            _write(sheets.insert, "Evento criado com sucesso!", "Erro ao criar evento", "events", {
                "name": name.strip(), "description": description.strip(),
                "event_date": event_date.isoformat(),
                "event_time": event_time.strftime("%H:%M") if event_time else "",
            })
    for ev in sorted(events, key=lambda e: (str(e.get("event_date")), str(e.get("event_time")))):
        col_info, col_btn = st.columns([6, 1])
        with col_info:
            st.markdown(f"**{ev.get('name', '')}** · {ev.get('event_date', '')} {ev.get('event_time', '')}")
        with col_btn:
            if st.button("Excluir", key=f"admin_del_ev_{ev['id']}"):
                _write(sheets.delete, "Evento excluído.", "Erro ao excluir evento", "events", ev["id"])


def _galleries(galleries, events):
    event_names = {str(e.get("id")): e.get("name", "") for e in events}
    with st.form("admin_gallery_form", clear_on_submit=True):
        title = st.text_input("Título da galeria *")
        description = st.text_area("Descrição")
        image_url = st.text_input("URL da imagem", placeholder="https://...")
        image_file = st.file_uploader("Ou envie uma imagem", type=["png", "jpg", "jpeg", "webp"])
        event_id = st.selectbox("Evento (opcional)", [""] + list(event_names.keys()),
                                format_func=lambda k: event_names.get(k, "—") if k else "—")
        submitted = st.form_submit_button("Criar galeria")
    if submitted:
        image = photo_to_data_url(image_file.getvalue()) if image_file else image_url.strip()
        if not title.strip():
            st.error("O título é obrigatório.")
        elif image_file and not image:
            st.error("Não foi possível ler a imagem enviada.")
        else:
            _write(sheets.insert, "Galeria criada!", "Erro ao criar galeria", "galleries", {
                "title": title.strip(), "description": description.strip(), "image_url": image,
                "event_id": event_id, "is_active": True,
            })
    for g in galleries:
        active = sheets.as_bool(g.get("is_active"))
        col_info, col_btn = st.columns([6, 1])
        with col_info:
            ev = event_names.get(str(g.get("event_id")), "") if g.get("event_id") else ""
            st.markdown(f"**{g.get('title', '')}**" + (f" · {ev}" if ev else "") + ("" if active else " · (inativa)"))
        with col_btn:
            if st.button("Desativar" if active else "Ativar", key=f"admin_gal_{g['id']}"):
                _write(sheets.update, "Galeria atualizada!", "Erro ao atualizar galeria",
                       "galleries", g["id"], {"is_active": not active})


def _prayer(prayers, testimonies, members_by_id):
    st.subheader("Pedidos de oração")
    if not prayers:
        st.caption("Nenhum pedido.")
    for p in sorted(prayers, key=lambda r: str(r.get("created_at") or ""), reverse=True):
        answered = sheets.as_bool(p.get("is_answered"))
        approved = sheets.as_bool(p.get("is_approved"))
        col_info, col_a, col_b = st.columns([5, 1, 1])
        with col_info:
            st.markdown(f"**{p.get('title', '')}** · {display_name(members_by_id, p.get('member_id'))}")
            st.caption(p.get("description") or "")
        with col_a:
            if st.button("Reabrir" if answered else "Respondido", key=f"admin_pr_ans_{p['id']}"):
                _write(sheets.update, "Status do pedido atualizado!", "Erro ao atualizar pedido",
                       "prayer_requests", p["id"], {"is_answered": not answered})
        with col_b:
            if st.button("Ocultar" if approved else "Aprovar", key=f"admin_pr_app_{p['id']}"):
                _write(sheets.update, "Status do pedido atualizado!", "Erro ao atualizar pedido",
                       "prayer_requests", p["id"], {"is_approved": not approved})

    st.subheader("Testemunhos")
    if not testimonies:
        st.caption("Nenhum testemunho.")
    for t in sorted(testimonies, key=lambda r: str(r.get("created_at") or ""), reverse=True):
        approved = sheets.as_bool(t.get("is_approved"))
        col_info, col_btn = st.columns([6, 1])
        with col_info:
            st.markdown(f"**{t.get('title', '')}** · {display_name(members_by_id, t.get('member_id'))}")
            st.caption(t.get("content") or "")
        with col_btn:
            if st.button("Ocultar" if approved else "Aprovar", key=f"admin_ts_{t['id']}"):
                _write(sheets.update, "Testemunho atualizado!", "Erro ao atualizar testemunho",
                       "testimonies", t["id"], {"is_approved": not approved})


def render(tab):
    with tab:
        st.title("🛡️ Painel administrativo")
        auth.check_admin_password()
        auth.show_change_password_if_needed()

        try:
            members = sheets.load_table("members")
            family = sheets.load_table("family_members")
            registrations = sheets.load_table("retreat_registrations")
            announcements = sheets.load_table("announcements")
            events = sheets.load_table("events")
            galleries = sheets.load_table("galleries")
            prayers = sheets.load_table("prayer_requests")
            testimonies = sheets.load_table("testimonies")
            configs = sheets.load_table("app_configurations")
        except gspread.exceptions.GSpreadException as e:
            logger.error("could not load dashboard data: %s", e)
            st.error("Erro ao carregar dados do painel.")
            st.stop()
        members_by_id = {str(m.get("member_id")): m for m in members if m.get("member_id")}

        sections = st.tabs(["Visão geral", "Membros", "Retiro", "Comunicados", "Eventos", "Galeria", "Oração/Testemunhos"])
        with sections[0]:
            _overview(members, registrations, announcements, configs)
        with sections[1]:
            _members(members, family)
        with sections[2]:
            _retreat(registrations, members_by_id)
        with sections[3]:
            _announcements(announcements)
        with sections[4]:
            _events(events)
        with sections[5]:
            _galleries(galleries, events)
        with sections[6]:
            _prayer(prayers, testimonies, members_by_id)
        if st.button("Sair do painel"):
            del st.session_state.admin_authenticated
            st.rerun()
