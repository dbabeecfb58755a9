# -*- coding: utf-8 -*-
"""Estatísticas do painel: faixas etárias e situação de pagamento do retiro."""

from datetime import date

import pandas as pd

from config import RETREAT_PRICE

# (rótulo, idade mínima, idade máxima inclusiva; None = sem limite)
AGE_BUCKETS = [
    ("18-25", 18, 25),
    ("26-35", 26, 35),
    ("36-50", 36, 50),
    ("51-65", 51, 65),
    ("65+", 66, None),
]

DEFAULT_STATUS = "Pendente"


def _birth_year(value) -> int | None:
    if value is None:
        return None
    if hasattr(value, "year"):
        return value.year
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10]).year
    except ValueError:
        return None


def _get(member, field):
    if isinstance(member, dict):
        return member.get(field)
    return getattr(member, field, None)


def age_distribution(members, today: date | None = None) -> dict[str, int]:
    """Conta membros por faixa etária.

    Idade = ano atual - ano de nascimento (dia e mês ignorados). Sem data de
    nascimento, ou menores de 18, o membro não entra em nenhuma faixa.
    """
    current_year = (today or date.today()).year
    distribution = {label: 0 for label, _, _ in AGE_BUCKETS}
    for member in members:
        year = _birth_year(_get(member, "birth_date"))
        if year is None:
            continue
        age = current_year - year
        for label, low, high in AGE_BUCKETS:
            if age >= low and (high is None or age <= high):
                distribution[label] += 1
                break
    return distribution


def distribution_frame(distribution: dict, value_name: str = "Membros", label_name: str = "Faixa") -> pd.DataFrame:
    """dict rótulo -> contagem em DataFrame (ordem mantida) para o plotly."""
    return pd.DataFrame({label_name: list(distribution.keys()), value_name: list(distribution.values())})


def payment_status_counts(registrations) -> dict[str, int]:
    """Inscrições do retiro por situação, na ordem em que aparecem. Vazio conta como Pendente."""
    counts = {}
    for reg in registrations:
        status = str(_get(reg, "status") or "").strip() or DEFAULT_STATUS
        counts[status] = counts.get(status, 0) + 1
    return counts


def pending_payment_summary(registrations, price: int = RETREAT_PRICE) -> tuple[int, int]:
    """(quantidade pendente, valor pendente)."""
    pending = payment_status_counts(registrations).get(DEFAULT_STATUS, 0)
    return pending, pending * price


def dashboard_summary(members, registrations, announcements, today: date | None = None) -> dict:
    members = list(members)
    registrations = list(registrations)
    pending, pending_value = pending_payment_summary(registrations)
    recent = sorted(announcements, key=lambda a: str(_get(a, "created_at") or ""), reverse=True)[:5]
    return {
        "total_members": len(members),
        "retreat_signups": len(registrations),
        "pending_payments": pending,
        "pending_payment_value": pending_value,
        "age_distribution": age_distribution(members, today=today),
        "payment_status": payment_status_counts(registrations),
        "recent_announcements": recent,
    }
