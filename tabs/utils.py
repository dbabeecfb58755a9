# -*- coding: utf-8 -*-
"""Campos de formulário de pessoa e cartão de membro (compartilhados entre abas)."""

import io
from datetime import date

from PIL import Image, UnidentifiedImageError
import streamlit as st
from streamlit_cropper import st_cropper

from config import PHOTO_HEIGHT, PHOTO_WIDTH
from documents import DOCUMENT_TYPES, document_label, validate_document, validation_message
from members import FIELD_LABELS, RELATIONSHIPS
from photo_utils import data_url_to_bytes, resize_photo_to_final
from postal import COUNTRIES, dial_code, lookup_municipality

COUNTRY_OPTIONS = COUNTRIES + ["Brasil", "Outro"]


def _parse_date(value):
    if not value:
        return None
    if hasattr(value, "year"):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _autofill_city(prefix: str):
    """on_change do código postal: busca o município e preenche a cidade (falha silenciosa)."""
    country = st.session_state.get(f"{prefix}_country")
    postal = st.session_state.get(f"{prefix}_zip_code")
    place = lookup_municipality(country, postal)
    if place:
        st.session_state[f"{prefix}_city"] = place


def _label(field: str, required) -> str:
    label = FIELD_LABELS.get(field, field)
    return f"{label} *" if field in required else label


def _initial(key: str, **kwargs) -> dict:
    """Valor inicial só na primeira renderização; depois o estado do widget manda."""
    return {} if key in st.session_state else kwargs


def person_fields(prefix: str, person: dict, fields, required=(), on_change=None) -> dict:
    """Desenha um campo por atributo e devolve os valores atuais.

    on_change(campo, valor) é chamado para cada campo que mudou em relação a person.
    """
    values = {}
    cols = st.columns(2)
    for i, field in enumerate(fields):
        key = f"{prefix}_{field}"
        current = person.get(field) or ""
        label = _label(field, required)
        with cols[i % 2]:
            if field == "birth_date":
                picked = st.date_input(
                    label, min_value=date(1900, 1, 1), max_value=date.today(), format="DD/MM/YYYY",
                    key=key, **_initial(key, value=_parse_date(current)),
                )
                value = picked.isoformat() if picked else ""
            elif field == "country":
                options = COUNTRY_OPTIONS if current in COUNTRY_OPTIONS or not current else COUNTRY_OPTIONS + [current]
                value = st.selectbox(label, options, key=key,
                                     **_initial(key, index=options.index(current) if current else 0))
            elif field == "document_type":
                options = list(DOCUMENT_TYPES.keys())
                value = st.selectbox(label, options, format_func=document_label, key=key,
                                     **_initial(key, index=options.index(current) if current in options else 0))
            elif field == "relationship":
                options = list(RELATIONSHIPS.keys())
                value = st.selectbox(
                    label, options, format_func=lambda k: RELATIONSHIPS[k], placeholder="Selecione", key=key,
                    **_initial(key, index=options.index(current) if current in options else None),
                ) or ""
            elif field == "zip_code":
                value = st.text_input(label, placeholder="28013", key=key, on_change=_autofill_city,
                                      args=(prefix,), **_initial(key, value=current))
            elif field == "phone":
                country = values.get("country") or person.get("country") or ""
                value = st.text_input(label, placeholder=f"{dial_code(country)} 612 345 678", key=key,
                                      **_initial(key, value=current))
            elif field == "document_number":
                value = st.text_input(label, placeholder="Número do documento", key=key,
                                      **_initial(key, value=current))
                doc_type = values.get("document_type", person.get("document_type"))
                msg = validation_message(doc_type, value)
                if msg:
                    st.caption(("✅ " if validate_document(doc_type, value) else "⚠️ ") + msg)
            else:
                value = st.text_input(label, key=key, **_initial(key, value=current))
        values[field] = value
        if on_change is not None and value != current:
            on_change(field, value)
    return values


def show_photo(url: str, width: int):
    raw = data_url_to_bytes(url)
    if raw:
        st.image(io.BytesIO(raw), width=width)
    elif url and url.startswith("http"):
        st.image(url, width=width)
    else:
        st.caption("👤")


def render_member_card(member: dict):
    """Cartão de membro gerado no cadastro."""
    with st.container(border=True):
        st.markdown("<div style='text-align:center'><b>CARTÃO DE MEMBRO</b><br>"
                    "<small>Assembleia de Deus Bon Pastor</small></div>", unsafe_allow_html=True)
        col_photo, col_info = st.columns([1, 2])
        with col_photo:
            show_photo(member.get("profile_photo_url") or "", 110)
        with col_info:
            st.markdown(f"### {member.get('full_name', '')}")
            reg = _parse_date(member.get("created_at"))
            st.markdown(
                f"**ID:** `{member.get('member_id', '')}`  \n"
                f"**{document_label(member.get('document_type'))}:** {member.get('document_number') or '—'}  \n"
                f"**Igreja:** {member.get('church_name') or '—'}  \n"
                f"**Cadastro:** {reg.strftime('%d/%m/%Y') if reg else '—'}"
            )
        st.caption("Este cartão é válido apenas com documento oficial")


def photo_input(prefix: str, title: str = "Foto de perfil (opcional)"):
    """Foto por arquivo ou câmera, recorte 3:4. Retorna bytes JPEG ou None."""
    st.subheader(title)
    source = st.radio("Origem da foto", ["Escolher arquivo", "Tirar foto"], key=f"{prefix}_photo_source",
                      horizontal=True, label_visibility="collapsed")
    raw = None
    if source == "Escolher arquivo":
        photo_file = st.file_uploader("Imagem (PNG, JPEG, JPG, WEBP)", type=["png", "jpg", "jpeg", "webp"],
                                      key=f"{prefix}_photo_file")
        if photo_file:
            raw = photo_file.getvalue()
    else:
        camera_photo = st.camera_input("Tirar foto", key=f"{prefix}_photo_camera")
        if camera_photo:
            raw = camera_photo.getvalue()
    if not raw:
        return None
    try:
        img = Image.open(io.BytesIO(raw))
        if img.mode in ("RGBA", "P"):
            img = img.convert("RGB")
    except (UnidentifiedImageError, OSError):
        st.caption("Não foi possível abrir a imagem.")
        return None
    st.caption("Arraste para escolher a área da foto (proporção 3:4 fixa)")
    cropped = st_cropper(img, aspect_ratio=(3, 4), realtime_update=True, box_color="#0066cc",
                         key=f"{prefix}_cropper")
    final = resize_photo_to_final(cropped) if cropped is not None else b""
    if final:
        st.caption(f"Foto que será salva ({PHOTO_WIDTH}×{PHOTO_HEIGHT}px)")
        st.image(final, width=PHOTO_WIDTH)
        return final
    return raw
