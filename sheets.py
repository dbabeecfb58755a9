# -*- coding: utf-8 -*-
"""Conexão com a planilha Google e operações de linha por tabela (aba)."""

import dataclasses
import logging
import time
import uuid
from datetime import datetime, timezone

import gspread
import streamlit as st

from config import CACHE_TTL, MEMBER_ID_ATTEMPTS, SPREADSHEET_NAME, TABLES
from members import FamilyMember, MemberRecord, generate_member_id

logger = logging.getLogger(__name__)

# Nunca reescritos depois do insert
IMMUTABLE_COLUMNS = ("id", "member_id", "main_member_id", "created_at")


class RecordNotFound(LookupError):
    """Linha com o id pedido não existe na aba."""


class MemberIdCollision(RuntimeError):
    """Não foi possível gerar um ID de membro livre."""


def init(client, spreadsheet_name: str = None):
    """Inicializa o módulo com o cliente gspread."""
    global _client, _spreadsheet_name
    _client = client
    _spreadsheet_name = spreadsheet_name or SPREADSHEET_NAME


def get_sheet():
    """Abre a planilha uma vez por sessão. Em 429 espera e tenta de novo uma vez."""
    if "sheet" not in st.session_state:
        last_err = None
        for attempt in range(2):
            try:
                st.session_state.sheet = _client.open(_spreadsheet_name)
                last_err = None
                break
            except gspread.exceptions.APIError as e:
                last_err = e
                resp = getattr(e, "response", None)
                if resp is not None and getattr(resp, "status_code", None) == 429 and attempt == 0:
                    logger.warning("sheets read quota hit, retrying in 8s")
                    time.sleep(8)
                    continue
                break
        if last_err is not None:
            logger.error("could not open spreadsheet %s: %s", _spreadsheet_name, last_err)
            st.error(
                "Não foi possível conectar à planilha. "
                "Verifique o nome da planilha e se ela está compartilhada com o **e-mail da conta de serviço**. "
                "Se o limite de leitura (429) foi atingido, tente novamente em instantes."
            )
            st.stop()
    return st.session_state.sheet


# ------------------------
# Operações de linha (recebem a aba; sem estado de sessão)
# ------------------------
def new_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def as_bool(value) -> bool:
    """Lê TRUE/FALSE gravados como texto (ou vindos como bool)."""
    if isinstance(value, bool):
        return value
    return str(value or "").strip().upper() in ("TRUE", "1", "SIM", "YES")


def ensure_headers(ws, headers: list) -> list:
    """Escreve o cabeçalho se a aba estiver vazia; senão acrescenta colunas que faltam.

    Retorna o cabeçalho efetivo da aba.
    """
    row1 = ws.row_values(1)
    if not row1:
        ws.update(values=[list(headers)], range_name="A1")
        return list(headers)
    missing = [h for h in headers if h not in row1]
    for i, col_name in enumerate(missing):
        ws.update_cell(1, len(row1) + 1 + i, col_name)
    return row1 + missing


def read_records(ws) -> list:
    """Todas as linhas como dicts (cabeçalho = 1ª linha). Linhas vazias são puladas."""
    rows = ws.get_all_values()
    if not rows or len(rows) < 2:
        return []
    headers = rows[0]
    records = []
    for row in rows[1:]:
        if not any(str(c).strip() for c in row):
            continue
        padded = list(row) + [""] * (len(headers) - len(row))
        records.append(dict(zip(headers, padded)))
    return records


def find_row(ws, key) -> int | None:
    """Número da linha (1-based) cuja 1ª coluna é key, ou None."""
    values = ws.col_values(1)
    for row_num, value in enumerate(values[1:], start=2):
        if value == str(key):
            return row_num
    return None


def insert_record(ws, headers: list, record: dict) -> dict:
    """Acrescenta uma linha. Preenche id e created_at se a tabela tiver essas colunas."""
    record = dict(record)
    if "id" in headers and not record.get("id"):
        record["id"] = new_id()
    if "created_at" in headers and not record.get("created_at"):
        record["created_at"] = now_iso()
    ws.append_row([to_cell(record.get(h)) for h in headers], value_input_option="RAW")
    return record


def update_record(ws, headers: list, record_id, changes: dict) -> dict:
    """Atualiza a linha de record_id. Colunas imutáveis são ignoradas."""
    row_num = find_row(ws, record_id)
    if row_num is None:
        raise RecordNotFound(record_id)
    current = ws.row_values(row_num)
    current = list(current) + [""] * (len(headers) - len(current))
    merged = dict(zip(headers, current))
    for key, value in changes.items():
        if key in headers and key not in IMMUTABLE_COLUMNS:
            merged[key] = to_cell(value)
    ws.update(values=[[merged[h] for h in headers]], range_name=f"A{row_num}", value_input_option="RAW")
    return merged


def delete_record(ws, record_id):
    row_num = find_row(ws, record_id)
    if row_num is None:
        raise RecordNotFound(record_id)
    ws.delete_rows(row_num)


def insert_member(ws, headers: list, record: MemberRecord, attempts: int = MEMBER_ID_ATTEMPTS) -> dict:
    """Grava o membro garantindo member_id livre na aba; colisão gera um novo ID."""
    col = headers.index("member_id") + 1
    taken = set(ws.col_values(col)[1:])
    for _ in range(attempts):
        if record.member_id not in taken:
            return insert_record(ws, headers, record.to_record())
        logger.warning("member_id %s already taken, regenerating", record.member_id)
        record = dataclasses.replace(record, member_id=generate_member_id())
    raise MemberIdCollision(f"sem member_id livre após {attempts} tentativas")


def family_of(ws, main_member_id: str) -> list:
    return [
        FamilyMember.from_record(r)
        for r in read_records(ws)
        if str(r.get("main_member_id")) == str(main_member_id)
    ]


def save_family_members(ws, headers: list, main_member_id: str, members) -> list:
    """Grava os familiares completos (update se tem id, insert se não) e recarrega a lista do dono."""
    for member in members:
        if not member.is_complete():
            continue
        record = member.to_record()
        if member.id:
            update_record(ws, headers, member.id, record)
        else:
            record["main_member_id"] = main_member_id
            insert_record(ws, headers, record)
    return family_of(ws, main_member_id)


def register_member(member_ws, member_headers: list, family_ws, family_headers: list, record: MemberRecord, family=()) -> tuple:
    """Grava o membro e depois os familiares. Retorna (membro gravado, familiares gravados?).

    Falha ao gravar os familiares não desfaz o membro: ele já tem ID e cartão,
    e os familiares podem ser incluídos depois em "Meus familiares".
    """
    saved = insert_member(member_ws, member_headers, record)
    if not family:
        return saved, True
    try:
        save_family_members(family_ws, family_headers, saved["member_id"], family)
    except (gspread.exceptions.GSpreadException, LookupError) as e:
        logger.error("member %s saved, family save failed: %s", saved["member_id"], e)
        return saved, False
    return saved, True


def get_config_value(ws, key: str, default: str = "") -> str:
    for r in read_records(ws):
        if r.get("key") == key:
            return r.get("value") or default
    return default


def set_config_value(ws, key: str, value: str):
    row_num = find_row(ws, key)
    if row_num is None:
        ws.append_row([key, to_cell(value)], value_input_option="RAW")
    else:
        ws.update(values=[[key, to_cell(value)]], range_name=f"A{row_num}", value_input_option="RAW")


# ------------------------
# Abas com cache de sessão
# ------------------------
def get_ws(table: str):
    """Aba da tabela (cache de sessão). Cria com cabeçalho se não existir."""
    key = f"ws_{table}"
    if key not in st.session_state:
        sheet = get_sheet()
        headers = TABLES[table]
        try:
            ws = sheet.worksheet(table)
        except gspread.exceptions.WorksheetNotFound:
            logger.info("creating worksheet %s", table)
            ws = sheet.add_worksheet(title=table, rows=100, cols=len(headers))
        st.session_state[f"headers_{table}"] = ensure_headers(ws, headers)
        st.session_state[key] = ws
    return st.session_state[key]


def get_headers(table: str) -> list:
    get_ws(table)
    return st.session_state[f"headers_{table}"]


@st.cache_data(ttl=CACHE_TTL)
def load_table(table: str) -> list:
    """Linhas da tabela (cache 5 min). Economiza a cota de leitura da API."""
    return read_records(get_ws(table))


def invalidate_cache():
    """Limpa o cache após gravar. Chamar logo depois de inserir/alterar/excluir."""
    st.cache_data.clear()


def insert(table: str, record: dict) -> dict:
    saved = insert_record(get_ws(table), get_headers(table), record)
    invalidate_cache()
    return saved


def update(table: str, record_id, changes: dict) -> dict:
    saved = update_record(get_ws(table), get_headers(table), record_id, changes)
    invalidate_cache()
    return saved


def delete(table: str, record_id):
    delete_record(get_ws(table), record_id)
    invalidate_cache()


def members_by_member_id() -> dict:
    return {str(m.get("member_id")): m for m in load_table("members") if m.get("member_id")}
