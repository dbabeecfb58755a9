# -*- coding: utf-8 -*-
"""Constantes globais de configuração do app."""

# Planilha Google (backend de dados)
SPREADSHEET_NAME = "bonpastor_membros_db"

# Nome da aba -> cabeçalho. A primeira coluna é sempre a identidade da linha.
TABLES = {
    "members": [
        "id", "member_id", "full_name", "birth_date", "document_type", "document_number",
        "phone", "email", "address", "city", "zip_code", "country", "church_name",
        "profile_photo_url", "created_at",
    ],
    "family_members": [
        "id", "main_member_id", "full_name", "birth_date", "relationship",
        "phone", "address", "city", "zip_code", "country", "church_name",
        "document_type", "document_number", "ministry", "created_at",
    ],
    "announcements": ["id", "title", "content", "is_urgent", "created_at"],
    "events": ["id", "name", "description", "event_date", "event_time", "created_at"],
    "prayer_requests": ["id", "member_id", "title", "description", "is_answered", "is_approved", "created_at"],
    "testimonies": ["id", "member_id", "title", "content", "is_approved", "created_at"],
    "retreat_registrations": [
        "id", "member_id", "full_name", "email", "phone", "payment_method", "installments",
        "status", "created_at",
    ],
    "galleries": ["id", "title", "description", "image_url", "event_id", "is_active", "created_at"],
    "app_configurations": ["key", "value"],
}

# Leitura em cache (segundos)
CACHE_TTL = 300

# Autenticação do painel (default_password em .streamlit/secrets.toml, nunca no Git)
CONFIG_WORKSHEET = "config"

# Foto em base64 (a célula da planilha aceita até 50000 caracteres)
PHOTO_B64_MAX = 48000

# Foto de perfil (proporção 3:4)
PHOTO_WIDTH = 120
PHOTO_HEIGHT = 160

# Cadastro
MEMBER_ID_LENGTH = 9
MEMBER_ID_ATTEMPTS = 5
DEFAULT_COUNTRY = "Espanha"
DEFAULT_DOCUMENT_TYPE = "dni"

# Retiro
RETREAT_PRICE = 150
RETREAT_STATUSES = ["Pendente", "Pago", "Cancelado"]
PAYMENT_METHODS = {
    "credit_debit_card": "Cartão de crédito/débito",
    "bizum": "Bizum",
    "cash": "Dinheiro",
}
INSTALLMENT_OPTIONS = ["1", "2", "3"]

# Busca de município por código postal
POSTAL_LOOKUP_URL = "https://api.zippopotam.us/{code}/{postal}"
POSTAL_LOOKUP_TIMEOUT = 5
