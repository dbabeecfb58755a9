# -*- coding: utf-8 -*-
"""Validação de formato de documento (passaporte, NIE, DNI)."""

import re

# Tipo -> rótulo exibido nos selects (ordem de exibição)
DOCUMENT_TYPES = {
    "dni": "DNI (Espanha)",
    "nie": "NIE (Espanha)",
    "passport": "Passaporte",
    "cpf": "CPF (Brasil)",
    "other": "Outro",
}

DOCUMENT_PATTERNS = {
    "passport": re.compile(r"[A-Z0-9]{6,9}", re.IGNORECASE),
    "nie": re.compile(r"[XYZ][0-9]{7}[A-Z]", re.IGNORECASE),
    "dni": re.compile(r"[0-9]{8}[A-Z]", re.IGNORECASE),
}

# (mensagem válida, mensagem inválida)
VALIDATION_MESSAGES = {
    "passport": (
        "Formato de passaporte válido",
        "Formato inválido. Use apenas letras e números (6-9 caracteres)",
    ),
    "nie": (
        "Formato de NIE válido",
        "Formato inválido. Use: Letra + 7 números + letra (ex: X1234567A)",
    ),
    "dni": (
        "Formato de DNI válido",
        "Formato inválido. Use: 8 números + letra (ex: 12345678A)",
    ),
}


def _normalize_type(document_type) -> str:
    return str(document_type or "").strip().lower()


def validate_document(document_type: str, document_number: str) -> bool:
    """Número vazio é sempre válido (campo opcional). Tipos sem regra não têm formato."""
    if not document_number:
        return True
    pattern = DOCUMENT_PATTERNS.get(_normalize_type(document_type))
    if pattern is None:
        return True
    # "12345678A\n" não é válido
    return pattern.fullmatch(document_number) is not None


def validation_message(document_type: str, document_number: str) -> str:
    """Mensagem de feedback para o usuário. Vazia quando não há o que dizer."""
    if not document_number:
        return ""
    messages = VALIDATION_MESSAGES.get(_normalize_type(document_type))
    if messages is None:
        return ""
    valid_msg, invalid_msg = messages
    return valid_msg if validate_document(document_type, document_number) else invalid_msg


def document_label(document_type: str) -> str:
    """Rótulo do tipo de documento; tipos desconhecidos aparecem como vieram."""
    return DOCUMENT_TYPES.get(_normalize_type(document_type), str(document_type or ""))
