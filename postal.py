# -*- coding: utf-8 -*-
"""Preenchimento do município a partir do código postal (zippopotam.us)."""

import logging
from urllib.parse import quote

import requests

from config import POSTAL_LOOKUP_TIMEOUT, POSTAL_LOOKUP_URL

logger = logging.getLogger(__name__)

COUNTRY_CODE_MAP = {
    "Espanha": "ES",
    "Portugal": "PT",
    "França": "FR",
    "Alemanha": "DE",
    "Itália": "IT",
    "Reino Unido": "GB",
    "Bélgica": "BE",
    "Holanda": "NL",
    "Países Baixos": "NL",
    "Suíça": "CH",
    "Áustria": "AT",
    "Suécia": "SE",
    "Noruega": "NO",
    "Dinamarca": "DK",
    "Finlândia": "FI",
    "Irlanda": "IE",
    "Polónia": "PL",
}

DIAL_CODE_MAP = {
    "Espanha": "+34",
    "Portugal": "+351",
    "França": "+33",
    "Alemanha": "+49",
    "Itália": "+39",
    "Reino Unido": "+44",
    "Bélgica": "+32",
    "Holanda": "+31",
    "Países Baixos": "+31",
    "Suíça": "+41",
    "Áustria": "+43",
    "Suécia": "+46",
    "Noruega": "+47",
    "Dinamarca": "+45",
    "Finlândia": "+358",
    "Irlanda": "+353",
    "Polónia": "+48",
}

COUNTRIES = list(DIAL_CODE_MAP.keys())


def dial_code(country: str) -> str:
    """Prefixo telefônico do país. Padrão: Espanha."""
    return DIAL_CODE_MAP.get(country, "+34")


def lookup_municipality(country: str, postal_code: str, session=None, timeout: float = POSTAL_LOOKUP_TIMEOUT):
    """Nome do município para (país, código postal), ou None.

    Falha de rede, código desconhecido ou resposta sem lugar -> None. Nunca levanta.
    """
    code = COUNTRY_CODE_MAP.get(country)
    postal = (postal_code or "").strip()
    if not code or not postal:
        return None
    url = POSTAL_LOOKUP_URL.format(code=code, postal=quote(postal, safe=""))
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("postal lookup failed for %s/%s: %s", code, postal, exc)
        return None
    if not resp.ok:
        logger.debug("postal lookup %s/%s -> HTTP %s", code, postal, resp.status_code)
        return None
    try:
        places = resp.json().get("places") or []
        place = places[0].get("place name") if places else None
    except (ValueError, AttributeError) as exc:
        logger.warning("postal lookup %s/%s returned malformed body: %s", code, postal, exc)
        return None
    return place or None
