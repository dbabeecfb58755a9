# -*- coding: utf-8 -*-
"""Cadastro de membros: ID de membro, montagem do registro e lista de familiares."""

import dataclasses
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timezone

from config import DEFAULT_COUNTRY, DEFAULT_DOCUMENT_TYPE, MEMBER_ID_LENGTH

MEMBER_ID_ALPHABET = string.digits + string.ascii_uppercase

# Relação ausente (ex.: pedido de oração de um membro apagado)
UNKNOWN_MEMBER = "Membro não encontrado"

RELATIONSHIPS = {
    "spouse": "Cônjuge",
    "child": "Filho(a)",
    "parent": "Pai/Mãe",
    "sibling": "Irmão/Irmã",
    "other": "Outro",
}

FIELD_LABELS = {
    "full_name": "Nome completo",
    "birth_date": "Data de nascimento",
    "phone": "Telefone",
    "email": "E-mail",
    "address": "Endereço",
    "city": "Município (Pueblo)",
    "zip_code": "Código Postal",
    "country": "País",
    "church_name": "Igreja de origem",
    "document_type": "Tipo de documento",
    "document_number": "Número do documento",
    "relationship": "Parentesco",
    "ministry": "Ministério",
}

# Campos que o formulário exige antes de enviar (o montador não verifica)
REQUIRED_MEMBER_FIELDS = (
    "full_name", "birth_date", "phone", "email", "address", "city",
    "zip_code", "country", "church_name", "document_type",
)
REQUIRED_FAMILY_FIELDS = ("full_name", "birth_date", "relationship")


@dataclass(frozen=True)
class MemberRecord:
    member_id: str
    created_at: str
    full_name: str = ""
    birth_date: str = ""
    document_type: str = DEFAULT_DOCUMENT_TYPE
    document_number: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""
    country: str = DEFAULT_COUNTRY
    church_name: str = ""
    profile_photo_url: str = ""

    def to_record(self) -> dict:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class FamilyMember:
    id: str = ""
    main_member_id: str = ""
    full_name: str = ""
    birth_date: str = ""
    relationship: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""
    country: str = DEFAULT_COUNTRY
    church_name: str = ""
    document_type: str = DEFAULT_DOCUMENT_TYPE
    document_number: str = ""
    ministry: str = ""
    created_at: str = ""

    @classmethod
    def from_record(cls, record: dict) -> "FamilyMember":
        """Linha da planilha -> FamilyMember. Colunas extras são ignoradas."""
        names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: str(v) for k, v in record.items() if k in names and v is not None})

    def to_record(self) -> dict:
        return dataclasses.asdict(self)

    def is_complete(self) -> bool:
        return all(str(getattr(self, f)).strip() for f in REQUIRED_FAMILY_FIELDS)


_MEMBER_PASS_THROUGH = tuple(
    f.name for f in dataclasses.fields(MemberRecord)
    if f.name not in ("member_id", "created_at", "profile_photo_url")
)
_FAMILY_LOCKED = ("id", "main_member_id", "created_at")


def generate_member_id(length: int = MEMBER_ID_LENGTH) -> str:
    """ID curto em base 36 maiúscula. Não garante unicidade (ver sheets.insert_member)."""
    return "".join(secrets.choice(MEMBER_ID_ALPHABET) for _ in range(length))


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def assemble_member_record(fields: dict, photo_url: str | None = None, now: datetime | None = None) -> MemberRecord:
    """Campos do formulário + ID novo + data de cadastro -> registro pronto para gravar.

    Os demais campos passam sem alteração. Não valida obrigatórios; isso é do formulário.
    """
    passed = {name: fields[name] for name in _MEMBER_PASS_THROUGH if name in fields}
    return MemberRecord(
        member_id=generate_member_id(),
        created_at=_timestamp(now),
        profile_photo_url=photo_url or "",
        **passed,
    )


def assemble_family_record(fields: dict, main_member_id: str, now: datetime | None = None) -> FamilyMember:
    """Familiar ligado ao membro principal. Sem ID de membro próprio."""
    names = {f.name for f in dataclasses.fields(FamilyMember)} - set(_FAMILY_LOCKED)
    passed = {k: v for k, v in fields.items() if k in names}
    return FamilyMember(main_member_id=main_member_id, created_at=_timestamp(now), **passed)


def profile_changes(current: dict, fields: dict, photo_url: str | None = None) -> dict:
    """Campos editados pelo próprio membro que diferem do registro gravado.

    member_id e created_at nunca entram; a foto só quando uma nova foi enviada.
    """
    changes = {
        name: fields[name] for name in _MEMBER_PASS_THROUGH
        if name in fields and str(fields[name] or "") != str(current.get(name) or "")
    }
    if photo_url and photo_url != current.get("profile_photo_url"):
        changes["profile_photo_url"] = photo_url
    return changes


def missing_required_fields(fields: dict, required=REQUIRED_MEMBER_FIELDS) -> list[str]:
    return [name for name in required if not str(fields.get(name) or "").strip()]


def display_name(members_by_id: dict, member_id) -> str:
    """Nome do membro ligado a um registro, ou UNKNOWN_MEMBER se não existir."""
    member = members_by_id.get(str(member_id or ""))
    if not member:
        return UNKNOWN_MEMBER
    return str(member.get("full_name") or "").strip() or UNKNOWN_MEMBER


class FamilyRoster:
    """Lista de familiares de um membro. Dono único do estado; o editor só chama os métodos.

    on_change recebe a tupla atualizada após cada alteração.
    """

    def __init__(self, main_member_id: str, members=None, on_change=None):
        self.main_member_id = main_member_id
        self._members = list(members or [])
        self._on_change = on_change

    def __len__(self):
        return len(self._members)

    def __iter__(self):
        return iter(self._members)

    def __getitem__(self, index: int) -> FamilyMember:
        return self._members[index]

    @property
    def members(self) -> tuple:
        return tuple(self._members)

    def _changed(self):
        if self._on_change is not None:
            self._on_change(self.members)

    def add(self) -> FamilyMember:
        member = FamilyMember(main_member_id=self.main_member_id)
        self._members.append(member)
        self._changed()
        return member

    def update(self, index: int, **changes) -> FamilyMember:
        """Altera campos do familiar. Nome de campo desconhecido -> TypeError."""
        locked = [name for name in changes if name in _FAMILY_LOCKED]
        if locked:
            raise ValueError(f"campos não editáveis: {', '.join(locked)}")
        member = dataclasses.replace(self._members[index], **changes)
        self._members[index] = member
        self._changed()
        return member

    def remove(self, index: int, delete_row=None) -> FamilyMember:
        """Remove o familiar. Se já gravado, apaga a linha antes; erro na exclusão mantém a lista."""
        member = self._members[index]
        if member.id:
            if delete_row is None:
                raise ValueError("familiar gravado precisa de delete_row")
            delete_row(member.id)
        del self._members[index]
        self._changed()
        return member

    def savable(self) -> list[FamilyMember]:
        return [m for m in self._members if m.is_complete()]

    def replace(self, members):
        self._members = list(members)
        self._changed()
