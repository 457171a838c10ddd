from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, get_args

from pydantic import BaseModel, Field, field_validator, model_validator

from vagasrmc.core.documents import is_valid_cnpj, is_valid_cpf, only_digits

Role = Literal["CANDIDATE", "COMPANY", "ADMIN"]
UserLifecycleState = Literal["ACTIVE", "ANONYMIZED"]
JobLevel = Literal["INTERN", "APPRENTICE", "JUNIOR", "MID", "SENIOR"]
JobModality = Literal["ONSITE", "HYBRID", "REMOTE"]
ContractType = Literal["CLT", "PJ", "TEMPORARY", "INTERNSHIP", "APPRENTICE", "FREELANCER"]
JobStatus = Literal["DRAFT", "ACTIVE", "PAUSED", "CLOSED", "EXPIRED"]
ApplicationStatus = Literal["PENDING", "VIEWED", "SHORTLISTED", "INTERVIEW", "REJECTED", "HIRED"]
EducationLevel = Literal[
    "FUNDAMENTAL",
    "MEDIO",
    "TECNICO",
    "SUPERIOR_INCOMPLETO",
    "SUPERIOR",
    "POS_GRADUACAO",
    "MESTRADO",
    "DOUTORADO",
]
PlanType = Literal["FREE", "BASIC", "PROFESSIONAL", "PREMIUM"]
SubscriptionStatus = Literal["ACTIVE", "CANCELED"]
JobOrder = Literal["recent", "salary", "applications"]
AuditAction = Literal[
    "REGISTER",
    "LOGIN",
    "UPDATE_PROFILE",
    "CHANGE_PASSWORD",
    "CREATE_JOB",
    "UPDATE_JOB_STATUS",
    "APPLY",
    "CANCEL_APPLICATION",
    "UPDATE_APPLICATION",
    "DELETE_ACCOUNT",
    "VERIFY_COMPANY",
    "SUBSCRIBE",
]

ROLES: tuple[str, ...] = get_args(Role)
JOB_STATUSES: tuple[str, ...] = get_args(JobStatus)
APPLICATION_STATUSES: tuple[str, ...] = get_args(ApplicationStatus)
PLAN_TYPES: tuple[str, ...] = get_args(PlanType)

UNLIMITED = -1


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated identity re-derived from the session token on each request."""

    id: int
    email: str
    role: Role


@dataclass(slots=True)
class Page:
    items: list
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return -(-self.total // self.limit)

    def pagination(self) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
        }


_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_URL_PATTERN = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)


def _require_min_length(value: str, length: int, message: str) -> str:
    value = value.strip()
    if len(value) < length:
        raise ValueError(message)
    return value


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not _EMAIL_PATTERN.match(value):
        raise ValueError("Email inválido")
    return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Credenciais inválidas")
        return value


class _Registration(BaseModel):
    email: str
    password: str
    confirm_password: str
    phone: str
    accept_terms: bool = Field(default=False, validate_default=True)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Senha deve ter pelo menos 6 caracteres")
        return value

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        return _require_min_length(value, 10, "Telefone inválido")

    @field_validator("accept_terms")
    @classmethod
    def validate_terms(cls, value: bool) -> bool:
        if value is not True:
            raise ValueError("Você deve aceitar os termos")
        return value

    @model_validator(mode="after")
    def validate_password_confirmation(self):
        if self.password != self.confirm_password:
            raise ValueError("As senhas não coincidem")
        return self


class CandidateRegistration(_Registration):
    full_name: str
    cpf: str | None = None
    residence_city_id: int

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        return _require_min_length(value, 3, "Nome deve ter pelo menos 3 caracteres")

    @field_validator("cpf")
    @classmethod
    def validate_cpf(cls, value: str | None) -> str | None:
        if not value:
            return None
        if not is_valid_cpf(value):
            raise ValueError("CPF inválido")
        return only_digits(value)


class CompanyRegistration(_Registration):
    legal_name: str
    trade_name: str
    cnpj: str
    segment_id: int | None = None
    city_ids: list[int] = Field(default_factory=list, validate_default=True)

    @field_validator("legal_name")
    @classmethod
    def validate_legal_name(cls, value: str) -> str:
        return _require_min_length(value, 3, "Razão social deve ter pelo menos 3 caracteres")

    @field_validator("trade_name")
    @classmethod
    def validate_trade_name(cls, value: str) -> str:
        return _require_min_length(value, 2, "Nome fantasia deve ter pelo menos 2 caracteres")

    @field_validator("cnpj")
    @classmethod
    def validate_cnpj(cls, value: str) -> str:
        if not is_valid_cnpj(value):
            raise ValueError("CNPJ inválido")
        return only_digits(value)

    @field_validator("city_ids")
    @classmethod
    def validate_city_ids(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("Selecione pelo menos uma cidade")
        return list(dict.fromkeys(value))


class JobInput(BaseModel):
    title: str
    description: str
    requirements: str | None = None
    benefits: str | None = None
    area_id: int
    level: JobLevel
    modality: JobModality
    contract_type: ContractType
    salary_min: float | None = Field(default=None, ge=0)
    salary_max: float | None = Field(default=None, ge=0)
    hide_salary: bool = False
    work_schedule: str | None = None
    city_ids: list[int] = Field(default_factory=list, validate_default=True)
    apply_by_platform: bool = True
    apply_by_whatsapp: str | None = None
    apply_by_email: str | None = None
    apply_by_url: str | None = None
    is_highlighted: bool = False
    is_featured: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _require_min_length(value, 5, "Título deve ter pelo menos 5 caracteres")

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        return _require_min_length(value, 50, "Descrição deve ter pelo menos 50 caracteres")

    @field_validator("city_ids")
    @classmethod
    def validate_city_ids(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("Selecione pelo menos uma cidade")
        return list(dict.fromkeys(value))

    @field_validator("apply_by_email")
    @classmethod
    def validate_apply_email(cls, value: str | None) -> str | None:
        if not value:
            return None
        return _normalize_email(value)

    @field_validator("apply_by_url")
    @classmethod
    def validate_apply_url(cls, value: str | None) -> str | None:
        if not value:
            return None
        if not _URL_PATTERN.match(value.strip()):
            raise ValueError("URL inválida")
        return value.strip()

    @model_validator(mode="after")
    def validate_salary_range(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("Salário mínimo não pode ser maior que o máximo")
        return self


class PasswordChange(BaseModel):
    current_password: str | None = None
    new_password: str | None = None

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str | None) -> str | None:
        if value and len(value) < 6:
            raise ValueError("Senha deve ter pelo menos 6 caracteres")
        return value


class CandidateProfileUpdate(PasswordChange):
    full_name: str | None = None
    phone: str | None = None
    residence_city_id: int | None = None
    desired_position: str | None = None
    level: JobLevel | None = None
    area_id: int | None = None
    experience_years: int | None = Field(default=None, ge=0, le=50)
    education: EducationLevel | None = None
    salary_min: float | None = Field(default=None, ge=0)
    salary_max: float | None = Field(default=None, ge=0)
    resume_url: str | None = None
    resume_text: str | None = None
    skills: list[str] | None = None
    is_public_profile: bool | None = None
    receive_alerts: bool | None = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _require_min_length(value, 3, "Nome deve ter pelo menos 3 caracteres")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _require_min_length(value, 10, "Telefone inválido")

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        cleaned = [skill.strip() for skill in value if skill and skill.strip()]
        return list(dict.fromkeys(cleaned))


class CompanyProfileUpdate(PasswordChange):
    trade_name: str | None = None
    description: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    website: str | None = None
    logo_url: str | None = None
    segment_id: int | None = None

    @field_validator("trade_name")
    @classmethod
    def validate_trade_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _require_min_length(value, 2, "Nome fantasia deve ter pelo menos 2 caracteres")


class AccountDeletionRequest(BaseModel):
    password: str = ""
    reason: str | None = None


class ApplyRequest(BaseModel):
    cover_letter: str | None = None


class ApplicationStatusUpdate(BaseModel):
    application_id: int
    status: str
    feedback: str | None = None


class JobStatusUpdate(BaseModel):
    status: Literal["ACTIVE", "PAUSED", "CLOSED"]


class JobSearchQuery(BaseModel):
    q: str = ""
    city: str = ""
    area: str = ""
    level: str = ""
    modality: str = ""
    contract_type: str = ""
    salary_min: float | None = None
    salary_max: float | None = None
    page: int = 1
    limit: int = 20
    order_by: JobOrder = "recent"
