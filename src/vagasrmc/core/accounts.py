"""
Account lifecycle: registration, login, profile edits and LGPD erasure.

Every multi-row write (user plus profile plus audit entry) is committed as one
unit; unique-constraint violations surface as ``Conflict``.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from vagasrmc.config import Settings, get_settings
from vagasrmc.core.security import DELETED_PASSWORD_SENTINEL, get_password_hash, verify_password
from vagasrmc.db.base import utcnow
from vagasrmc.db.models import Candidate, Company, CompanyCity, User
from vagasrmc.db.repositories import Repository
from vagasrmc.errors import Conflict, InvalidCredential, NotFound, ValidationError
from vagasrmc.logging_config import mask_email
from vagasrmc.types import (
    AccountDeletionRequest,
    CandidateProfileUpdate,
    CandidateRegistration,
    CompanyProfileUpdate,
    CompanyRegistration,
    PasswordChange,
    Principal,
)

logger = logging.getLogger(__name__)

ANONYMIZED_NAME = "Usuário Removido"
ANONYMIZED_PHONE = "REMOVED"


def anonymized_email(user_id: int) -> str:
    return f"deleted_{user_id}@removed.local"


def profile_changes(payload: PasswordChange, model: type) -> dict:
    """Fields sent in a PATCH. An explicit null clears a nullable column and is ignored otherwise."""
    changes = payload.model_dump(exclude_unset=True, exclude={"current_password", "new_password"})
    columns = model.__table__.columns
    return {field: value for field, value in changes.items() if value is not None or columns[field].nullable}


class AccountService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def _masked(self, email: str) -> str:
        return mask_email(email, redact=self.settings.redact_log_pii)

    def _hash(self, password: str) -> str:
        return get_password_hash(password, rounds=self.settings.password_hash_rounds)

    # identity

    def authenticate(self, email: str, password: str, *, ip_address: str | None = None) -> Principal:
        user = self.repo.get_user_by_email(email.strip().lower())
        if user is None or not user.is_active:
            logger.warning("Login rejected, unknown or inactive user email=%s", self._masked(email))
            raise NotFound("Usuário não encontrado ou inativo")

        if not verify_password(password, user.password_hash):
            logger.warning("Login rejected, bad password user_id=%s", user.id)
            raise InvalidCredential("Senha incorreta")

        user.last_login_at = utcnow()
        self.repo.append_audit_log(
            user_id=user.id,
            action="LOGIN",
            entity="User",
            entity_id=user.id,
            ip_address=ip_address,
        )
        self.repo.commit()
        logger.info("User logged in user_id=%s role=%s", user.id, user.role)
        return Principal(id=user.id, email=user.email, role=user.role)

    def load_principal(self, user_id: int) -> Principal | None:
        """Resolve a session subject back to a live principal; inactive accounts resolve to None."""
        user = self.repo.get_user(user_id)
        if user is None or not user.is_active or user.lifecycle_state != "ACTIVE":
            return None
        return Principal(id=user.id, email=user.email, role=user.role)

    # registration

    def _ensure_email_available(self, email: str) -> None:
        if self.repo.get_user_by_email(email) is not None:
            raise Conflict("Este email já está cadastrado")

    def _new_user(self, *, email: str, password: str, role: str) -> User:
        return User(
            email=email,
            password_hash=self._hash(password),
            role=role,
            is_active=True,
            lifecycle_state="ACTIVE",
            consented_at=utcnow(),
            consent_version=self.settings.consent_version,
        )

    def register_candidate(self, payload: CandidateRegistration, *, ip_address: str | None = None) -> User:
        self._ensure_email_available(payload.email)
        if payload.cpf and self.repo.get_candidate_by_cpf(payload.cpf) is not None:
            raise Conflict("Este CPF já está cadastrado")
        if self.repo.get_city(payload.residence_city_id) is None:
            raise ValidationError("Cidade de residência inválida")

        with self.repo.conflict_on_duplicate("Este email ou CPF já está cadastrado"):
            user = self.repo.add(self._new_user(email=payload.email, password=payload.password, role="CANDIDATE"))
            candidate = self.repo.add(
                Candidate(
                    user_id=user.id,
                    full_name=payload.full_name,
                    cpf=payload.cpf,
                    phone=payload.phone,
                    residence_city_id=payload.residence_city_id,
                    skills=[],
                )
            )
            self.repo.append_audit_log(
                user_id=user.id,
                action="REGISTER",
                entity="Candidate",
                entity_id=candidate.id,
                details={"email": self._masked(payload.email)},
                ip_address=ip_address,
            )
            self.repo.commit()

        logger.info("Candidate registered user_id=%s email=%s", user.id, self._masked(user.email))
        return user

    def register_company(self, payload: CompanyRegistration, *, ip_address: str | None = None) -> User:
        self._ensure_email_available(payload.email)
        if self.repo.get_company_by_cnpj(payload.cnpj) is not None:
            raise Conflict("Este CNPJ já está cadastrado")
        if payload.segment_id is not None and self.repo.get_segment(payload.segment_id) is None:
            raise ValidationError("Segmento inválido")
        if self.repo.missing_city_ids(payload.city_ids):
            raise ValidationError("Cidade inválida")

        with self.repo.conflict_on_duplicate("Este email ou CNPJ já está cadastrado"):
            user = self.repo.add(self._new_user(email=payload.email, password=payload.password, role="COMPANY"))
            company = Company(
                user_id=user.id,
                legal_name=payload.legal_name,
                trade_name=payload.trade_name,
                cnpj=payload.cnpj,
                phone=payload.phone,
                segment_id=payload.segment_id,
                is_verified=False,
            )
            company.cities = [CompanyCity(city_id=city_id) for city_id in payload.city_ids]
            self.repo.add(company)
            self.repo.append_audit_log(
                user_id=user.id,
                action="REGISTER",
                entity="Company",
                entity_id=company.id,
                details={"email": self._masked(payload.email), "cnpj": payload.cnpj},
                ip_address=ip_address,
            )
            self.repo.commit()

        logger.info("Company registered user_id=%s company_id=%s", user.id, company.id)
        return user

    def create_admin(self, email: str, password: str) -> User:
        email = email.strip().lower()
        self._ensure_email_available(email)
        if len(password) < 6:
            raise ValidationError("Senha deve ter pelo menos 6 caracteres")

        with self.repo.conflict_on_duplicate("Este email já está cadastrado"):
            user = self.repo.add(self._new_user(email=email, password=password, role="ADMIN"))
            self.repo.append_audit_log(user_id=user.id, action="REGISTER", entity="User", entity_id=user.id)
            self.repo.commit()
        logger.info("Admin created user_id=%s", user.id)
        return user

    # profiles

    def get_candidate(self, user_id: int) -> Candidate:
        candidate = self.repo.get_candidate_by_user(user_id)
        if candidate is None:
            raise NotFound("Candidato não encontrado")
        return candidate

    def get_company(self, user_id: int) -> Company:
        company = self.repo.get_company_by_user(user_id)
        if company is None:
            raise NotFound("Empresa não encontrada")
        return company

    def _apply_password_change(self, user: User, payload: PasswordChange, *, ip_address: str | None) -> bool:
        if not payload.new_password:
            return False
        if not payload.current_password:
            raise ValidationError("Informe a senha atual")
        if not verify_password(payload.current_password, user.password_hash):
            raise ValidationError("Senha atual incorreta", code="INVALID_CREDENTIAL")

        user.password_hash = self._hash(payload.new_password)
        self.repo.append_audit_log(
            user_id=user.id,
            action="CHANGE_PASSWORD",
            entity="User",
            entity_id=user.id,
            ip_address=ip_address,
        )
        return True

    def update_candidate_profile(
        self,
        user_id: int,
        payload: CandidateProfileUpdate,
        *,
        ip_address: str | None = None,
    ) -> Candidate:
        candidate = self.get_candidate(user_id)
        changes = profile_changes(payload, Candidate)

        if "residence_city_id" in changes and self.repo.get_city(changes["residence_city_id"]) is None:
            raise ValidationError("Cidade de residência inválida")
        if changes.get("area_id") is not None and self.repo.get_area(changes["area_id"]) is None:
            raise ValidationError("Área inválida")

        password_changed = self._apply_password_change(candidate.user, payload, ip_address=ip_address)
        for field, value in changes.items():
            setattr(candidate, field, value)

        self.repo.append_audit_log(
            user_id=user_id,
            action="UPDATE_PROFILE",
            entity="Candidate",
            entity_id=candidate.id,
            details={"fields": sorted(changes), "password_changed": password_changed},
            ip_address=ip_address,
        )
        self.repo.commit()
        self.session.expire(candidate)
        return self.get_candidate(user_id)

    def update_company_profile(
        self,
        user_id: int,
        payload: CompanyProfileUpdate,
        *,
        ip_address: str | None = None,
    ) -> Company:
        company = self.get_company(user_id)
        changes = profile_changes(payload, Company)

        if changes.get("segment_id") is not None and self.repo.get_segment(changes["segment_id"]) is None:
            raise ValidationError("Segmento inválido")

        password_changed = self._apply_password_change(company.user, payload, ip_address=ip_address)
        for field, value in changes.items():
            setattr(company, field, value)

        self.repo.append_audit_log(
            user_id=user_id,
            action="UPDATE_PROFILE",
            entity="Company",
            entity_id=company.id,
            details={"fields": sorted(changes), "password_changed": password_changed},
            ip_address=ip_address,
        )
        self.repo.commit()
        self.session.expire(company)
        return self.get_company(user_id)

    # LGPD erasure

    def delete_account(
        self,
        user_id: int,
        payload: AccountDeletionRequest,
        *,
        ip_address: str | None = None,
    ) -> None:
        """
        Anonymize a candidate account in place.

        Personal fields are scrubbed and the user is moved to the ANONYMIZED
        lifecycle state. Rows are kept so historical applications still
        resolve to a (now anonymous) candidate.
        """
        if not payload.password:
            raise ValidationError("Senha é obrigatória")

        user = self.repo.get_user(user_id)
        candidate = self.repo.get_candidate_by_user(user_id)
        if user is None or candidate is None or user.lifecycle_state != "ACTIVE":
            raise NotFound("Usuário não encontrado")
        if not verify_password(payload.password, user.password_hash):
            logger.warning("Account deletion rejected, bad password user_id=%s", user_id)
            raise InvalidCredential("Senha incorreta")

        candidate.full_name = ANONYMIZED_NAME
        candidate.cpf = None
        candidate.phone = ANONYMIZED_PHONE
        candidate.resume_url = None
        candidate.resume_text = None
        candidate.skills = []

        user.email = anonymized_email(user.id)
        user.password_hash = DELETED_PASSWORD_SENTINEL
        user.is_active = False
        user.lifecycle_state = "ANONYMIZED"
        user.data_deleted_at = utcnow()

        self.repo.append_audit_log(
            user_id=user.id,
            action="DELETE_ACCOUNT",
            entity="User",
            entity_id=user.id,
            details={"reason": payload.reason},
            ip_address=ip_address,
        )
        self.repo.commit()
        logger.info("Account anonymized user_id=%s", user.id)
