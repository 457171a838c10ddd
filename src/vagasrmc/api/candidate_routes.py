from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from vagasrmc.api import schemas
from vagasrmc.api.deps import client_ip, get_app_settings, get_db, require_candidate
from vagasrmc.config import Settings
from vagasrmc.core.accounts import AccountService
from vagasrmc.core.applications import ApplicationService
from vagasrmc.core.favorites import FavoriteService
from vagasrmc.types import AccountDeletionRequest, CandidateProfileUpdate, Principal

router = APIRouter(prefix="/api/candidate", tags=["candidate"])


@router.get("/profile")
def get_profile(
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    candidate = AccountService(db, settings=settings).get_candidate(principal.id)
    return schemas.envelope(schemas.candidate_profile(candidate))


@router.patch("/profile")
def update_profile(
    payload: CandidateProfileUpdate,
    request: Request,
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    candidate = AccountService(db, settings=settings).update_candidate_profile(
        principal.id, payload, ip_address=client_ip(request)
    )
    return schemas.envelope(schemas.candidate_profile(candidate), message="Perfil atualizado")


@router.delete("/profile")
def delete_account(
    payload: AccountDeletionRequest,
    request: Request,
    response: Response,
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    AccountService(db, settings=settings).delete_account(principal.id, payload, ip_address=client_ip(request))
    response.delete_cookie(settings.session_cookie_name)
    return schemas.envelope(message="Conta excluída com sucesso")


@router.get("/applications")
def list_applications(
    status: str | None = None,
    page: int = 1,
    limit: int | None = None,
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    result = ApplicationService(db, settings=settings).list_for_candidate(
        principal.id, status=status, page=page, limit=limit
    )
    return schemas.paged(result, schemas.candidate_application)


@router.delete("/applications")
def cancel_application(
    request: Request,
    application_id: int = Query(..., alias="id"),
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    ApplicationService(db, settings=settings).cancel(principal.id, application_id, ip_address=client_ip(request))
    return schemas.envelope(message="Candidatura cancelada")


@router.get("/favorites")
def list_favorites(
    page: int = 1,
    limit: int | None = None,
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    result = FavoriteService(db, settings=settings).list_favorites(principal.id, page=page, limit=limit)
    return schemas.paged(result, schemas.favorite)
