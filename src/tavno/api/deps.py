"""Shared dependency providers for FastAPI routers.

The singletons below are module attributes; routers read them through the
module (``deps.quests_repo``) at call time so ``configure`` can rebuild them.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from tavno.api.mappers import quest_event_payload
from tavno.domain.usecase.ports import TextGenerator
from tavno.infra.ai.gemini import GeminiTextGenerator
from tavno.infra.ai.offline import OfflineTextGenerator
from tavno.infra.assets import LocalAssetStore
from tavno.infra.audit import SuspiciousActivityLog
from tavno.infra.passwords import Pbkdf2Hasher
from tavno.infra.realtime import Broadcaster
from tavno.infra.repo.quests_repo import QuestsRepoStore
from tavno.infra.repo.reviews_repo import ReviewsRepoStore
from tavno.infra.repo.unit_of_work import StoreUnitOfWork
from tavno.infra.repo.users_repo import UsersRepoStore
from tavno.infra.settings import AI_TIMEOUT_SECONDS, GEMINI_BASE_URL, Settings, load_settings
from tavno.infra.store import DocumentStore, MemoryPersistence, Persistence

log = logging.getLogger(__name__)

settings: Settings
store: DocumentStore
quests_repo: QuestsRepoStore
users_repo: UsersRepoStore
reviews_repo: ReviewsRepoStore
uow: StoreUnitOfWork
broadcaster: Broadcaster
assets: LocalAssetStore
hasher: Pbkdf2Hasher
auditor: SuspiciousActivityLog
generator: TextGenerator


def _default_persistence(cfg: Settings) -> Persistence:
    if cfg.store_backend == "mongo":
        from tavno.infra.db import get_db
        from tavno.infra.mongo.persistence import MongoPersistence

        return MongoPersistence(get_db())
    return MemoryPersistence()


def _default_generator(cfg: Settings) -> TextGenerator:
    if cfg.gemini_api_key:
        return GeminiTextGenerator(
            cfg.gemini_api_key,
            model=cfg.gemini_model,
            base_url=GEMINI_BASE_URL,
            timeout_seconds=AI_TIMEOUT_SECONDS,
        )
    log.info("GEMINI_API_KEY not set; using the offline text generator")
    return OfflineTextGenerator()


def configure(
    cfg: Optional[Settings] = None,
    *,
    persistence: Optional[Persistence] = None,
    text_generator: Optional[TextGenerator] = None,
) -> None:
    """(Re)build every shared collaborator from ``cfg``."""
    global settings, store, quests_repo, users_repo, reviews_repo, uow
    global broadcaster, assets, hasher, auditor, generator

    settings = cfg or load_settings()
    store = DocumentStore(persistence or _default_persistence(settings))
    quests_repo = QuestsRepoStore(store)
    users_repo = UsersRepoStore(store)
    reviews_repo = ReviewsRepoStore(store)
    uow = StoreUnitOfWork(store)
    broadcaster = Broadcaster(quest_event_payload, queue_size=settings.broadcast_queue_size)
    assets = LocalAssetStore(settings.upload_dir)
    hasher = Pbkdf2Hasher()
    auditor = SuspiciousActivityLog(
        settings.activity_log_file,
        quests_repo,
        min_completion_seconds=settings.suspicious_completion_seconds,
        spam_limit=settings.spam_completion_limit,
        spam_window_seconds=settings.spam_completion_window_seconds,
    )
    generator = text_generator or _default_generator(settings)


configure()


async def require_admin(
    x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
) -> None:
    """Enforce that an admin token header is present and matches the configured secret."""
    token = settings.admin_token
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin token is not configured",
        )
    if not x_admin_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing admin token",
        )
    if not secrets.compare_digest(x_admin_token, token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin token",
        )
