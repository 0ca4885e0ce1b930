"""
Composition root and FastAPI dependencies.

build_container() wires the concrete adapters into the use cases once per
app; routes pull them from request.app.state.container.
"""

from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cndes.config.settings import Settings
from cndes.core.entities.user import User
from cndes.core.exceptions import AuthenticationError, PermissionDeniedError
from cndes.core.use_cases.add_catalog_entry import AddCatalogEntryUseCase
from cndes.core.use_cases.assign_doc_number import AssignDocNumberUseCase
from cndes.core.use_cases.authenticate_user import AuthenticateUserUseCase, ChangePasswordUseCase
from cndes.core.use_cases.manage_documents import (
    DeleteDocumentUseCase,
    RegisterDocumentUseCase,
    UpdateDocumentUseCase,
)
from cndes.core.use_cases.persist_attachments import PersistAttachmentsUseCase
from cndes.infrastructure.db.models import DepartmentRecord, ExternalEntityRecord
from cndes.infrastructure.db.repository import CatalogRepository, DocumentRepository, UserRepository
from cndes.infrastructure.rules.document_rules import DocumentRulesEngine
from cndes.infrastructure.security.passwords import BcryptPasswordHasher
from cndes.infrastructure.security.tokens import JWTTokenService
from cndes.infrastructure.storage.local_storage import LocalStorageService


@dataclass
class Container:
    settings: Settings
    documents: DocumentRepository
    departments: CatalogRepository
    external_entities: CatalogRepository
    users: UserRepository
    storage: LocalStorageService
    hasher: BcryptPasswordHasher
    numbering: AssignDocNumberUseCase
    register_document: RegisterDocumentUseCase
    update_document: UpdateDocumentUseCase
    delete_document: DeleteDocumentUseCase
    add_department: AddCatalogEntryUseCase
    add_external_entity: AddCatalogEntryUseCase
    authenticate: AuthenticateUserUseCase
    change_password: ChangePasswordUseCase


def build_container(settings: Settings) -> Container:
    """Factory: concrete adapters -> use cases."""
    documents = DocumentRepository(max_attempts=settings.sequence_max_attempts)
    departments = CatalogRepository(DepartmentRecord, "Department")
    external_entities = CatalogRepository(ExternalEntityRecord, "External entity")
    users = UserRepository()
    storage = LocalStorageService(settings.uploads_dir)
    hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
    tokens = JWTTokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )

    rules = DocumentRulesEngine()
    numbering = AssignDocNumberUseCase(documents, prefix=settings.doc_number_prefix)
    attachments = PersistAttachmentsUseCase(storage)

    return Container(
        settings=settings,
        documents=documents,
        departments=departments,
        external_entities=external_entities,
        users=users,
        storage=storage,
        hasher=hasher,
        numbering=numbering,
        register_document=RegisterDocumentUseCase(documents, rules, numbering, attachments),
        update_document=UpdateDocumentUseCase(documents, rules, numbering, attachments),
        delete_document=DeleteDocumentUseCase(documents, attachments),
        add_department=AddCatalogEntryUseCase(departments),
        add_external_entity=AddCatalogEntryUseCase(external_entities),
        authenticate=AuthenticateUserUseCase(users, hasher, tokens),
        change_password=ChangePasswordUseCase(users, hasher, min_length=settings.min_password_length),
    )


def get_container(request: Request) -> Container:
    return request.app.state.container


# auto_error=False: a missing header is answered by the registry's own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> User:
    """Resolves the bearer token to a live user."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")
    return container.authenticate.resolve(credentials.credentials)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise PermissionDeniedError("Administrator role required")
    return user
