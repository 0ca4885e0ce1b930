"""
Seed data: default catalogs, demo correspondence, bootstrap admin.
"""

import logging
from datetime import date

from cndes.core.entities.document import Document
from cndes.core.entities.user import ADMIN_ROLE, User
from cndes.core.exceptions import DuplicateEntryError
from cndes.core.interfaces.catalog_repository import ICatalogRepository
from cndes.core.interfaces.document_repository import IDocumentRepository
from cndes.core.interfaces.security import IPasswordHasher
from cndes.core.interfaces.user_repository import IUserRepository

logger = logging.getLogger(__name__)

DEPARTMENTS = [
    "Presidencia CNDES",
    "Secretaría General",
    "Gabinete Técnico",
    "Administración y Finanzas",
    "Recursos Humanos",
    "Comunicación y Relaciones Públicas",
    "Informática y Tecnología",
    "Planificación Estratégica",
    "Cooperación Internacional",
    "Archivo y Documentación",
]

EXTERNAL_ENTITIES = [
    "Presidencia de la República",
    "Ministerio de Hacienda",
    "Ministerio de Asuntos Exteriores",
    "Banco Mundial",
    "FMI",
    "PNUD",
    "Embajadas",
    "GE Proyectos",
    "Empresas Privadas",
    "Particulares",
]

# (id, registrationDate, type, docNumber, docDate, origin, destination, summary, observations, status)
DEMO_DOCUMENTS = [
    ("2026-001", "2026-01-15", "Entrada", "MIN-HAC-2026/054", "2026-01-14",
     "Ministerio de Hacienda y Presupuestos", "Secretaría General",
     "Remisión de anteproyecto de presupuesto 2026 para revisión.",
     "Urgente. Reunión programada para el 30/01.", "Pendiente"),
    ("2026-002", "2026-01-18", "Entrada", "OF-PRES-009", "2026-01-17",
     "Presidencia de la República", "Presidente CNDES",
     "Invitación oficial al acto de apertura del año judicial.",
     "", "Completado"),
    ("2026-003", "2026-01-19", "Interno", "INT-2026-001", "2026-01-19",
     "Vicepresidente 1 Bloque Social", "Comisión Técnica Sector Social",
     "Instrucciones para la elaboración del informe trimestral.",
     "Plazo de entrega: 5 días.", "En Proceso"),
    ("2026-004", "2026-01-20", "Salida", "SAL-2026-001", "2026-01-20",
     "Secretaría General", "GEPetrol",
     "Solicitud de informe sobre impacto ambiental en nuevos pozos.",
     "", "Enviado"),
    ("2026-005", "2026-01-21", "Entrada", "GEP-SERV-88", "2026-01-20",
     "GEPetrol Servicios", "Comisión Técnica Sector Económico",
     "Respuesta a la solicitud de auditoría externa.",
     "Adjunta anexos confidenciales.", "Pendiente"),
    ("2026-006", "2026-01-22", "Interno", "INT-2026-002", "2026-01-22",
     "Gabinete del Presidente", "Todos los Departamentos",
     "Circular sobre nuevo horario laboral durante festividades.",
     "", "Completado"),
    ("2026-007", "2026-01-22", "Entrada", "EDU-BEC-2026", "2026-01-21",
     "Ministerio de Educación", "Comisión Técnica Sector Social",
     "Listado de becas asignadas para validación.",
     "Revisar criterios de selección.", "En Proceso"),
    ("2026-008", "2026-01-23", "Salida", "SAL-2026-002", "2026-01-23",
     "Secretaría General", "Ministerio de Interior",
     "Confirmación de asistencia a la conferencia de seguridad.",
     "", "Enviado"),
    ("2026-009", "2026-01-23", "Entrada", "NOT-EXT-991", "2026-01-22",
     "Ministerio de Asuntos Exteriores", "Presidente",
     "Nota verbal sobre visita de delegación de la UA.",
     "Alta prioridad.", "Pendiente"),
    ("2026-010", "2026-01-23", "Interno", "INT-2026-003", "2026-01-23",
     "Comisión Técnica Sector Económico", "Pleno",
     "Propuesta de dictamen sobre la Ley de Inversiones.",
     "Para presentar en la próxima sesión.", "Borrador"),
]


def seed_catalog(repository: ICatalogRepository, names: list[str]) -> int:
    """Adds the names missing from a catalog. Returns how many were added."""
    existing = set(repository.list_names())
    added = 0
    for name in names:
        if name in existing:
            continue
        try:
            repository.add(name)
        except DuplicateEntryError:
            continue
        added += 1
    return added


def load_demo_documents(repository: IDocumentRepository) -> int:
    """Pre-load the demo correspondence into an empty registry."""
    if repository.list_ids():
        logger.info("Registry already has documents, skipping demo load")
        return 0

    for doc_id, reg_date, doc_type, number, doc_date, origin, dest, summary, obs, status in DEMO_DOCUMENTS:
        repository.add(Document(
            id=doc_id,
            registration_date=date.fromisoformat(reg_date),
            type=doc_type,
            doc_number=number,
            doc_date=date.fromisoformat(doc_date),
            origin=origin,
            destination=dest,
            summary=summary,
            observations=obs,
            status=status,
        ))
    logger.info(f"Loaded {len(DEMO_DOCUMENTS)} demo documents")
    return len(DEMO_DOCUMENTS)


def ensure_admin_user(
    users: IUserRepository,
    hasher: IPasswordHasher,
    username: str,
    password: str,
    name: str = "Administrador",
) -> bool:
    """Creates the bootstrap administrator if it does not exist yet."""
    if not password or users.get(username) is not None:
        return False
    try:
        users.add(User(username=username, name=name, role=ADMIN_ROLE, password_hash=hasher.hash(password)))
    except DuplicateEntryError:
        # created by another worker in the meantime
        return False
    return True
