from .checklist_repository import ChecklistRepository, SqlAlchemyChecklistRepository

__all__ = ["ChecklistRepository", "SqlAlchemyChecklistRepository"]
