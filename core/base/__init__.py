from core.base.base_service import BaseService, format_context

__all__ = ["BaseService", "format_context"]
