"""
Exceções do pipeline de ingestão.

Somente falhas estruturais (arquivo vazio, sem cabeçalho, contêiner
ilegível, formato desconhecido) chegam ao chamador. Defeitos de campo e de
linha são tratados localmente e apenas registrados em log.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Categorias de falha estrutural expostas à camada de apresentação."""

    UNSUPPORTED_FORMAT = "unsupported-format"
    EMPTY_OR_INVALID_DATA = "empty-or-invalid-data"
    CONTAINER_READ_ERROR = "container-read-error"


class AnalyticsError(RuntimeError):
    """Erro base da biblioteca."""

    def __init__(
        self,
        message: str,
        code: str = "ANALYTICS_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class IngestionError(AnalyticsError):
    """Falha estrutural ao transformar um arquivo em pedidos."""

    def __init__(
        self,
        category: ErrorCategory,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.category = category
        super().__init__(message=message, code=category.value, details=details)

    @classmethod
    def unsupported_format(cls, **details: Any) -> "IngestionError":
        return cls(
            ErrorCategory.UNSUPPORTED_FORMAT,
            "Formato de arquivo não suportado. Use CSV, JSON ou XLSX.",
            details,
        )

    @classmethod
    def empty_or_invalid(cls, message: str = "Arquivo não contém dados válidos.", **details: Any) -> "IngestionError":
        return cls(ErrorCategory.EMPTY_OR_INVALID_DATA, message, details)

    @classmethod
    def container_read(cls, message: str = "Não foi possível ler o arquivo.", **details: Any) -> "IngestionError":
        return cls(ErrorCategory.CONTAINER_READ_ERROR, message, details)

    def to_dict(self) -> Dict[str, Any]:
        """Payload pronto para exibição ao usuário."""
        return {"error": self.category.value, "message": self.message}


__all__ = ["AnalyticsError", "ErrorCategory", "IngestionError"]
