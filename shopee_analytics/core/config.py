from functools import lru_cache
from typing import List, Optional
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Logging (LOG_AUTO_CONFIGURE instala os handlers ao importar o pacote)
    LOG_AUTO_CONFIGURE: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "structured"
    LOG_TO_CONSOLE: bool = True
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: Optional[str] = None

    # Rankings
    TOP_PRODUCTS_LIMIT: int = 10
    TOP_VARIATIONS_LIMIT: int = 10
    TOP_STATES_LIMIT: int = 10
    TOP_DAYS_LIMIT: int = 5

    # Curva ABC (percentual acumulado, limites inclusivos)
    ABC_A_THRESHOLD: float = 80.0
    ABC_B_THRESHOLD: float = 95.0

    # Leitura de arquivos (aceita string separada por vírgulas no .env)
    CSV_DELIMITER: str = ","
    CSV_ENCODINGS: str = "utf-8-sig,latin-1"
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024

    @field_validator("LOG_FORMAT")
    @classmethod
    def _log_format_known(cls, v: str) -> str:
        if v not in ("structured", "simple"):
            raise ValueError("LOG_FORMAT deve ser 'structured' ou 'simple'.")
        return v

    @field_validator("CSV_DELIMITER")
    @classmethod
    def _single_char_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("CSV_DELIMITER deve ter exatamente 1 caractere.")
        return v

    @model_validator(mode="after")
    def _abc_thresholds_ordered(self) -> "Settings":
        if not 0 < self.ABC_A_THRESHOLD <= self.ABC_B_THRESHOLD <= 100:
            raise ValueError("Limites ABC devem satisfazer 0 < A <= B <= 100.")
        return self

    @property
    def CSV_ENCODINGS_LIST(self) -> List[str]:
        v = self.CSV_ENCODINGS
        if not v:
            return ["utf-8"]
        return [s.strip() for s in v.split(",") if s.strip()]

    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignora chaves extras no .env
    )

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
