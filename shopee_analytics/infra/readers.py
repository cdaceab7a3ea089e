"""
Leitores de arquivo: CSV, planilha (XLSX/XLS) e JSON.

Cada leitor entrega a tabela bruta (cabeçalho + linhas) ou a lista de
objetos JSON; ``load_orders`` escolhe o leitor pelo tipo do arquivo e
decodifica os pedidos. Apenas falhas estruturais levantam
``IngestionError``.
"""

from __future__ import annotations

import csv
import io
import json
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Union

import pandas as pd

from shopee_analytics.core.config import settings
from shopee_analytics.core.errors import IngestionError
from shopee_analytics.core.logging import StructuredLogger, get_logger
from shopee_analytics.domain.models import Order
from shopee_analytics.services.decoder import RecordDecoder

Content = Union[str, bytes]
Table = Tuple[List[str], List[List[Any]]]

logger = get_logger(__name__)


class FileFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    SPREADSHEET = "spreadsheet"


_MIME_TYPES = {
    "application/json": FileFormat.JSON,
    "text/csv": FileFormat.CSV,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": FileFormat.SPREADSHEET,
    "application/vnd.ms-excel": FileFormat.SPREADSHEET,
}

_EXTENSIONS = {
    ".csv": FileFormat.CSV,
    ".json": FileFormat.JSON,
    ".xlsx": FileFormat.SPREADSHEET,
    ".xls": FileFormat.SPREADSHEET,
}


def detect_format(filename: Optional[str] = None, content_type: Optional[str] = None) -> FileFormat:
    """Tipo MIME primeiro, depois a extensão do arquivo."""
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime in _MIME_TYPES:
            return _MIME_TYPES[mime]
    if filename:
        lowered = filename.strip().lower()
        for extension, file_format in _EXTENSIONS.items():
            if lowered.endswith(extension):
                return file_format
    raise IngestionError.unsupported_format(file_name=filename, content_type=content_type)


def _decode_text(content: Content, encodings: Sequence[str], log: StructuredLogger) -> str:
    if isinstance(content, str):
        return content
    for position, encoding in enumerate(encodings):
        try:
            text = content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
        if position > 0:
            log.warning("Arquivo decodificado com codificação alternativa", encoding=encoding)
        return text
    raise IngestionError.container_read(
        "Não foi possível decodificar o texto do arquivo.",
        encodings=list(encodings),
    )


def _clean_cell(value: Any) -> Any:
    return None if pd.isna(value) else value


def _frame_to_table(frame: pd.DataFrame) -> Table:
    frame = frame.astype(object)
    records = [[_clean_cell(v) for v in row] for row in frame.itertuples(index=False, name=None)]
    if not records:
        raise IngestionError.empty_or_invalid()

    headers = ["" if v is None else str(v).strip().replace('"', "") for v in records[0]]
    if not any(headers):
        raise IngestionError.empty_or_invalid("Arquivo sem linha de cabeçalho.")
    return headers, records[1:]


def read_csv_table(
    content: Content,
    delimiter: Optional[str] = None,
    encodings: Optional[Sequence[str]] = None,
    log: StructuredLogger | None = None,
) -> Table:
    """
    Lê um CSV com aspas no padrão RFC 4180. Todas as células chegam como
    texto; linhas maiores que o cabeçalho são truncadas.
    """
    log = log or logger
    delimiter = delimiter or settings.CSV_DELIMITER
    text = _decode_text(content, encodings or settings.CSV_ENCODINGS_LIST, log)
    if not text.strip():
        raise IngestionError.empty_or_invalid()

    try:
        header_frame = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            header=None,
            nrows=1,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
        width = header_frame.shape[1]

        def _truncate(bad_line: List[str]) -> List[str]:
            log.warning("Linha com colunas excedentes truncada", expected=width, found=len(bad_line))
            return bad_line[:width]

        frame = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            header=None,
            names=list(range(width)),
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=_truncate,
        )
    except pd.errors.EmptyDataError as exc:
        raise IngestionError.empty_or_invalid() from exc
    except (pd.errors.ParserError, csv.Error) as exc:
        raise IngestionError.container_read("Não foi possível ler o CSV.", error=str(exc)) from exc

    return _frame_to_table(frame)


def read_spreadsheet_table(content: bytes) -> Table:
    """Lê apenas a primeira aba, preservando números e datas nativos."""
    if not content:
        raise IngestionError.empty_or_invalid()
    try:
        frame = pd.read_excel(io.BytesIO(content), sheet_name=0, header=None, dtype=object)
    except Exception as exc:
        raise IngestionError.container_read(
            "Não foi possível ler a planilha.",
            error=str(exc),
        ) from exc
    return _frame_to_table(frame)


def read_json_records(content: Content) -> List[Any]:
    """O JSON precisa ser um array de objetos."""
    text = _decode_text(content, ["utf-8-sig"], logger)
    if not text.strip():
        raise IngestionError.empty_or_invalid()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise IngestionError.container_read("JSON inválido.", error=str(exc)) from exc
    if not isinstance(data, list) or not data:
        raise IngestionError.empty_or_invalid()
    return data


def load_orders(
    content: Content,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
    decoder: RecordDecoder | None = None,
    log: StructuredLogger | None = None,
) -> list[Order]:
    """
    Converte o conteúdo de um arquivo em pedidos.

    Raises:
        IngestionError: formato não suportado, arquivo vazio/sem dados ou
            contêiner ilegível
    """
    log = (log or logger).bind(file_name=filename)
    decoder = decoder or RecordDecoder(logger=log)
    try:
        orders, file_format = _load(content, filename, content_type, decoder, log)
    except IngestionError as exc:
        log.error(
            "Falha estrutural na ingestão",
            exc=exc.__cause__,
            category=exc.category.value,
            reason=exc.message,
        )
        raise

    log.info("Arquivo carregado", file_format=file_format.value, orders=len(orders))
    return orders


def _load(
    content: Content,
    filename: Optional[str],
    content_type: Optional[str],
    decoder: RecordDecoder,
    log: StructuredLogger,
) -> Tuple[list[Order], FileFormat]:
    file_format = detect_format(filename, content_type)

    size = len(content.encode("utf-8") if isinstance(content, str) else content)
    if size > settings.MAX_UPLOAD_BYTES:
        raise IngestionError.empty_or_invalid(
            "Arquivo excede o tamanho máximo permitido.",
            size=size,
            max_size=settings.MAX_UPLOAD_BYTES,
        )

    if file_format is FileFormat.JSON:
        orders = decoder.decode_records(read_json_records(content))
    elif file_format is FileFormat.CSV:
        headers, rows = read_csv_table(content, log=log)
        orders = decoder.decode_rows(headers, rows)
    else:
        if isinstance(content, str):
            raise IngestionError.container_read("Planilha deve ser enviada como bytes.")
        headers, rows = read_spreadsheet_table(content)
        orders = decoder.decode_rows(headers, rows)

    if not orders:
        raise IngestionError.empty_or_invalid()
    return orders, file_format


__all__ = [
    "FileFormat",
    "detect_format",
    "load_orders",
    "read_csv_table",
    "read_json_records",
    "read_spreadsheet_table",
]
