import importlib
import logging

import pytest
from pydantic import ValidationError

import shopee_analytics
from shopee_analytics.core.config import Settings, settings
from shopee_analytics.core.errors import AnalyticsError, ErrorCategory, IngestionError
from shopee_analytics.core.logging import (
    PACKAGE_LOGGER,
    StructuredFormatter,
    configure_logging,
    get_logger,
    init_logging,
)
from shopee_analytics.infra.readers import load_orders


class TestSettings:
    def test_defaults(self):
        config = Settings(_env_file=None)

        assert config.ABC_A_THRESHOLD == 80.0
        assert config.ABC_B_THRESHOLD == 95.0
        assert config.TOP_PRODUCTS_LIMIT == 10
        assert config.CSV_ENCODINGS_LIST == ["utf-8-sig", "latin-1"]

    def test_encodings_list_from_comma_separated_string(self):
        config = Settings(_env_file=None, CSV_ENCODINGS=" utf-8 , cp1252 ,")
        assert config.CSV_ENCODINGS_LIST == ["utf-8", "cp1252"]

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("TOP_PRODUCTS_LIMIT", "5")
        assert Settings(_env_file=None).TOP_PRODUCTS_LIMIT == 5

    @pytest.mark.parametrize(
        "overrides",
        [
            {"ABC_A_THRESHOLD": 96.0},
            {"ABC_A_THRESHOLD": 0.0},
            {"ABC_B_THRESHOLD": 101.0},
            {"CSV_DELIMITER": ";;"},
            {"LOG_FORMAT": "json"},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)


class TestStructuredLogging:
    def test_formatter_appends_context(self):
        record = logging.makeLogRecord(
            {"name": "shopee_analytics.decoder", "levelname": "WARNING", "msg": "Linha descartada", "row_number": 3}
        )
        output = StructuredFormatter().format(record)

        assert "WARNING shopee_analytics.decoder: Linha descartada" in output
        assert "row_number=3" in output

    def test_formatter_without_context(self):
        record = logging.makeLogRecord({"name": "x", "levelname": "INFO", "msg": "ok"})
        assert "|" not in StructuredFormatter().format(record)

    def test_logger_passes_context_as_extra(self, caplog):
        with caplog.at_level(logging.INFO, logger="shopee_analytics.tests"):
            get_logger("shopee_analytics.tests").info("Arquivo carregado", orders=7)

        record = caplog.records[-1]
        assert record.getMessage() == "Arquivo carregado"
        assert record.orders == 7


class TestIngestionError:
    def test_categories(self):
        assert IngestionError.unsupported_format().category is ErrorCategory.UNSUPPORTED_FORMAT
        assert IngestionError.empty_or_invalid().category is ErrorCategory.EMPTY_OR_INVALID_DATA
        assert IngestionError.container_read().category is ErrorCategory.CONTAINER_READ_ERROR

    def test_payload_and_details(self):
        error = IngestionError.container_read("JSON inválido.", error="linha 1")

        assert isinstance(error, AnalyticsError)
        assert error.to_dict() == {"error": "container-read-error", "message": "JSON inválido."}
        assert error.details == {"error": "linha 1"}
        assert error.code == "container-read-error"
        assert str(error) == "JSON inválido."


@pytest.fixture
def package_logger():
    """Restaura o logger do pacote depois de cada configuração."""
    target = logging.getLogger(PACKAGE_LOGGER)
    level, handlers = target.level, list(target.handlers)
    yield target
    for handler in target.handlers:
        if handler not in handlers:
            handler.close()
    target.handlers[:] = handlers
    target.setLevel(level)


class TestLoggingSetup:
    def test_configure_replaces_its_own_handlers(self, package_logger):
        foreign = logging.NullHandler()
        package_logger.addHandler(foreign)

        configure_logging(level="DEBUG")
        configure_logging(level="WARNING")

        owned = [h for h in package_logger.handlers if h is not foreign]
        assert len(owned) == 1
        assert isinstance(owned[0].formatter, StructuredFormatter)
        assert foreign in package_logger.handlers
        assert package_logger.level == logging.WARNING

    def test_root_logger_is_untouched(self, package_logger):
        root_handlers = list(logging.getLogger().handlers)
        configure_logging(level="INFO", format_type="simple")
        assert logging.getLogger().handlers == root_handlers

    def test_init_logging_reads_settings(self, package_logger, monkeypatch, tmp_path):
        log_file = tmp_path / "analytics.log"
        monkeypatch.setattr(settings, "LOG_LEVEL", "DEBUG")
        monkeypatch.setattr(settings, "LOG_TO_CONSOLE", False)
        monkeypatch.setattr(settings, "LOG_TO_FILE", True)
        monkeypatch.setattr(settings, "LOG_FILE_PATH", str(log_file))

        init_logging()
        get_logger("shopee_analytics.decoder").warning("Linha descartada", row_number=4)

        assert package_logger.level == logging.DEBUG
        content = log_file.read_text(encoding="utf-8")
        assert "Logging initialized" in content
        assert "row_number=4" in content

    def test_package_import_configures_when_enabled(self, package_logger, monkeypatch):
        monkeypatch.setattr(settings, "LOG_AUTO_CONFIGURE", True)
        monkeypatch.setattr(settings, "LOG_LEVEL", "ERROR")
        importlib.reload(shopee_analytics)

        assert package_logger.level == logging.ERROR
        assert any(isinstance(h.formatter, StructuredFormatter) for h in package_logger.handlers)

    def test_bound_context_is_merged(self, caplog):
        log = get_logger("shopee_analytics.tests").bind(file_name="pedidos.csv")
        with caplog.at_level(logging.INFO, logger="shopee_analytics.tests"):
            log.info("Arquivo carregado", orders=2)

        record = caplog.records[-1]
        assert record.file_name == "pedidos.csv"
        assert record.orders == 2

    def test_error_attaches_exception(self, caplog):
        try:
            raise ValueError("planilha corrompida")
        except ValueError as exc:
            with caplog.at_level(logging.ERROR, logger="shopee_analytics.tests"):
                get_logger("shopee_analytics.tests").error("Falha", exc=exc, step="leitura")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.exc_info[0] is ValueError
        assert record.step == "leitura"

    def test_structural_failure_is_logged_with_file_name(self, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(IngestionError):
                load_orders("", filename="vazio.csv")

        record = caplog.records[-1]
        assert record.getMessage() == "Falha estrutural na ingestão"
        assert record.file_name == "vazio.csv"
        assert record.category == "empty-or-invalid-data"
