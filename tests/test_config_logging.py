"""
Tests for Configuration, Logging and Error Types
================================================
"""

import json
import logging

import pytest

from config_logging import (
    AppConfig, JsonFormatter, ProcessingError, StructuredLogger, TextCompareError,
    ValidationError, get_config, handle_errors, reset_config
)


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self, config):
        assert config.host == "127.0.0.1"
        assert config.port == 5060
        assert config.diff_timeout == 0.0
        assert config.sql_auto_detect is True
        assert config.default_mode == 'line'
        assert config.validate() == (True, [])

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('TC_PORT', '8080')
        monkeypatch.setenv('TC_DEFAULT_MODE', 'SQL')
        monkeypatch.setenv('TC_SQL_AUTO_DETECT', 'false')
        monkeypatch.setenv('TC_WORD_CLEANUP', 'Efficiency')
        monkeypatch.setenv('TC_DIFF_EDIT_COST', '6')
        monkeypatch.setenv('TC_LOG_TO_CONSOLE', 'false')
        config = AppConfig.from_env()
        assert config.port == 8080
        assert config.default_mode == 'sql'
        assert config.sql_auto_detect is False
        assert config.word_cleanup == 'efficiency'
        assert config.diff_edit_cost == 6

    def test_production_forces_debug_off(self, monkeypatch):
        monkeypatch.setenv('TC_ENV', 'production')
        assert AppConfig(debug=True, log_to_console=False).debug is False

    def test_log_dir_created_only_for_file_logging(self, tmp_path):
        AppConfig(log_dir=tmp_path / 'quiet', log_to_console=False)
        assert not (tmp_path / 'quiet').exists()
        AppConfig(log_dir=tmp_path / 'logs', log_to_file=True, log_to_console=False)
        assert (tmp_path / 'logs').is_dir()

    def test_validate_reports_every_problem(self):
        config = AppConfig(default_mode='paragraph', diff_timeout=-1, log_format='xml',
                           log_level='chatty', word_cleanup='aggressive', log_to_console=False)
        is_valid, errors = config.validate()
        assert not is_valid
        assert len(errors) == 5
        assert any('default_mode' in e for e in errors)
        assert any('word_cleanup' in e for e in errors)

    def test_global_config_cached_until_reset(self, monkeypatch):
        reset_config()
        first = get_config()
        assert get_config() is first
        monkeypatch.setenv('TC_PORT', '9000')
        reset_config()
        assert get_config().port == 9000


class TestErrors:
    """Tests for the exception hierarchy."""

    def test_validation_error(self):
        error = ValidationError("bad mode", field='mode')
        assert isinstance(error, TextCompareError)
        assert error.status_code == 400
        assert error.to_dict() == {
            'success': False,
            'error': {'code': 'VALIDATION_ERROR', 'message': 'bad mode', 'details': {'field': 'mode'}},
        }

    def test_processing_error(self):
        error = ProcessingError("failed", stage='align')
        assert error.status_code == 500
        assert error.details == {'stage': 'align'}


class TestHandleErrors:
    """Tests for the handle_errors decorator."""

    def test_passes_results_through(self):
        @handle_errors()
        def ok():
            return 42
        assert ok() == 42

    def test_custom_errors_re_raised(self):
        @handle_errors()
        def invalid():
            raise ValidationError("nope")
        with pytest.raises(ValidationError):
            invalid()

    def test_unexpected_errors_wrapped(self):
        @handle_errors()
        def broken():
            raise KeyError('x')
        with pytest.raises(ProcessingError) as exc_info:
            broken()
        assert exc_info.value.details['stage'] == 'broken'
        assert isinstance(exc_info.value.__cause__, KeyError)


class TestStructuredLogger:
    """Tests for StructuredLogger and JsonFormatter."""

    def test_correlation_id(self):
        correlation_id = StructuredLogger.new_correlation_id()
        assert StructuredLogger.get_correlation_id() == correlation_id
        StructuredLogger.set_correlation_id('fixed-id')
        assert StructuredLogger.get_correlation_id() == 'fixed-id'

    def test_json_record(self, config, caplog):
        config.log_level = 'DEBUG'
        logger = StructuredLogger('tc.test.json', config)
        logger.logger.propagate = True
        with caplog.at_level(logging.INFO, logger='tc.test.json'):
            logger.info("compared", similarity=87)
        record = json.loads(caplog.records[-1].getMessage())
        assert record['message'] == 'compared'
        assert record['level'] == 'INFO'
        assert record['similarity'] == 87
        assert 'correlation_id' in record

    def test_log_operation_re_raises(self, config, caplog):
        logger = StructuredLogger('tc.test.operation', config)
        logger.logger.propagate = True
        with caplog.at_level(logging.INFO, logger='tc.test.operation'):
            with pytest.raises(RuntimeError):
                with logger.log_operation('compare'):
                    raise RuntimeError("boom")
        assert 'compare failed: boom' in caplog.records[-1].getMessage()

    def test_formatter_passes_json_through(self):
        record = logging.LogRecord('x', logging.INFO, __file__, 1, '{"a": 1}', None, None)
        assert JsonFormatter().format(record) == '{"a": 1}'

    def test_formatter_wraps_plain_messages(self):
        record = logging.LogRecord('x', logging.WARNING, __file__, 1, 'plain %s', ('text',), None)
        data = json.loads(JsonFormatter().format(record))
        assert data['message'] == 'plain text'
        assert data['level'] == 'WARNING'
