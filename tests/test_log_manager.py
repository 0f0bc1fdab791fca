"""测试日志管理器"""

import logging
import logging.handlers

import pytest

from modelsfree.utils.log_manager import (
    LogLevel, LogManager, configure_logging, get_logger, log_manager
)


class TestLogManager:
    """测试LogManager类"""

    def test_singleton(self):
        assert LogManager() is log_manager
        assert LogManager() is LogManager()

    def test_logger_namespace(self):
        """测试记录器名称加上命名空间前缀"""
        logger = get_logger('probe.openai')
        assert logger.name == 'modelsfree.probe.openai'
        assert get_logger('modelsfree.probe.openai') is logger
        assert logger.propagate is False

    def test_same_logger_returned(self):
        assert get_logger('monitor') is get_logger('monitor')

    def test_configure_level(self):
        configure_logging({'log_level': 'debug'})
        logger = get_logger('cli')
        assert logger.level == logging.DEBUG
        assert log_manager.get_log_stats()['log_level'] == 'DEBUG'

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="无效的日志级别"):
            configure_logging({'log_level': 'LOUD'})

    def test_configure_rebuilds_existing_handlers(self):
        logger = get_logger('rebuild')
        configure_logging({'log_level': 'ERROR'})
        assert logger.level == logging.ERROR
        assert all(h.level == logging.ERROR for h in logger.handlers)

    def test_root_logger_receives_module_logs(self):
        """测试 logging.getLogger(__name__) 的日志传播到命名空间根记录器"""
        configure_logging({'log_level': 'INFO'})
        root = logging.getLogger('modelsfree')
        assert root.handlers

        module_logger = logging.getLogger('modelsfree.services.monitor_loop')
        assert module_logger.propagate

    def test_file_logging(self, tmp_path):
        """测试文件输出"""
        log_file = tmp_path / 'logs' / 'modelsfree.log'
        configure_logging({'log_level': 'INFO', 'log_file': str(log_file)})

        logger = get_logger('file_test')
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)

        logger.info("探测完成")
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding='utf-8')
        assert '探测完成' in content
        assert 'modelsfree.file_test' in content

        stats = log_manager.get_log_stats()
        assert stats['file_logging_enabled'] is True
        assert stats['current_log_size'] > 0

    def test_console_disabled(self):
        configure_logging({'enable_console': False})
        logger = get_logger('quiet')
        assert not any(type(h) is logging.StreamHandler for h in logger.handlers)

    def test_set_level(self):
        logger = get_logger('level_test')
        log_manager.set_level(LogLevel.WARNING)
        assert logger.level == logging.WARNING
        assert log_manager.get_log_stats()['log_level'] == 'WARNING'

    def test_cleanup(self):
        logger = get_logger('cleanup_test')
        log_manager.cleanup()

        assert logger.handlers == []
        assert log_manager.get_log_stats()['loggers_count'] == 0
