import logging

from usim import setup_logging


def test_setup_logging_configures_package_logger(tmp_path):
    log_file = tmp_path / 'usim.log'
    logger = setup_logging(logging.DEBUG, str(log_file))
    assert logger.name == 'usim'
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    logging.getLogger('usim.core.aggregate').debug("hello from a child logger")
    for handler in logger.handlers:
        handler.flush()
    assert "hello from a child logger" in log_file.read_text(encoding='utf-8')


def test_setup_logging_is_idempotent():
    setup_logging()
    logger = setup_logging(logging.WARNING)
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
