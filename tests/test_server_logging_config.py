import logging

from server.api import logging_config
from server.api.settings import Settings


def _settings(level: str = "INFO") -> Settings:
    return Settings(
        log_level=level,
        cors_origins_raw="*",
        cors_allow_credentials=False,
        gzip_min_size=0,
        api_host="127.0.0.1",
        api_port=8000,
        api_reload=False,
    )


def _remove_our_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if getattr(handler, logging_config._FILE_HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()


def test_configure_logging_without_file():
    root = logging.getLogger()
    _remove_our_handlers(root)

    logger = logging_config.configure_logging(_settings(), file_path=None)

    assert logger.name == logging_config.API_LOGGER_NAME
    assert logger.level == logging.INFO
    assert logging_config._has_our_file_handler(root) is False


def test_configure_logging_adds_file_handler_once(tmp_path):
    root = logging.getLogger()
    _remove_our_handlers(root)
    target = tmp_path / "logs" / "api.log"

    logger = logging_config.configure_logging(_settings(level="DEBUG"), file_path=target)
    logging_config.configure_logging(_settings(level="WARNING"), file_path=target)

    ours = [h for h in root.handlers if getattr(h, logging_config._FILE_HANDLER_TAG, False)]
    assert logger.level == logging.WARNING
    assert len(ours) == 1
    assert ours[0].level == logging.WARNING
    assert target.parent.is_dir()

    _remove_our_handlers(root)
