import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from .infra.settings import settings

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

def setup_logging(level: str = None) -> logging.Logger:
    """Настраивает систему логирования пакета"""
    level_name = str(level or settings.get('log_level', 'INFO')).upper()
    if level_name == 'WARN':
        level_name = 'WARNING'
    if level_name not in VALID_LOG_LEVELS:
        raise ValueError(f"Log level must be one of {', '.join(VALID_LOG_LEVELS)}, got {level_name}")

    package_logger = logging.getLogger('coindesk_hub')
    package_logger.setLevel(getattr(logging, level_name))

    # Повторный вызов не должен дублировать handlers
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if settings.get('log_silent', False):
        package_logger.addHandler(logging.NullHandler())
        package_logger.propagate = False
        return package_logger

    formatter = logging.Formatter(
        '%(levelname)s %(asctime)s %(name)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )

    # Файловый handler с ротацией
    log_file = settings.get_log_path()
    try:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=int(settings.get('max_log_size_mb', 10)) * 1024 * 1024,
            backupCount=int(settings.get('backup_count', 5)),
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)
    except OSError as e:
        print(f"Warning: Could not open log file {log_file}: {e}", file=sys.stderr)

    # Консольный handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)
    package_logger.propagate = False

    # Логгер для действий клиента
    logging.getLogger('coindesk_hub.actions').setLevel(getattr(logging, level_name))
    return package_logger
