# coindesk_hub/infra/settings.py
import os
import sys
import json
from typing import Any, Dict

class SettingsLoader:
    """Singleton для загрузки и управления конфигурацией клиента"""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(SettingsLoader, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._config: Dict[str, Any] = {}
            self._load_configuration()
            self._initialized = True

    def _load_configuration(self) -> None:
        """Загружает конфигурацию с значениями по умолчанию"""
        default_config = {
            'data_dir': 'data',
            'log_dir': 'logs',
            'log_level': 'INFO',
            'log_file': 'coindesk_hub.log',
            'log_silent': False,
            'max_log_size_mb': 10,
            'backup_count': 5,
            'currencies_file': 'currencies.json',
        }

        self._config = default_config
        self._load_from_json_config()
        self._load_from_environment()

    def _load_from_json_config(self) -> None:
        """Загружает конфигурацию из JSON файла если существует"""
        config_files = ['coindesk_hub.json', '../coindesk_hub.json']

        for config_file in config_files:
            if os.path.exists(config_file):
                try:
                    with open(config_file, 'r', encoding='utf-8') as f:
                        json_config = json.load(f)
                    self._config.update(json_config)
                    break
                except (OSError, ValueError) as e:
                    print(f"Warning: Could not load configuration from {config_file}: {e}",
                          file=sys.stderr)

    def _load_from_environment(self) -> None:
        """Переопределяет настройки переменными окружения"""
        env_mapping = {
            'COINDESK_HUB_DATA_DIR': 'data_dir',
            'COINDESK_HUB_LOG_DIR': 'log_dir',
            'COINDESK_HUB_LOG_LEVEL': 'log_level',
            'COINDESK_HUB_LOG_FILE': 'log_file',
            'COINDESK_HUB_LOG_SILENT': 'log_silent',
            'COINDESK_HUB_CURRENCIES_FILE': 'currencies_file',
        }

        for env_var, config_key in env_mapping.items():
            if env_var in os.environ:
                self._config[config_key] = os.environ[env_var]

        silent = self._config.get('log_silent')
        if isinstance(silent, str):
            self._config['log_silent'] = silent.strip().lower() in ('1', 'true', 'yes', 'on')

    def reload(self) -> None:
        """Перечитывает конфигурацию (файл и окружение)"""
        self._load_configuration()

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_data_path(self, filename: str) -> str:
        data_dir = self.get('data_dir', 'data')
        return os.path.join(data_dir, filename)

    def get_currencies_path(self) -> str:
        currencies_file = self.get('currencies_file', 'currencies.json')
        if os.path.isabs(currencies_file):
            return currencies_file
        return self.get_data_path(currencies_file)

    def get_log_path(self) -> str:
        log_file = self.get('log_file', 'coindesk_hub.log')
        if os.path.isabs(log_file):
            return log_file
        return os.path.join(self.get('log_dir', 'logs'), log_file)

# Глобальный экземпляр
settings = SettingsLoader()
