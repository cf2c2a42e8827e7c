"""
設定管理システム - ConfigManager クラス

環境変数から To-Do Task Watcher の設定を読み込み、検証します。
設定ファイルは使用しません。
"""

import os
import logging
from typing import Dict, Mapping, Optional

from .config_schema import (
    AppConfig, TodoConfig, PollConfig, LoggingConfig,
    CLIENT_ID_ENV, ENV_PREFIX
)
from ..utils.error_handler import ConfigurationError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


class ConfigManager:
    """設定管理クラス

    環境変数の読み込み、デフォルト値の補完、設定値のバリデーション機能を提供します。
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """ConfigManager を初期化

        Args:
            environ: 読み込む環境変数。None の場合は os.environ を使用
        """
        self.environ = os.environ if environ is None else environ

    def _get(self, suffix: str, default: str) -> str:
        value = self.environ.get(ENV_PREFIX + suffix)
        if value is None or value.strip() == "":
            return default
        return value.strip()

    def _get_float(self, suffix: str, default: float) -> float:
        raw = self._get(suffix, "")
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError:
            raise ConfigurationError(f"数値である必要があります: {raw!r}", config_key=ENV_PREFIX + suffix)

    def _get_bool(self, suffix: str, default: bool) -> bool:
        raw = self._get(suffix, "").lower()
        if not raw:
            return default
        if raw in TRUE_VALUES:
            return True
        if raw in FALSE_VALUES:
            return False
        raise ConfigurationError(f"真偽値である必要があります: {raw!r}", config_key=ENV_PREFIX + suffix)

    def load_config(self) -> AppConfig:
        """環境変数から設定を読み込み

        Returns:
            検証済みの設定オブジェクト

        Raises:
            ConfigurationError: 設定が無効な場合
        """
        defaults = AppConfig()

        config = AppConfig(
            todo=TodoConfig(
                client_id=self.environ.get(CLIENT_ID_ENV, ""),
                tasks_url=self._get("TASKS_URL", defaults.todo.tasks_url),
                token_url=self._get("TOKEN_URL", defaults.todo.token_url),
                redirect_uri=self._get("REDIRECT_URI", defaults.todo.redirect_uri)
            ),
            poll=PollConfig(
                interval_seconds=self._get_float("INTERVAL", defaults.poll.interval_seconds),
                connect_timeout=self._get_float("CONNECT_TIMEOUT", defaults.poll.connect_timeout),
                read_timeout=self._get_float("READ_TIMEOUT", defaults.poll.read_timeout),
                strict_reauth=self._get_bool("STRICT_REAUTH", defaults.poll.strict_reauth)
            ),
            logging=LoggingConfig(
                level=self._get("LOG_LEVEL", defaults.logging.level).upper(),
                debug_mode=self._get_bool("DEBUG", defaults.logging.debug_mode),
                log_dir=self._get("LOG_DIR", defaults.logging.log_dir)
            )
        )

        self.validate_config(config)

        if not config.todo.client_id:
            # 空でも動作は継続する（リフレッシュ時にトークンエンドポイントが拒否する）
            logger.warning(f"{CLIENT_ID_ENV} is not set; token refresh will send an empty client_id")

        logger.debug("Config loaded from environment")
        return config

    def validate_config(self, config: AppConfig) -> bool:
        """設定の妥当性を検証

        Args:
            config: 検証する設定

        Returns:
            設定が有効な場合 True

        Raises:
            ConfigurationError: 設定が無効な場合
        """
        urls: Dict[str, str] = {
            "TASKS_URL": config.todo.tasks_url,
            "TOKEN_URL": config.todo.token_url,
            "REDIRECT_URI": config.todo.redirect_uri
        }
        for suffix, url in urls.items():
            if not url.startswith(("http://", "https://")):
                raise ConfigurationError(f"URL の形式が無効です: {url!r}", config_key=ENV_PREFIX + suffix)

        positives = {
            "INTERVAL": config.poll.interval_seconds,
            "CONNECT_TIMEOUT": config.poll.connect_timeout,
            "READ_TIMEOUT": config.poll.read_timeout
        }
        for suffix, value in positives.items():
            if value <= 0:
                raise ConfigurationError(f"正の数である必要があります: {value}", config_key=ENV_PREFIX + suffix)

        if config.logging.level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"ログレベルは {', '.join(VALID_LOG_LEVELS)} のいずれかである必要があります: {config.logging.level}",
                config_key=ENV_PREFIX + "LOG_LEVEL"
            )

        return True
