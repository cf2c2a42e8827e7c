"""
ログ設定とログ管理機能

標準出力はタスク一覧の出力専用のため、コンソールログはすべて標準エラー出力に送る。
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from datetime import datetime, timedelta
from typing import Optional


DEFAULT_LOG_DIR = Path.home() / '.todo_watcher' / 'logs'

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_FILE_SIZE_MB = 10
BACKUP_COUNT = 5


def _size_rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    """サイズでローテーションするファイルハンドラーを作成（デバッグログ・エラーログ用）"""
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_FILE_SIZE_MB * 1024 * 1024,
        backupCount=BACKUP_COUNT,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


class LoggerConfig:
    """ログ設定管理クラス"""

    def __init__(self, log_dir: Optional[str] = None, debug_mode: bool = False):
        """
        ログ設定を初期化

        Args:
            log_dir: ログファイル保存ディレクトリ（Noneの場合はデフォルト使用）
            debug_mode: デバッグモードの有効/無効
        """
        self.log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
        self.log_dir.mkdir(parents=True, exist_ok=True)

        date_str = datetime.now().strftime('%Y%m%d')
        self.log_file = self.log_dir / f"todo_watcher_{date_str}.log"
        self.debug_log_file = self.log_dir / f"todo_watcher_debug_{date_str}.log"
        self.error_log_file = self.log_dir / f"todo_watcher_error_{date_str}.log"

        self.debug_mode = debug_mode

    def setup_logging(self, level: str = "INFO") -> logging.Logger:
        """
        ログ設定をセットアップ

        Args:
            level: ログレベル（DEBUG, INFO, WARNING, ERROR, CRITICAL）

        Returns:
            設定済みのロガーインスタンス
        """
        log_level = getattr(logging, level.upper(), logging.INFO)
        console_level = logging.DEBUG if self.debug_mode else log_level

        # アプリケーション専用ロガーを取得
        logger = logging.getLogger('todo_watcher')
        logger.setLevel(logging.DEBUG)  # 最低レベルに設定し、ハンドラーでフィルタリング

        # 既存のハンドラーをクリア
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        detailed_formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        simple_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        # メインログファイルハンドラー（日次ローテーション）
        main_file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=self.log_file,
            when='midnight',
            interval=1,
            backupCount=30,
            encoding='utf-8'
        )
        main_file_handler.setLevel(log_level)
        main_file_handler.setFormatter(detailed_formatter)
        logger.addHandler(main_file_handler)

        if self.debug_mode or log_level <= logging.DEBUG:
            logger.addHandler(_size_rotating_handler(self.debug_log_file, logging.DEBUG, detailed_formatter))
        logger.addHandler(_size_rotating_handler(self.error_log_file, logging.ERROR, detailed_formatter))

        # コンソールハンドラー（標準エラー出力）
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(simple_formatter)
        logger.addHandler(console_handler)

        logger.info("ログシステムが初期化されました")
        logger.info(f"ログレベル: {level}")
        logger.info(f"メインログファイル: {self.log_file}")
        logger.info(f"エラーログファイル: {self.error_log_file}")

        if self.debug_mode:
            logger.info(f"デバッグログファイル: {self.debug_log_file}")
            logger.debug("デバッグモードが有効です")

        return logger

    def cleanup_old_logs(self, days: int = 30):
        """古いログファイルをクリーンアップ"""
        cutoff = (datetime.now() - timedelta(days=days)).timestamp()
        logger = logging.getLogger('todo_watcher')

        for log_file in self.log_dir.glob("*.log*"):
            try:
                if log_file.stat().st_mtime < cutoff:
                    log_file.unlink()
                    logger.debug(f"古いログファイルを削除: {log_file}")
            except OSError as e:
                logger.warning(f"ログファイルの削除に失敗: {log_file} - {e}")


# グローバルログ設定インスタンス
_logger_config = None


def initialize_logging(log_dir: Optional[str] = None, level: str = "INFO",
                       debug_mode: bool = False) -> logging.Logger:
    """
    アプリケーション全体のログ設定を初期化

    Args:
        log_dir: ログディレクトリ
        level: ログレベル
        debug_mode: デバッグモードの有効/無効

    Returns:
        メインロガー
    """
    global _logger_config
    _logger_config = LoggerConfig(log_dir, debug_mode)
    return _logger_config.setup_logging(level)


def cleanup_old_logs(days: int = 30):
    """
    古いログファイルをクリーンアップ

    Args:
        days: 保持する日数
    """
    if _logger_config:
        _logger_config.cleanup_old_logs(days)


class PerformanceLogger:
    """パフォーマンス測定用クラス"""

    def __init__(self, operation_name: str, logger_name: str = 'todo_watcher.performance'):
        self.operation_name = operation_name
        self.logger = logging.getLogger(logger_name)
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.debug(f"開始: {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = datetime.now()
        duration = (self.end_time - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(f"完了: {self.operation_name} - 実行時間: {duration:.3f}秒")
        else:
            self.logger.error(f"エラー終了: {self.operation_name} - 実行時間: {duration:.3f}秒 - エラー: {exc_val}")

    def log_checkpoint(self, checkpoint_name: str):
        """チェックポイントをログに記録"""
        if self.start_time:
            elapsed = (datetime.now() - self.start_time).total_seconds()
            self.logger.debug(f"チェックポイント: {self.operation_name} - {checkpoint_name} - 経過時間: {elapsed:.3f}秒")


def log_api_request(method: str, url: str, status_code: int, duration: float):
    """API リクエスト情報をログに記録"""
    logging.getLogger("todo_watcher.api").info(f"API: {method} {url} - {status_code} - {duration:.3f}s")
