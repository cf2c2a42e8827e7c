"""
To-Do Task Watcher メインエントリーポイント

環境変数から設定とトークンを読み込み、タスク一覧の監視ループを開始する。
"""
import sys
import os
from typing import Optional

from .business.config_manager import ConfigManager
from .business.config_schema import AppConfig
from .business.task_printer import TaskPrinter
from .business.task_watcher import TaskWatcher
from .data.todo_client import TodoClient, TokenRefresher
from .data.token_store import EnvTokenStore, TokenStore
from .utils.logger import initialize_logging, cleanup_old_logs, PerformanceLogger
from .utils.error_handler import ErrorContext, get_user_message


def build_watcher(config: AppConfig, store: Optional[TokenStore] = None) -> TaskWatcher:
    """
    設定からタスク監視オブジェクトを組み立てる

    Args:
        config: アプリケーション設定
        store: トークンストア（None の場合は環境変数）

    Returns:
        TaskWatcher インスタンス
    """
    timeout = (config.poll.connect_timeout, config.poll.read_timeout)
    return TaskWatcher(
        store=store or EnvTokenStore(config.todo.access_token_env, config.todo.refresh_token_env),
        client=TodoClient(tasks_url=config.todo.tasks_url, timeout=timeout),
        refresher=TokenRefresher(
            client_id=config.todo.client_id,
            token_url=config.todo.token_url,
            redirect_uri=config.todo.redirect_uri,
            scope=config.todo.scope,
            timeout=timeout
        ),
        printer=TaskPrinter(),
        interval=config.poll.interval_seconds,
        strict_reauth=config.poll.strict_reauth
    )


def main():
    """メインアプリケーション実行関数"""
    logger = None

    try:
        # トレースバックはここで記録済み。except 節ではメッセージのみ出力する
        with ErrorContext("タスク監視"):
            config = ConfigManager().load_config()

            logger = initialize_logging(
                log_dir=config.logging.log_dir,
                level="DEBUG" if config.logging.debug_mode else config.logging.level,
                debug_mode=config.logging.debug_mode
            )
            logger.info("To-Do Task Watcher を開始しています...")
            logger.info(f"Python バージョン: {sys.version}")
            logger.info(f"実行ディレクトリ: {os.getcwd()}")
            logger.debug(f"設定: {config.to_dict()}")

            with PerformanceLogger("アプリケーション実行"):
                with build_watcher(config) as watcher:
                    watcher.run()

    except KeyboardInterrupt:
        if logger:
            logger.info("ユーザーによりアプリケーションが中断されました")
        sys.exit(0)

    except Exception as error:
        error_message = get_user_message(error)

        if logger:
            logger.critical(f"致命的なエラーによりアプリケーションを終了します: {error_message}")
        else:
            print(f"ログシステム初期化前にエラーが発生しました: {error_message}", file=sys.stderr)

        sys.exit(1)

    finally:
        cleanup_old_logs(days=30)


if __name__ == "__main__":
    main()
