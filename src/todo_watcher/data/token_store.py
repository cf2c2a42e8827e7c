"""
トークンストア

現在のアクセストークン・リフレッシュトークンの組を読み書きする。
保存先は差し替え可能で、既定ではプロセスの環境変数を使用する（プロセス終了で失われる）。
"""

import logging
import os
from typing import Optional, Protocol

from .models import TokenPair

logger = logging.getLogger(__name__)

ACCESS_TOKEN_ENV = "MS_TO-DO_ACCESS_TOKEN"
REFRESH_TOKEN_ENV = "MS_TO-DO_REFRESH_TOKEN"


class TokenStore(Protocol):
    """トークンの組を保持するストアのインターフェース"""

    def read(self) -> TokenPair:
        """現在のトークンの組を返す"""

    def write(self, access_token: str, refresh_token: str) -> None:
        """トークンの組を無条件に上書きする"""


class EnvTokenStore:
    """環境変数をバックエンドとするトークンストア"""

    def __init__(self, access_env: str = ACCESS_TOKEN_ENV, refresh_env: str = REFRESH_TOKEN_ENV):
        self.access_env = access_env
        self.refresh_env = refresh_env

    def read(self) -> TokenPair:
        return TokenPair(
            access_token=os.environ.get(self.access_env, ""),
            refresh_token=os.environ.get(self.refresh_env, "")
        )

    def write(self, access_token: str, refresh_token: str) -> None:
        os.environ[self.access_env] = access_token
        os.environ[self.refresh_env] = refresh_token
        logger.debug(f"トークンを環境変数に保存しました: {self.access_env}, {self.refresh_env} "
                     f"(アクセストークン長: {len(access_token)})")


class MemoryTokenStore:
    """プロセス内メモリに保持するトークンストア"""

    def __init__(self, initial: Optional[TokenPair] = None):
        self._tokens = initial or TokenPair("", "")

    def read(self) -> TokenPair:
        return self._tokens

    def write(self, access_token: str, refresh_token: str) -> None:
        self._tokens = TokenPair(access_token, refresh_token)
