"""
データモデル定義

To-Do API とトークンエンドポイントから取得するデータの構造を定義するデータクラス
"""

import json
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from ..utils.error_handler import DecodeError


def decode_json_object(raw: bytes) -> Dict[str, Any]:
    """
    レスポンスボディを JSON オブジェクトとしてデコード

    Args:
        raw: レスポンスボディ

    Returns:
        デコード済みの辞書

    Raises:
        DecodeError: JSON として不正、またはトップレベルがオブジェクトでない場合

    トップレベルの null は空オブジェクトとして扱う。
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"レスポンスの JSON 解析に失敗しました: {e}", original_error=e)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DecodeError(f"JSON オブジェクトが必要です: {type(data).__name__}")
    return data


def _get_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{key} は文字列である必要があります", field=key)
    return value


def _get_int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # bool は int のサブクラスなので除外
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{key} は整数である必要があります", field=key)
    return value


@dataclass(frozen=True)
class TokenPair:
    """現在のアクセストークンとリフレッシュトークンの組"""
    access_token: str
    refresh_token: str


@dataclass
class TaskRecord:
    """To-Do タスクを表すデータクラス"""
    id: str
    status: str
    subject: str
    extra: Dict[str, Any] = field(default_factory=dict)

    MODELLED_KEYS = ('id', 'status', 'subject')

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'TaskRecord':
        """
        API レスポンスの1要素からタスクを作成

        id / status / subject 以外のフィールドは extra にそのまま保持する。
        null の要素はすべて空のタスクになる。
        """
        if data is None:
            return cls(id="", status="", subject="")
        if not isinstance(data, dict):
            raise DecodeError(f"タスクは JSON オブジェクトである必要があります: {type(data).__name__}",
                              field='value')

        return cls(
            id=_get_str(data, 'id'),
            status=_get_str(data, 'status'),
            subject=_get_str(data, 'subject'),
            extra={k: v for k, v in data.items() if k not in cls.MODELLED_KEYS}
        )

    def format_line(self) -> str:
        """出力用の1行を作成"""
        return f"{self.status} : {self.subject}"


@dataclass
class TasksResult:
    """タスク一覧レスポンス"""
    tasks: List[TaskRecord] = field(default_factory=list)
    odata_context: str = ""
    next_link: Optional[str] = None

    @classmethod
    def from_json(cls, raw: bytes) -> 'TasksResult':
        """
        タスク一覧レスポンスをデコード

        Raises:
            DecodeError: 想定した形式でない場合
        """
        data = decode_json_object(raw)

        value = data.get('value')
        if value is None:
            value = []
        if not isinstance(value, list):
            raise DecodeError("value はリストである必要があります", field='value')

        return cls(
            tasks=[TaskRecord.from_dict(item) for item in value],
            odata_context=_get_str(data, '@odata.context'),
            next_link=_get_str(data, '@odata.nextLink') or None
        )


@dataclass
class RefreshResult:
    """トークンリフレッシュのレスポンス"""
    access_token: str
    refresh_token: str
    token_type: str = ""
    scope: str = ""
    expires_in: int = 0
    ext_expires_in: int = 0

    @classmethod
    def from_json(cls, raw: bytes) -> 'RefreshResult':
        """
        トークンエンドポイントのレスポンスをデコード

        Raises:
            DecodeError: 想定した形式でない場合
        """
        data = decode_json_object(raw)
        return cls(
            access_token=_get_str(data, 'access_token'),
            refresh_token=_get_str(data, 'refresh_token'),
            token_type=_get_str(data, 'token_type'),
            scope=_get_str(data, 'scope'),
            expires_in=_get_int(data, 'expires_in'),
            ext_expires_in=_get_int(data, 'ext_expires_in')
        )

    def token_pair(self) -> TokenPair:
        """新しいトークンの組を返す"""
        return TokenPair(self.access_token, self.refresh_token)
