"""ログ出力の設定。

テキスト形式（既定）か、1行1 JSONオブジェクトの構造化形式を選択できる。
"""

import json
import logging
from datetime import UTC, datetime

TEXT_FORMAT = "%(levelname)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """ログレコードを1行のJSONとして出力する。"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def configure_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """ルートロガーのハンドラを差し替える。"""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))
