"""profilekitのカスタム例外クラス。"""


class ProfileKitError(Exception):
    """profilekitの基底例外クラス。"""


class LoadError(ProfileKitError):
    """プロファイルのルートディレクトリを読み込めない場合の例外。"""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot load profile from {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseError(ProfileKitError):
    """メタデータファイルが不正な形式の場合の例外。"""

    def __init__(self, source: str, content: str, reason: str) -> None:
        super().__init__(f"Failed to parse {source}: {reason}: {content!r}")
        self.source = source
        self.content = content
        self.reason = reason


class ConfigError(ProfileKitError):
    """呼び出し側から渡された設定が不正な場合の例外。"""

    def __init__(self, source: str, raw: str, reason: str) -> None:
        super().__init__(f"Invalid configuration in {source}: {reason}: {raw!r}")
        self.source = source
        self.raw = raw
        self.reason = reason


class ArchiveExistsError(ProfileKitError):
    """アーカイブ出力先が既に存在する場合の例外。"""

    def __init__(self, path: str) -> None:
        super().__init__(f"Archive already exists: {path}. Use overwrite to replace it.")
        self.path = path


class InvalidTargetError(ProfileKitError):
    """ターゲットURIを解釈できない場合の例外。"""

    def __init__(self, uri: str, reason: str) -> None:
        super().__init__(f"Invalid target {uri!r}: {reason}")
        self.uri = uri
        self.reason = reason
