"""レガシー形式（metadata.rb）のサンドボックス化されたインタプリタ。

metadata.rb はRubyスクリプトだが、ここではホスト言語のコードとして実行せず、
``name 'foo'`` のような宣言文のみを受け付けるビルダーとして解釈する。
許可されたディレクティブ以外の文はすべてParseErrorとする。
"""

import re
from typing import Any

from profilekit.models.errors import ParseError
from profilekit.models.profile import ProfileMetadata

LEGACY_METADATA_FILE = "metadata.rb"

# 入力サイズの上限（バイト）
MAX_SOURCE_BYTES = 64 * 1024

# 値を1つだけ受け取るディレクティブ（最後の宣言が有効）
SCALAR_DIRECTIVES: frozenset[str] = frozenset(
    {
        "name",
        "version",
        "title",
        "summary",
        "maintainer",
        "copyright",
        "copyright_email",
        "license",
    }
)

# 呼び出しごとに1要素を追加するディレクティブ
LIST_DIRECTIVES: frozenset[str] = frozenset({"supports", "depends"})

_STATEMENT_RE = re.compile(r"^(?P<directive>[A-Za-z_][A-Za-z0-9_]*)(?P<rest>.*)$")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)*")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_\-]*")

_DOUBLE_QUOTE_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\", "#": "#"}

Token = tuple[str, str]


def _tokenize(text: str, line: str) -> list[Token]:
    """引数部分をトークン列に分解する。

    トークン種別は ``str`` / ``num`` / ``sym`` / ``label`` / ``=>`` / ``,`` / ``(`` / ``)``。
    """
    tokens: list[Token] = []
    pos = 0
    length = len(text)
    while pos < length:
        ch = text[pos]
        if ch.isspace():
            pos += 1
        elif ch == "#":
            break
        elif ch in "'\"":
            value, pos = _read_string(text, pos, line)
            # 'key': 'value' 形式のラベル
            if pos < length and text[pos] == ":" and text[pos + 1 : pos + 2] != ":":
                tokens.append(("label", value))
                pos += 1
            else:
                tokens.append(("str", value))
        elif text.startswith("=>", pos):
            tokens.append(("=>", "=>"))
            pos += 2
        elif ch in ",()":
            tokens.append((ch, ch))
            pos += 1
        elif ch == ":":
            match = _IDENT_RE.match(text, pos + 1)
            if match is None:
                raise ParseError(LEGACY_METADATA_FILE, line, "invalid symbol")
            tokens.append(("sym", match.group()))
            pos = match.end()
        else:
            number = _NUMBER_RE.match(text, pos)
            if number is not None:
                tokens.append(("num", number.group()))
                pos = number.end()
                continue
            ident = _IDENT_RE.match(text, pos)
            if ident is not None and text[ident.end() : ident.end() + 1] == ":":
                tokens.append(("label", ident.group()))
                pos = ident.end() + 1
                continue
            raise ParseError(LEGACY_METADATA_FILE, line, f"unexpected character {ch!r}")
    return tokens


def _read_string(text: str, start: int, line: str) -> tuple[str, int]:
    """引用符で囲まれた文字列リテラルを読み取る。式展開は受け付けない。"""
    quote = text[start]
    pos = start + 1
    chars: list[str] = []
    while pos < len(text):
        ch = text[pos]
        if ch == "\\" and pos + 1 < len(text):
            nxt = text[pos + 1]
            if quote == '"':
                chars.append(_DOUBLE_QUOTE_ESCAPES.get(nxt, "\\" + nxt))
            else:
                chars.append(nxt if nxt in "'\\" else "\\" + nxt)
            pos += 2
            continue
        if ch == quote:
            return "".join(chars), pos + 1
        if quote == '"' and text.startswith("#{", pos):
            raise ParseError(LEGACY_METADATA_FILE, line, "string interpolation is not allowed")
        chars.append(ch)
        pos += 1
    raise ParseError(LEGACY_METADATA_FILE, line, "unterminated string")


def _parse_arguments(tokens: list[Token], line: str) -> list[Any]:
    """トークン列を引数リストに変換する。ハッシュ要素は1つのdictにまとめる。"""
    if tokens and tokens[0][0] == "(":
        if tokens[-1][0] != ")":
            raise ParseError(LEGACY_METADATA_FILE, line, "unbalanced parentheses")
        tokens = tokens[1:-1]
    if any(kind in "()" for kind, _ in tokens):
        raise ParseError(LEGACY_METADATA_FILE, line, "unexpected parenthesis")

    args: list[Any] = []
    pairs: dict[str, str] = {}
    groups: list[list[Token]] = [[]]
    for token in tokens:
        if token[0] == ",":
            groups.append([])
        else:
            groups[-1].append(token)

    for group in groups:
        kinds = [kind for kind, _ in group]
        if kinds in (["str"], ["num"], ["sym"]):
            if pairs:
                raise ParseError(LEGACY_METADATA_FILE, line, "positional argument after hash")
            args.append(group[0][1])
        elif kinds == ["label", "str"] or kinds == ["label", "num"] or kinds == ["label", "sym"]:
            pairs[group[0][1]] = group[1][1]
        elif len(kinds) == 3 and kinds[1] == "=>" and kinds[0] in ("str", "sym") and kinds[2] in ("str", "num", "sym"):
            pairs[group[0][1]] = group[2][1]
        else:
            raise ParseError(LEGACY_METADATA_FILE, line, "unsupported argument")

    if pairs:
        args.append(pairs)
    return args


class LegacyMetadataBuilder:
    """metadata.rb の宣言を受け取り ProfileMetadata を組み立てるビルダー。"""

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}

    def apply(self, directive: str, args: list[Any], line: str) -> None:
        """ディレクティブ1件を適用する。

        Raises:
            ParseError: 未知のディレクティブ、または引数が不正な場合。
        """
        if directive in SCALAR_DIRECTIVES:
            if len(args) != 1 or isinstance(args[0], dict):
                raise ParseError(LEGACY_METADATA_FILE, line, f"{directive} expects exactly one value")
            self._fields[directive] = args[0]
        elif directive == "depends" and len(args) == 2 and isinstance(args[0], str) and isinstance(args[1], dict):
            # depends 'name', path: '..' は名前付きの1要素にまとめる
            self._fields.setdefault(directive, []).append({"name": args[0], **args[1]})
        elif directive in LIST_DIRECTIVES:
            if len(args) != 1:
                raise ParseError(LEGACY_METADATA_FILE, line, f"{directive} expects one value or one hash")
            self._fields.setdefault(directive, []).append(args[0])
        else:
            raise ParseError(LEGACY_METADATA_FILE, line, f"unknown directive {directive!r}")

    def build(self) -> ProfileMetadata:
        return ProfileMetadata(**self._fields)


def _iter_statements(source: str) -> list[str]:
    """空行とコメント行を除いた文を返す。末尾が "," の行は次の行と連結する。"""
    statements: list[str] = []
    pending = ""
    for raw_line in source.removeprefix("\ufeff").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        pending = f"{pending} {line}" if pending else line
        if not pending.endswith(","):
            statements.append(pending)
            pending = ""
    if pending:
        statements.append(pending)
    return statements


def parse_legacy_metadata(source: str) -> ProfileMetadata:
    """metadata.rb の内容を解釈して ProfileMetadata を返す。

    Args:
        source: metadata.rb のテキスト。

    Returns:
        宣言されたフィールドのみを設定したメタデータ。

    Raises:
        ParseError: 入力が上限サイズを超える場合、または解釈できない文を含む場合。
    """
    if len(source.encode("utf-8")) > MAX_SOURCE_BYTES:
        raise ParseError(LEGACY_METADATA_FILE, source[:200], f"file exceeds {MAX_SOURCE_BYTES} bytes")

    builder = LegacyMetadataBuilder()
    for line in _iter_statements(source):
        match = _STATEMENT_RE.match(line)
        if match is None:
            raise ParseError(LEGACY_METADATA_FILE, line, "expected a metadata directive")
        directive = match.group("directive")
        rest = match.group("rest")
        # 'name=' や 'name.foo' のような代入・メソッド呼び出しは拒否する
        if rest and not rest[0].isspace() and rest[0] != "(":
            raise ParseError(LEGACY_METADATA_FILE, line, "expected a metadata directive")
        args = _parse_arguments(_tokenize(rest, line), line)
        builder.apply(directive, args, line)
    return builder.build()
