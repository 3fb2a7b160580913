"""プロファイルのディレクトリ構成のスキャン。"""

import logging
import os
import re
from pathlib import Path

from profilekit.models.errors import LoadError
from profilekit.models.profile import ControlsLayout, ProfileStructure, RuleSummary

logger = logging.getLogger(__name__)

CONTROLS_DIR = "controls"
LEGACY_TEST_DIR = "test"
RULE_FILE_SUFFIX = ".rb"

# control 'id' do / rule "id" do
_RULE_DECL_RE = re.compile(r"""^\s*(?:control|rule)\s*\(?\s*(?P<q>['"])(?P<id>.+?)(?P=q)""")
_RULE_ATTR_RE = re.compile(r"""^\s*(?P<attr>title|desc)\s*\(?\s*(?P<q>['"])(?P<value>.*?)(?P=q)""")
_RULE_IMPACT_RE = re.compile(r"^\s*impact\s*\(?\s*(?P<value>\d+(?:\.\d+)?)")


def ensure_profile_root(root: Path) -> None:
    """プロファイルのルートが読み込み可能なディレクトリか検証する。

    Raises:
        LoadError: 存在しない、ディレクトリでない、または読み込めない場合。
    """
    if not root.exists():
        raise LoadError(str(root), "path does not exist")
    if not root.is_dir():
        raise LoadError(str(root), "path is not a directory")
    try:
        with os.scandir(root) as entries:
            next(entries, None)
    except OSError as e:
        raise LoadError(str(root), str(e)) from e


def iter_rule_files(directory: Path) -> list[Path]:
    """ディレクトリ配下のルールファイルをソート順で列挙する。

    シンボリックリンクのディレクトリは辿らない。
    """
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(directory, followlinks=False):
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.endswith(RULE_FILE_SUFFIX):
                files.append(Path(dirpath) / filename)
    return files


def parse_rules(source: str, relative_path: str) -> dict[str, RuleSummary]:
    """ルールファイルから宣言されたルールIDと概要を抽出する。

    ルールの構文検証は行わない。同じIDが複数回宣言された場合は最後の宣言が残る。
    """
    rules: dict[str, dict[str, object]] = {}
    current: dict[str, object] | None = None
    for line in source.splitlines():
        decl = _RULE_DECL_RE.match(line)
        if decl is not None:
            current = {"source": relative_path}
            rules[decl.group("id")] = current
            continue
        if current is None:
            continue
        attr = _RULE_ATTR_RE.match(line)
        if attr is not None:
            current.setdefault(attr.group("attr"), attr.group("value"))
            continue
        impact = _RULE_IMPACT_RE.match(line)
        if impact is not None:
            current.setdefault("impact", float(impact.group("value")))
    return {rule_id: RuleSummary.model_validate(fields) for rule_id, fields in rules.items()}


def _select_layout(controls_present: bool, legacy_present: bool) -> ControlsLayout:
    if controls_present:
        return ControlsLayout.CONTROLS
    if legacy_present:
        return ControlsLayout.TEST
    return ControlsLayout.NONE


def scan_structure(root: Path) -> ProfileStructure:
    """プロファイルのディレクトリ構成をスキャンする。

    ``controls`` と ``test`` が両方ある場合は ``controls`` を優先する。
    ルール数は ``controls`` 配下で宣言されたルールIDの数のみを数え、
    ``test`` 配下のファイルはrule_filesに列挙するだけでカウントしない。

    Args:
        root: プロファイルのルートディレクトリ。

    Returns:
        スキャン結果。

    Raises:
        LoadError: ルートディレクトリを読み込めない場合。
    """
    ensure_profile_root(root)

    controls_present = (root / CONTROLS_DIR).is_dir()
    legacy_present = (root / LEGACY_TEST_DIR).is_dir()
    layout = _select_layout(controls_present, legacy_present)

    rule_files: list[str] = []
    rules: dict[str, RuleSummary] = {}
    if layout is not ControlsLayout.NONE:
        source_dir = root / layout.value
        for path in iter_rule_files(source_dir):
            relative = path.relative_to(root).as_posix()
            rule_files.append(relative)
            if layout is not ControlsLayout.CONTROLS:
                continue
            # コメント等に含まれる非UTF-8のバイトは置換して読む
            try:
                source = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                raise LoadError(str(path), str(e)) from e
            rules.update(parse_rules(source, relative))

    logger.debug("Scanned %s: layout=%s files=%d rules=%d", root, layout.value, len(rule_files), len(rules))
    return ProfileStructure(
        controls_dir_present=controls_present,
        legacy_test_dir_present=legacy_present,
        layout=layout,
        rule_files=rule_files,
        rules=rules,
        rule_count=len(rules),
    )
