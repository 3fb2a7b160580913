"""テスト共通フィクスチャ。"""

from collections.abc import Callable
from pathlib import Path

import pytest

from profilekit.services.profile import DiagnosticCollector

COMPLETE_LEGACY_METADATA = """\
name 'complete'
title 'complete example profile'
maintainer 'Chef Software, Inc.'
copyright 'Chef Software, Inc.'
copyright_email 'support@chef.io'
license 'Proprietary, All rights reserved'
summary 'Testing stub'
version '1.0.0'
supports 'os'
"""

COMPLETE_MODERN_METADATA = """\
name: complete
title: complete example profile
maintainer: Chef Software, Inc.
copyright: Chef Software, Inc.
copyright_email: support@chef.io
license: Proprietary, All rights reserved
summary: Testing stub
version: 1.0.0
supports:
  - os-family: linux
"""

SAMPLE_CONTROL = """\
control 'tmp-1.0' do
  impact 0.7
  title 'Create /tmp directory'
  desc 'An optional description...'
  describe file('/tmp') do
    it { should be_directory }
  end
end
"""

ProfileFactory = Callable[..., Path]


@pytest.fixture
def make_profile(tmp_path: Path) -> ProfileFactory:
    """tmp_path配下にプロファイルのディレクトリツリーを作成するファクトリ。

    files には プロファイルルートからの相対パス -> 内容 を渡す。
    dirs には空ディレクトリとして作成する相対パスを渡す。
    """

    def _make(
        name: str = "profile",
        files: dict[str, str] | None = None,
        dirs: list[str] | None = None,
    ) -> Path:
        root = tmp_path / "profiles" / name
        root.mkdir(parents=True)
        for rel in dirs or []:
            (root / rel).mkdir(parents=True, exist_ok=True)
        for rel, content in (files or {}).items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def empty_profile(make_profile: ProfileFactory) -> Path:
    """メタデータもコントロールも無いプロファイル。"""
    return make_profile("empty")


@pytest.fixture
def complete_meta_profile(make_profile: ProfileFactory) -> Path:
    """metadata.rb が完全で、コントロールを非推奨の test ディレクトリに置いたプロファイル。"""
    return make_profile(
        "complete-meta",
        files={"metadata.rb": COMPLETE_LEGACY_METADATA, "test/test.rb": SAMPLE_CONTROL},
    )


@pytest.fixture
def complete_profile(make_profile: ProfileFactory) -> Path:
    """inspec.yml が完全で、controls にコントロールを置いたプロファイル。"""
    return make_profile(
        "complete-profile",
        files={"inspec.yml": COMPLETE_MODERN_METADATA, "controls/filesystem_spec.rb": SAMPLE_CONTROL},
    )


@pytest.fixture
def collector() -> DiagnosticCollector:
    """診断を収集するテスト用の出力先。"""
    return DiagnosticCollector()

