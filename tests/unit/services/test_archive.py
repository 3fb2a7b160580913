"""ProfileArchiverのユニットテスト。"""

import tarfile
import zipfile
from pathlib import Path

import pytest

from profilekit.config import ProfileConfig
from profilekit.models.errors import ArchiveExistsError
from profilekit.services.archive import ProfileArchiver
from profilekit.services.profile import load_profile


class TestProfileArchiver:
    def test_tar_archive(self, complete_profile: Path, tmp_path: Path) -> None:
        output = tmp_path / "out" / "complete.tar.gz"
        result = ProfileArchiver().archive(load_profile(complete_profile), output=output)
        assert result == output
        with tarfile.open(output, "r:gz") as tar:
            names = sorted(tar.getnames())
        assert names == ["complete/controls/filesystem_spec.rb", "complete/inspec.yml"]

    def test_zip_archive_uses_profile_id_prefix(self, complete_profile: Path, tmp_path: Path) -> None:
        output = tmp_path / "p.zip"
        profile = load_profile(complete_profile, ProfileConfig(id="custom"))
        ProfileArchiver().archive(profile, output=output, fmt="zip")
        with zipfile.ZipFile(output) as zf:
            assert sorted(zf.namelist()) == ["custom/controls/filesystem_spec.rb", "custom/inspec.yml"]

    def test_refuses_to_overwrite(self, complete_profile: Path, tmp_path: Path) -> None:
        output = tmp_path / "exists.tar.gz"
        output.write_bytes(b"old")
        with pytest.raises(ArchiveExistsError) as exc_info:
            ProfileArchiver().archive(load_profile(complete_profile), output=output)
        assert exc_info.value.path == str(output)
        assert output.read_bytes() == b"old"

    def test_overwrite(self, complete_profile: Path, tmp_path: Path) -> None:
        output = tmp_path / "exists.tar.gz"
        output.write_bytes(b"old")
        ProfileArchiver().archive(load_profile(complete_profile), output=output, overwrite=True)
        assert tarfile.is_tarfile(output)

    def test_default_output_in_current_directory(
        self, complete_profile: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        result = ProfileArchiver().archive(load_profile(complete_profile), fmt="zip")
        assert result == tmp_path / "complete.zip"
        assert result.exists()

    def test_archives_failing_profile(self, empty_profile: Path, tmp_path: Path) -> None:
        (empty_profile / "README.md").write_text("x", encoding="utf-8")
        output = ProfileArchiver().archive(load_profile(empty_profile), output=tmp_path / "e.tar.gz")
        assert output.exists()

    def test_unsupported_format(self, complete_profile: Path, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            ProfileArchiver().archive(load_profile(complete_profile), output=tmp_path / "x", fmt="rar")  # type: ignore[arg-type]
