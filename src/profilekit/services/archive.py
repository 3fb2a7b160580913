"""読み込み済みプロファイルのアーカイブ作成。"""

import logging
import os
import tarfile
import zipfile
from pathlib import Path
from typing import Literal

from profilekit.models.errors import ArchiveExistsError
from profilekit.services.profile import Profile

logger = logging.getLogger(__name__)

ArchiveFormat = Literal["tar", "zip"]

_EXTENSIONS: dict[str, str] = {"tar": ".tar.gz", "zip": ".zip"}


def default_archive_path(profile: Profile, fmt: ArchiveFormat) -> Path:
    """カレントディレクトリ直下の ``<profile_id>.tar.gz`` / ``<profile_id>.zip``。"""
    return Path.cwd() / f"{profile.profile_id}{_EXTENSIONS[fmt]}"


def iter_profile_files(root: Path) -> list[Path]:
    """アーカイブ対象のファイルをソート順で列挙する。シンボリックリンクは含めない。"""
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.is_symlink() or not path.is_file():
                continue
            files.append(path)
    return files


class ProfileArchiver:
    """プロファイルディレクトリを配布用アーカイブにまとめる。

    検証結果による可否判断は行わない。呼び出し側の責務とする。
    """

    def archive(
        self,
        profile: Profile,
        output: Path | None = None,
        fmt: ArchiveFormat = "tar",
        overwrite: bool = False,
    ) -> Path:
        """アーカイブを作成する。

        Args:
            profile: 読み込み済みのプロファイル。
            output: 出力先パス。Noneの場合は default_archive_path。
            fmt: アーカイブ形式（tar.gz / zip）。
            overwrite: 既存ファイルを上書きするか。

        Returns:
            作成したアーカイブのパス。

        Raises:
            ArchiveExistsError: 出力先が既に存在し、overwriteがFalseの場合。
            ValueError: 未対応の形式が指定された場合。
        """
        if fmt not in _EXTENSIONS:
            raise ValueError(f"Unsupported archive format: {fmt}")

        target = output if output is not None else default_archive_path(profile, fmt)
        if target.exists() and not overwrite:
            raise ArchiveExistsError(str(target))

        root = Path(profile.path).resolve()
        prefix = profile.profile_id
        resolved_target = target.resolve()
        files = [f for f in iter_profile_files(root) if f.resolve() != resolved_target]

        target.parent.mkdir(parents=True, exist_ok=True)
        if fmt == "zip":
            with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zf:
                for file_path in files:
                    zf.write(file_path, f"{prefix}/{file_path.relative_to(root).as_posix()}")
        else:
            with tarfile.open(target, "w:gz") as tar:
                for file_path in files:
                    tar.add(str(file_path), arcname=f"{prefix}/{file_path.relative_to(root).as_posix()}")

        logger.info("Generated archive %s (%d files)", target, len(files))
        return target
