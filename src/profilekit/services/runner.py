"""コントロール実行系とのインタフェース定義。

コントロールの実行そのものは本パッケージの対象外で、実装は外部から注入する。
"""

from typing import Protocol

from profilekit.models.target import TargetSpec
from profilekit.services.profile import Profile


class Runner(Protocol):
    """読み込み済みプロファイルをターゲットに対して実行するランナー。"""

    target: TargetSpec

    def add_profile(self, profile: Profile) -> None: ...

    def run(self) -> int:
        """実行して終了ステータスを返す。"""
        ...


def run_profiles(runner: Runner, profiles: list[Profile]) -> int:
    """プロファイルをランナーに登録して実行する。

    検証に合格しなかったプロファイルがあれば実行せずに1を返す。
    """
    for profile in profiles:
        if not profile.check().passed:
            return 1
    for profile in profiles:
        runner.add_profile(profile)
    return runner.run()
