"""reposync 命令行接口

用法: reposync (deploy|update) REF
"""

from __future__ import annotations

import click

from reposync import __version__
from reposync.core.config import DEFAULT_R10K_CONFIG, R10K_CONFIG_ENV
from reposync.core.exceptions import ReposyncError
from reposync.services.container import get_container
from reposync.services.reposync import Reposync
from reposync.utils.logger import setup_logging

ACTIONS = ("deploy", "update")


class ArgumentError(click.UsageError):
    """参数个数或动作不合法，退出码为 1"""

    exit_code = 1


class ReposyncCommand(click.Command):
    """解析阶段的用法错误（如未知选项）同样以退出码 1 结束"""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.command(
    cls=ReposyncCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=(
        f"不生效时多半是没有设置 {R10K_CONFIG_ENV}，"
        f"而 r10k 配置又不在默认位置 {DEFAULT_R10K_CONFIG}。"
    ),
)
@click.version_option(version=__version__)
@click.argument("args", nargs=-1, metavar="(deploy|update) REF")
@click.pass_context
def main(ctx: click.Context, args: tuple[str, ...]) -> None:
    """同步 Puppet 环境及其受控模块

    控制仓库有推送时使用 deploy；某个模块仓库有推送时使用 update。

    \b
    位置参数:
      ACTION  deploy 部署环境，update 更新模块
      REF     刚推送的 git ref，如 refs/heads/feature-x
    """
    if len(args) != 2:
        raise ArgumentError("需要恰好 2 个参数", ctx=ctx)
    action, ref = args
    if action not in ACTIONS:
        raise ArgumentError(f"未知动作: {action}", ctx=ctx)

    container = get_container()
    setup_logging(level=container.config.log_level, json_output=container.config.log_json)

    sync = Reposync(ref, gateway=container.gateway)
    try:
        if action == "deploy":
            sync.deploy()
        else:
            sync.update_libraries()
    except ReposyncError as e:
        raise click.ClickException(str(e)) from e
