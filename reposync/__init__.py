"""reposync - Puppet 环境与模块依赖的 git 推送同步工具"""

__version__ = "0.1.0"
