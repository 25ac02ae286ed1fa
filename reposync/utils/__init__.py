"""通用工具: 子进程执行、文件读写、日志"""
