"""webhook HTTP 入口"""
