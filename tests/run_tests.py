#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
pytest 测试运行脚本
测试使用内存 SQLite + fake Redis，无需启动服务。
"""
import os
import sys
import argparse
import subprocess

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.dirname(TESTS_DIR)


def run_tests(args):
    """运行测试"""
    cmd = [sys.executable, "-m", "pytest", "-v"]

    # 添加测试覆盖率
    if args.coverage:
        cmd.extend(["--cov=.", "--cov-report=term"])

    # 添加关键词过滤
    if args.keyword:
        cmd.extend(["-k", args.keyword])

    # 添加失败时停止
    if args.stop_on_first_fail:
        cmd.append("-x")

    # 添加JUnit XML报告
    if args.junit_xml:
        cmd.extend(["--junit-xml", args.junit_xml])

    cmd.append(args.test_path or TESTS_DIR)

    print(f"执行命令: {' '.join(cmd)}")
    print("-" * 60)
    result = subprocess.run(cmd, cwd=ROOT_DIR)
    return result.returncode


def main():
    parser = argparse.ArgumentParser(description="TaskFlow 测试运行脚本")
    parser.add_argument("--test-path", default=None, help="测试路径")
    parser.add_argument("-k", "--keyword", help="按关键词过滤测试")
    parser.add_argument("-x", "--stop-on-first-fail", action="store_true", help="遇到第一个失败就停止")
    parser.add_argument("--coverage", action="store_true", help="生成覆盖率报告（需要 pytest-cov）")
    parser.add_argument("--junit-xml", help="JUnit XML报告文件路径")
    return run_tests(parser.parse_args())


if __name__ == "__main__":
    sys.exit(main())
