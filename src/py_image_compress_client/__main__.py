"""Entry point for python -m py_image_compress_client.

不带参数时启动 MCP 服务器；``compress`` 子命令直接压缩本地图片。
"""

import argparse
import sys

from . import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-image-compress-client",
        description="远程图像压缩服务的批量客户端",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="启动 MCP 服务器（默认）")

    compress = subparsers.add_parser("compress", help="压缩文件或目录")
    compress.add_argument("inputs", nargs="+", help="图片文件或目录")
    compress.add_argument("-o", "--output-dir", help="结果保存目录")
    compress.add_argument("-q", "--quality", type=int, help="压缩质量 10-100")
    compress.add_argument("-f", "--format", choices=["jpeg", "png", "webp"], help="输出格式")
    compress.add_argument(
        "--download", choices=["each", "archive", "none"], default="each", help="保存方式"
    )
    compress.add_argument("--no-recursive", action="store_true", help="不递归子目录")
    compress.add_argument("--service-url", help="压缩服务地址")
    return parser


def main(argv: list[str] | None = None) -> int:
    """主入口函数"""
    args = build_parser().parse_args(argv)

    if args.command == "compress":
        import asyncio

        from .compressor import BatchCompressor
        from .utils.logging_helpers import setup_logging

        setup_logging()
        compressor = BatchCompressor(base_url=args.service_url)
        report = asyncio.run(
            compressor.compress_paths(
                args.inputs,
                output_dir=args.output_dir,
                quality=args.quality,
                format=args.format,
                recursive=not args.no_recursive,
                download=args.download,
            )
        )
        print(report.get_summary())
        for path in report.saved_files:
            print(f"  {path}")
        return 0 if report.is_successful() else 1

    # 启动 MCP 服务器
    from .mcp_server import main as server_main

    server_main()
    return 0


if __name__ == "__main__":
    sys.exit(main())
