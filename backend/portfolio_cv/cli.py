"""
命令行入口

子命令：
- export: 生成CV PDF并保存到输出目录
- serve:  启动联系表单转发服务
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from .config import load_content, reload_config
from .config.logging_config import setup_logging
from .export import CVExporter, FileArtifactSaver, ReportLabLoader, ToastNotifier
from .models import Toast


def _print_toast(toast: Toast) -> None:
    print(f"[{toast.level.value}] {toast.message}", file=sys.stderr)


def _export(args: argparse.Namespace) -> int:
    config = reload_config(args.config)
    setup_logging(config.logging)

    try:
        content = load_content(args.content or config.content_path)
    except FileNotFoundError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2
    output_dir = Path(args.out) if args.out else config.export.output_dir

    exporter = CVExporter(
        content=content,
        loader=ReportLabLoader(config),
        saver=FileArtifactSaver(output_dir),
        notifier=ToastNotifier(config.export.toast_dismiss_sec, on_toast=_print_toast),
        config=config,
    )
    session = asyncio.run(exporter.export())
    if not session.succeeded:
        return 1
    print(session.artifact_path)
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    config = reload_config(args.config)
    setup_logging(config.logging)
    uvicorn.run("portfolio_cv.api:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portfolio-cv", description="Portfolio CV export tools")
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="生成CV PDF")
    export.add_argument("--config", default=None, help="runtime.yaml 路径")
    export.add_argument("--content", default=None, help="content.yaml 路径")
    export.add_argument("--out", default=None, help="输出目录")
    export.set_defaults(func=_export)

    serve = sub.add_parser("serve", help="启动联系表单服务")
    serve.add_argument("--config", default=None, help="runtime.yaml 路径")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(func=_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
