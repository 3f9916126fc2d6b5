from __future__ import annotations

import argparse
import logging
import os
import subprocess
from typing import Optional

from mandelclick.config import load_config, normalise_config, render_settings
from mandelclick.output.png_writer import save_png
from mandelclick.pipeline import navigate, parse_clicks, render_current, render_zoom_path
from mandelclick.util.logging_setup import configure_root_logging, create_log_queue, start_queue_listener, get_logger
from mandelclick.util.manifest import build_manifest, write_manifest

def _git_commit() -> Optional[str]:
    try:
        r = subprocess.run(["git", "rev-parse", "HEAD"], capture_output=True, text=True, check=True)
        return r.stdout.strip()
    except (OSError, subprocess.CalledProcessError):
        return None

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mandelclick", description="Mandelbrot renderer with click-to-zoom navigation.")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, built-in defaults are used.")
    p.add_argument("--width", type=int, default=None, help="Override render_width (pixels).")
    p.add_argument("--workers", type=int, default=None, help="Override workers (processes per render).")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG","INFO","WARNING","ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default="mandelclick.log", help="Log file path (rotating). Set empty to disable file logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Render one viewport to a PNG.")
    r.add_argument("--clicks", type=str, default=None, help="Zoom actions to apply first, e.g. '0,0;0.5,-0.2;out'.")
    r.add_argument("--output", type=str, default=None, help="Override output_image from config.")
    r.add_argument("--manifest", type=str, default=os.path.join("artifacts", "run.json"), help="Run manifest path. Set empty to skip.")

    z = sub.add_parser("path", help="Replay zoom actions, saving one frame per step.")
    z.add_argument("clicks", type=str, help="Zoom actions, e.g. '0,0;0.5,-0.2;out'.")
    z.add_argument("--frames-dir", type=str, default=None, help="Override frames_dir from config.")
    z.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")

    v = sub.add_parser("view", help="Open the interactive zoom window.")
    v.add_argument("--screenshot-dir", type=str, default=".", help="Directory for screenshots taken with 'S'.")

    return p

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    listener_logger = configure_root_logging(level=log_level, console=True, log_file=log_file)

    queue = create_log_queue()
    listener = start_queue_listener(queue, listener_logger)

    logger = get_logger()

    try:
        raw = load_config(args.config)
        if args.width is not None:
            raw["render_width"] = args.width
        if args.workers is not None:
            raw["workers"] = args.workers
        cfg = normalise_config(raw)

        if args.cmd == "render":
            nav = navigate(cfg, parse_clicks(args.clicks))
            viewport, depth, buf = render_current(cfg, nav, log_queue=queue, log_level=log_level)
            output = args.output or cfg["output_image"]
            save_png(buf, output)

            if args.manifest:
                info = {
                    "viewport": viewport.to_dict(),
                    "depth": depth,
                    "width": int(buf.shape[1]),
                    "height": int(buf.shape[0]),
                    "output": output,
                }
                manifest = build_manifest(
                    config=cfg, settings=render_settings(cfg), history=nav.history(),
                    render_info=info, git_commit=_git_commit(),
                )
                write_manifest(args.manifest, manifest)
                logger.info("Run manifest written: %s", args.manifest)
            return 0

        if args.cmd == "path":
            summary = render_zoom_path(
                cfg=cfg, actions=parse_clicks(args.clicks), frames_dir=args.frames_dir,
                log_queue=queue, log_level=log_level, progress=not args.no_progress,
            )
            logger.info("Wrote %s frames to %s", len(summary["frames"]), summary["frames_dir"])
            return 0

        if args.cmd == "view":
            from mandelclick.viewer import ZoomViewer

            ZoomViewer(cfg, screenshot_dir=args.screenshot_dir).run()
            return 0

        raise RuntimeError("Unknown command.")
    except Exception:
        logger.exception("Command %s failed", args.cmd)
        raise
    finally:
        listener.stop()

if __name__ == "__main__":
    raise SystemExit(main())
