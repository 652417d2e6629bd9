# nfinstall/cli.py
from __future__ import annotations
import argparse
import logging
from typing import List, Optional

from .core import load_cfg, setup_logging
from .ui import App, console, print_summary

logger = logging.getLogger(__name__)

def parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(prog="nfinstall", description="Download a Nerd Font archive from the latest release")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging for core/network")
    ap.add_argument("--repo", help="GitHub repository as OWNER/NAME (default ryanoasis/nerd-fonts)")
    ap.add_argument("--staging-dir", help="Directory for downloaded archives (default <temp>/nfinstall)")
    return ap.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = load_cfg()
    if args.verbose:
        cfg["verbose"] = True
    if args.repo:
        cfg["repo"] = args.repo
    if args.staging_dir:
        cfg["staging_dir"] = args.staging_dir
    setup_logging(verbose=bool(cfg.get("verbose")), console=console)

    try:
        session = App(cfg, console).run()
    except RuntimeError as e:
        logger.error("Unable to start the interactive session: %s", e)
        return 1
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted by user.[/]")
        return 0
    print_summary(session)
    return 0
