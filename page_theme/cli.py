"""
page-theme: infer a page's design tokens and theme an embedded widget to match.

    page-theme extract https://example.com -o tokens.json --snapshot snapshot.json
    page-theme offline snapshot.json
    page-theme map tokens.json --css
    page-theme doctor --url https://example.com
    page-theme preview https://example.com --bundle https://cdn.example.com/widget.js \\
        --tag chat-widget --expand --screenshot preview.png
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from playwright.async_api import async_playwright

from . import doctor
from .browser import capture_screenshot, capture_snapshot, open_page
from .config import Settings, load_settings, parse_viewport
from .document import StyleSnapshot
from .errors import NoLayoutContainerError, PageThemeError
from .extractor import extract_tokens
from .inject import apply_theme_to_selector, build_injected_panel, build_overlay_panel, script_widget_factory
from .log import configure_logging
from .mapper import map_tokens_to_theme_variables
from .panel import InjectedPanelSpec
from .tokens import DesignTokenSet


def read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise PageThemeError(f"File not found: {path}") from None
    except ValueError as exc:
        raise PageThemeError(f"{path} is not valid JSON: {exc}") from exc


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def emit(data: Any, output: Optional[str]) -> None:
    if output:
        write_json(Path(output), data)
        print(f"✅ Wrote {output}", file=sys.stderr)
    else:
        print(json.dumps(data, ensure_ascii=False, indent=2))


async def run_extract(args: argparse.Namespace, settings: Settings) -> None:
    viewport = parse_viewport(args.viewport) if args.viewport else settings.preview.viewport.model_dump()
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            context, page = await open_page(
                browser,
                args.url,
                viewport=viewport,
                color_scheme=args.color_scheme,
                navigation_timeout_ms=settings.preview.navigation_timeout_ms,
                settle_delay_ms=settings.preview.settle_delay_ms,
            )
            try:
                snapshot = await capture_snapshot(page)
            finally:
                await context.close()
        finally:
            await browser.close()

    if args.snapshot:
        write_json(Path(args.snapshot), snapshot.to_dict())
        print(f"📸 Snapshot saved to {args.snapshot}", file=sys.stderr)
    tokens = extract_tokens(snapshot, settings.extraction)
    emit(tokens.to_dict(), args.output)


def run_offline(args: argparse.Namespace, settings: Settings) -> None:
    snapshot = StyleSnapshot.from_dict(read_json(Path(args.snapshot)))
    tokens = extract_tokens(snapshot, settings.extraction)
    emit(tokens.to_dict(), args.output)


def run_map(args: argparse.Namespace, settings: Settings) -> None:
    tokens = DesignTokenSet.from_dict(read_json(Path(args.tokens)))
    variables = map_tokens_to_theme_variables(tokens)
    if args.css:
        css = variables.to_css(args.selector)
        if args.output:
            Path(args.output).write_text(css + "\n", encoding="utf-8")
            print(f"✅ Wrote {args.output}", file=sys.stderr)
        else:
            print(css)
        return
    emit(variables.to_dict(), args.output)


async def run_preview(args: argparse.Namespace, settings: Settings) -> None:
    viewport = parse_viewport(args.viewport) if args.viewport else settings.preview.viewport.model_dump()
    spec = InjectedPanelSpec(expanded_width=args.width or settings.preview.panel_width)
    factory = script_widget_factory(args.bundle, args.tag) if args.bundle else None

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=not args.headed)
        try:
            print(f"\n🔎 Inspecting {args.url}...", file=sys.stderr)
            context, page = await open_page(
                browser,
                args.url,
                viewport=viewport,
                color_scheme=args.color_scheme,
                navigation_timeout_ms=settings.preview.navigation_timeout_ms,
                settle_delay_ms=settings.preview.settle_delay_ms,
            )
            try:
                snapshot = await capture_snapshot(page)
                tokens = extract_tokens(snapshot, settings.extraction)
                variables = map_tokens_to_theme_variables(tokens)

                print("🧩 Injecting preview panel...", file=sys.stderr)
                try:
                    panel = await build_injected_panel(page, factory, spec)
                except NoLayoutContainerError:
                    print("⚠️  No flex layout container found, using a fixed overlay", file=sys.stderr)
                    panel = await build_overlay_panel(page, factory, spec)

                target = panel.widget_selector or f"#{spec.panel_id}"
                await apply_theme_to_selector(page, target, variables)

                if args.expand:
                    await panel.toggle()
                    await page.wait_for_timeout(400)
                if args.screenshot:
                    await capture_screenshot(page, Path(args.screenshot))
                    print(f"📸 Screenshot: {args.screenshot}", file=sys.stderr)
            finally:
                await context.close()
        finally:
            await browser.close()

    print("\n✅ Preview complete", file=sys.stderr)
    emit({"tokens": tokens.to_dict(), "variables": variables.to_dict()}, args.output)


async def run_doctor(args: argparse.Namespace, settings: Settings) -> int:
    results = await doctor.run_checks(args.url, timeout_ms=settings.preview.navigation_timeout_ms)
    return doctor.report(results)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="page-theme",
        description="Infer design tokens from a live page and theme an embedded widget to match",
    )
    parser.add_argument("--config", help="Path to a JSON settings file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log cascade decisions")
    parser.add_argument("--log-json", action="store_true", help="Emit log events as JSON lines")
    sub = parser.add_subparsers(dest="command")
    sub.required = True

    extract = sub.add_parser("extract", help="Extract design tokens from a URL")
    extract.add_argument("url", help="Page to inspect")
    extract.add_argument("--output", "-o", help="Write the token record here instead of stdout")
    extract.add_argument("--snapshot", help="Also save the captured style snapshot (JSON)")
    extract.add_argument("--viewport", help="Viewport, e.g. 1440x900")
    extract.add_argument(
        "--color-scheme",
        choices=["light", "dark", "no-preference"],
        help="Emulated prefers-color-scheme for the page",
    )

    offline = sub.add_parser("offline", help="Extract design tokens from a saved snapshot")
    offline.add_argument("snapshot", help="Snapshot JSON written by 'extract --snapshot'")
    offline.add_argument("--output", "-o", help="Write the token record here instead of stdout")

    mapping = sub.add_parser("map", help="Map a token record onto widget theme variables")
    mapping.add_argument("tokens", help="Token record JSON")
    mapping.add_argument("--output", "-o", help="Write the variables here instead of stdout")
    mapping.add_argument("--css", action="store_true", help="Emit CSS declarations instead of JSON")
    mapping.add_argument("--selector", default=":root", help="Rule selector used with --css")

    preview = sub.add_parser("preview", help="Inject a themed widget panel into a live page")
    preview.add_argument("url", help="Page to preview on")
    preview.add_argument("--bundle", help="URL of the widget's script bundle")
    preview.add_argument("--tag", help="Custom element name the bundle defines")
    preview.add_argument("--width", help="Expanded panel width, e.g. 400px")
    preview.add_argument("--expand", action="store_true", help="Open the panel before the screenshot")
    preview.add_argument("--screenshot", help="Save a verification screenshot here")
    preview.add_argument("--viewport", help="Viewport, e.g. 1440x900")
    preview.add_argument("--color-scheme", choices=["light", "dark", "no-preference"])
    preview.add_argument("--headed", action="store_true", help="Show the browser window")
    preview.add_argument("--output", "-o", help="Write tokens and variables here instead of stdout")

    check = sub.add_parser("doctor", help="Check that Python and Chromium are ready")
    check.add_argument("--url", help="Also check that this page is reachable")
    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "preview" and bool(args.bundle) != bool(args.tag):
        parser.error("--bundle and --tag must be given together")

    configure_logging(verbose=args.verbose, json_output=args.log_json)
    status = 0
    try:
        settings = load_settings(args.config)
        if args.command == "extract":
            asyncio.run(run_extract(args, settings))
        elif args.command == "offline":
            run_offline(args, settings)
        elif args.command == "map":
            run_map(args, settings)
        elif args.command == "preview":
            asyncio.run(run_preview(args, settings))
        elif args.command == "doctor":
            status = asyncio.run(run_doctor(args, settings))
    except PageThemeError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1
    return status


if __name__ == "__main__":
    sys.exit(main())
