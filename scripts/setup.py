#!/usr/bin/env python3
"""
Environment setup for page-theme.

    python scripts/setup.py              install the package and Chromium, then verify
    python scripts/setup.py --dev        same, with the test extra
    python scripts/setup.py --check      only verify (page-theme doctor)
    python scripts/setup.py --check --url https://example.com
"""

import argparse
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def install_steps(dev):
    target = ".[test]" if dev else "."
    return [
        ("Installing page-theme" + (" with test extra" if dev else ""),
         [sys.executable, "-m", "pip", "install", "-e", target]),
        ("Installing Chromium browser",
         [sys.executable, "-m", "playwright", "install", "chromium"]),
    ]


def doctor_command(url=None):
    cmd = [sys.executable, "-m", "page_theme", "doctor"]
    if url:
        cmd += ["--url", url]
    return cmd


def install(dev):
    for description, cmd in install_steps(dev):
        print(f"\n📦 {description}...")
        result = subprocess.run(cmd, capture_output=True, text=True, cwd=ROOT)
        if result.returncode != 0:
            print(f"❌ {description} failed (exit {result.returncode})")
            print(result.stderr or result.stdout)
            return False
        print(f"✅ {description} completed")
    return True


def verify(url=None):
    """Run ``page-theme doctor`` in the target interpreter; its output goes straight to the terminal."""
    print("\n🩺 Verifying prerequisites...")
    return subprocess.run(doctor_command(url), cwd=ROOT).returncode


def main(argv=None):
    parser = argparse.ArgumentParser(description="Install and verify page-theme")
    parser.add_argument("--dev", action="store_true", help="Install the test extra as well")
    parser.add_argument("--check", action="store_true", help="Skip installation, only verify")
    parser.add_argument("--url", help="Also check that this page is reachable")
    args = parser.parse_args(argv)

    if sys.version_info < (3, 8):
        print("❌ Python 3.8+ required")
        return 1

    if not args.check:
        print("🚀 Setting up page-theme...")
        if not install(args.dev):
            return 1

    status = verify(args.url)
    if status == 0 and not args.check:
        print("\nYou can now run:")
        print("   page-theme extract <url> --output tokens.json")
        print("   page-theme preview <url> --bundle <widget.js> --tag <element> --screenshot preview.png")
    return status


if __name__ == "__main__":
    sys.exit(main())
