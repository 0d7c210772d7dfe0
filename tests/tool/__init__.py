"""Test helpers for canary-variants tools."""

from pathlib import Path

from canary_variants.command import Command, run

CANARY_VARIANTS_BIN = "canary-variants"


async def run_command(args: list[str], env: dict[str, str] | None = None) -> str:
    return await run(Command([CANARY_VARIANTS_BIN] + args, env=env))


def write_fake_kubectl(path: Path, body: str) -> Path:
    """Write an executable script that stands in for kubectl."""
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(0o755)
    return path
