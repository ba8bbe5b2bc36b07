from __future__ import annotations

"""Command-line interface
------------------------
Commands to view effective config, validate expectation files and check them
against live pages. Thin wrapper around the suite loader and runner.
"""

import json
import sys
from pathlib import Path
from typing import List, Optional

import click

from page_matchers.utils.config import get_settings
from page_matchers.utils.logger import bind, get_logger, set_log_level, unbind
from page_matchers.core.expectations import find_suite_files, load_suites_file


# -------- helpers --------


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _collect(targets: List[str]) -> List[Path]:
    paths: List[Path] = []
    for t in targets:
        p = Path(t).resolve()
        if p.is_dir():
            paths.extend(find_suite_files(p, recursive=True))
        else:
            paths.append(p)
    return paths


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(package_name="page-matchers")
def cli(log_level: Optional[str]):
    _ = get_settings()
    if log_level:
        set_log_level(log_level.upper())


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars)."""
    s = get_settings()
    _echo_json(json.loads(s.model_dump_json()))


@cli.command("validate")
@click.argument("targets", nargs=-1, required=True)
def cmd_validate(targets: List[str]):
    """Validate expectation files (supports multi-doc YAML and directories)."""
    ok = True
    for fp in _collect(targets):
        try:
            for suite in load_suites_file(fp):
                click.echo(f"OK  {fp}  ->  {suite.label} ({len(suite.expectations)} expectations)")
        except (ValueError, FileNotFoundError) as e:
            ok = False
            click.echo(f"ERR {fp}  ->  {e}")

    sys.exit(0 if ok else 1)


@cli.command("check")
@click.argument("targets", nargs=-1, required=True)
@click.option("--wait-ms", type=click.IntRange(min=0), default=None, help="Override DEFAULT_WAIT_MS for every suite")
@click.option("--json-out", type=click.Path(dir_okay=False), default=None, help="Write a JSON summary to this file")
def cmd_check(targets: List[str], wait_ms: Optional[int], json_out: Optional[str]):
    """
    Open each suite's URL and evaluate its expectations.

    Examples:
      page-matchers check checks/login.yaml
      page-matchers check checks/ --wait-ms 5000 --json-out out/summary.json
    """
    settings = get_settings()
    if wait_ms is not None:
        settings = settings.model_copy(update={"DEFAULT_WAIT_MS": wait_ms})
    log = get_logger(__name__)

    from page_matchers.core.runner import Runner  # local import keeps `validate` browser-free

    runner = Runner(settings=settings)
    summaries: List[dict] = []
    for fp in _collect(targets):
        try:
            suites = load_suites_file(fp)
        except (ValueError, FileNotFoundError) as e:
            click.echo(f"ERR {fp}  ->  {e}")
            summaries.append({"ok": False, "file": str(fp), "error": str(e)})
            continue
        for suite in suites:
            bind(suite=suite.label)
            try:
                summary = runner.run_suite(suite)
            except Exception as e:
                log.exception(f"Suite {suite.label} crashed")
                summary = {"ok": False, "suite": suite.label, "error": str(e), "results": []}
            finally:
                unbind("suite")
            summary["file"] = str(fp)
            summaries.append(summary)

            for r in summary.get("results", []):
                status = "PASS" if r["passed"] else "FAIL"
                click.echo(f"{status} [{r['index']}] {r['label']}  ({r['elapsed_ms']} ms)")
            if "error" in summary:
                click.echo(f"ERR {fp} [{suite.label}] -> {summary['error']}")

    failed = sum(1 for s in summaries if not s.get("ok", False))
    click.echo(f"Done. OK={len(summaries) - failed}  FAIL={failed}")

    if json_out:
        outp = Path(json_out).resolve()
        outp.parent.mkdir(parents=True, exist_ok=True)
        outp.write_text(json.dumps({"suites": summaries}, indent=2), encoding="utf-8")
        click.echo(f"Wrote summary: {outp}")

    sys.exit(0 if failed == 0 else 1)


def main() -> None:
    cli(prog_name="page-matchers")


if __name__ == "__main__":
    main()
