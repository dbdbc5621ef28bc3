"""Scanboard CLI for the CT scan dashboard.

Drives the scan orchestrator from the terminal: onboarding, uploads,
analysis, and the admin-only external API configuration.
"""

import asyncio
import logging
import sys
from collections.abc import Awaitable
from collections.abc import Callable
from pathlib import Path

import click

from ctscan_library.config import ClientSettings
from ctscan_library.config import load_settings
from ctscan_library.models import CTScan
from ctscan_library.notifications import Notification
from ctscan_library.orchestrator import ScanOrchestrator
from ctscan_library.session import ClientSession
from ctscan_library.storage import get_log_dir
from ctscan_library.validation import validate_api_config
from ctscan_library.validation import validate_profile
from ctscan_library.validation import validate_upload

logger = logging.getLogger(__name__)

SessionFactory = Callable[[ClientSettings], ClientSession]
Action = Callable[[ScanOrchestrator], Awaitable[int]]

NOT_CONFIGURED_HINT = "External API is not configured. An administrator must set the endpoint URL and API key first."
ADMIN_REQUIRED = "Administrator access required."
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def configure_logging(settings: ClientSettings) -> None:
    """Send library logs to $SCANBOARD_HOME/logs/scanboard.log."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        filename=str(get_log_dir() / "scanboard.log"),
    )


def print_notification(notification: Notification) -> None:
    if notification.level == "success":
        click.echo(notification.message)
    else:
        click.echo(f"Error: {notification.message}", err=True)


def mask_secret(value: str) -> str:
    if len(value) <= 4:
        return "*" * len(value)
    return value[:4] + "*" * (len(value) - 4)


def format_scan_line(scan: CTScan) -> str:
    status = "analyzed" if scan.is_analyzed else "pending analysis"
    return f"#{scan.id}  patient {scan.patient_id}  ({status})"


def run_action(ctx: click.Context, action: Action) -> None:
    """Run action inside a fresh session and exit with its status code."""
    settings: ClientSettings = ctx.obj["settings"]
    factory: SessionFactory = ctx.obj.get("session_factory", ClientSession.from_settings)

    async def runner() -> int:
        async with factory(settings) as session:
            session.notifier.add_listener(print_notification)
            return await action(session.orchestrator)

    code = asyncio.run(runner())
    if code:
        sys.exit(code)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """CT scan dashboard: upload scans, run tumor analysis, review results."""
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = load_settings()
    configure_logging(ctx.obj["settings"])


@cli.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show the caller's profile and role."""

    async def action(orchestrator: ScanOrchestrator) -> int:
        profile = await orchestrator.current_user_profile()
        role = await orchestrator.caller_role()
        admin = await orchestrator.is_caller_admin()

        if not profile.is_fetched:
            click.echo("Profile: unavailable")
        elif profile.data is None:
            click.echo("Profile: not set up (run 'scanboard profile setup')")
        else:
            click.echo(f"Profile: {profile.data.name}, {profile.data.specialization}, {profile.data.department}")
        click.echo(f"Role: {role.data.value}")
        click.echo(f"Admin: {'yes' if admin.data else 'no'}")
        return 0

    run_action(ctx, action)


@cli.group()
def profile() -> None:
    """Manage the caller's clinician profile."""


@profile.command("show")
@click.pass_context
def profile_show(ctx: click.Context) -> None:
    """Show the caller's profile."""

    async def action(orchestrator: ScanOrchestrator) -> int:
        result = await orchestrator.current_user_profile()
        if not result.is_fetched:
            click.echo(f"Error: could not load profile: {result.error}", err=True)
            return 1
        if result.data is None:
            click.echo("No profile yet. Run 'scanboard profile setup' to complete your profile.")
            return 0
        click.echo(f"Name: {result.data.name}")
        click.echo(f"Department: {result.data.department}")
        click.echo(f"Specialization: {result.data.specialization}")
        return 0

    run_action(ctx, action)


@profile.command("setup")
@click.option("--name", prompt="Full name", help="e.g. Dr. John Smith")
@click.option("--department", prompt="Department", help="e.g. Radiology")
@click.option("--specialization", prompt="Specialization", help="e.g. Oncology")
@click.pass_context
def profile_setup(ctx: click.Context, name: str, department: str, specialization: str) -> None:
    """Create or replace the caller's profile."""
    validation = validate_profile(name, department, specialization)
    if not validation.ok:
        for message in validation.errors.values():
            click.echo(f"Error: {message}", err=True)
        sys.exit(2)

    async def action(orchestrator: ScanOrchestrator) -> int:
        result = await orchestrator.save_profile(validation.value)
        return 0 if result.ok else 1

    run_action(ctx, action)


@cli.group()
def scans() -> None:
    """Upload, list and analyze CT scans."""


@scans.command("list")
@click.pass_context
def scans_list(ctx: click.Context) -> None:
    """List all scans."""

    async def action(orchestrator: ScanOrchestrator) -> int:
        result = await orchestrator.all_scans()
        if not result.data:
            click.echo("No CT scans have been uploaded yet. Start by uploading a scan for analysis.")
            return 0
        for scan in result.data:
            click.echo(format_scan_line(scan))
        return 0

    run_action(ctx, action)


def image_suffix(blob: bytes) -> str:
    return ".png" if blob.startswith(PNG_SIGNATURE) else ".jpg"


def save_scan_images(scan: CTScan, directory: Path) -> list[Path]:
    """Write the uploaded image and, once analyzed, the tumor mask into directory."""
    directory.mkdir(parents=True, exist_ok=True)
    image_path = directory / f"scan-{scan.id}{image_suffix(scan.scan_image)}"
    image_path.write_bytes(scan.scan_image)
    written = [image_path]
    if scan.analysis_result is not None:
        mask_path = directory / f"scan-{scan.id}-mask.png"
        mask_path.write_bytes(scan.analysis_result.mask_image)
        written.append(mask_path)
    logger.info(f"Saved {len(written)} image(s) for scan {scan.id} to {directory}")
    return written


@scans.command("show")
@click.argument("scan_id", type=int)
@click.option(
    "--save-images",
    "save_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to write the scan image and tumor mask into",
)
@click.pass_context
def scans_show(ctx: click.Context, scan_id: int, save_dir: Path | None) -> None:
    """Show one scan and its analysis result."""

    async def action(orchestrator: ScanOrchestrator) -> int:
        result = await orchestrator.scan(scan_id)
        if result.data is None:
            click.echo(f"Error: scan #{scan_id} not found", err=True)
            return 1
        scan = result.data
        click.echo(f"CT Scan #{scan.id}")
        click.echo(f"Patient: {scan.patient_id}")
        click.echo(f"Image: {len(scan.scan_image)} bytes")
        if scan.analysis_result is None:
            click.echo("Analysis: not yet analyzed")
        else:
            click.echo(f"Analysis: {scan.analysis_result.summary()}")
        if save_dir is not None:
            for path in save_scan_images(scan, save_dir):
                click.echo(f"Saved: {path}")
        return 0

    run_action(ctx, action)


@scans.command("upload")
@click.argument("patient_id")
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def scans_upload(ctx: click.Context, patient_id: str, image: Path) -> None:
    """Upload IMAGE (JPEG, PNG, DICOM exported as image) for PATIENT_ID."""
    validation = validate_upload(patient_id, image.read_bytes())
    if not validation.ok:
        for message in validation.errors.values():
            click.echo(f"Error: {message}", err=True)
        sys.exit(2)
    clean_patient_id, blob = validation.value

    async def action(orchestrator: ScanOrchestrator) -> int:
        result = await orchestrator.upload_scan(clean_patient_id, blob)
        if not result.ok:
            return 1
        click.echo(f"Scan ID: {result.data}")
        return 0

    run_action(ctx, action)


@scans.command("analyze")
@click.argument("scan_id", type=int)
@click.pass_context
def scans_analyze(ctx: click.Context, scan_id: int) -> None:
    """Run AI tumor detection on a scan."""

    async def action(orchestrator: ScanOrchestrator) -> int:
        if not await orchestrator.can_analyze():
            click.echo(f"Error: {NOT_CONFIGURED_HINT}", err=True)
            return 1
        result = await orchestrator.analyze_scan(scan_id)
        if not result.ok:
            return 1
        refreshed = await orchestrator.scan(scan_id)
        if refreshed.data is not None and refreshed.data.analysis_result is not None:
            click.echo(refreshed.data.analysis_result.summary())
        return 0

    run_action(ctx, action)


@cli.group("api-config")
def api_config() -> None:
    """External AI service configuration (admin only)."""


@api_config.command("show")
@click.pass_context
def api_config_show(ctx: click.Context) -> None:
    """Show the configured endpoint and a masked API key."""

    async def action(orchestrator: ScanOrchestrator) -> int:
        admin = await orchestrator.is_caller_admin()
        if not admin.data:
            click.echo(f"Error: {ADMIN_REQUIRED}", err=True)
            return 1
        result = await orchestrator.external_api_config()
        if result.data is None:
            click.echo("External API: not configured")
            return 0
        click.echo(f"Endpoint URL: {result.data.endpoint_url or '(not set)'}")
        click.echo(f"API key: {mask_secret(result.data.api_key) or '(not set)'}")
        return 0

    run_action(ctx, action)


@api_config.command("set")
@click.option("--endpoint-url", prompt="API Endpoint URL", help="e.g. https://your-ai-service.com/api/analyze")
@click.option("--api-key", prompt="API Key", hide_input=True)
@click.pass_context
def api_config_set(ctx: click.Context, endpoint_url: str, api_key: str) -> None:
    """Configure the external AI endpoint and key."""
    validation = validate_api_config(endpoint_url, api_key)
    if not validation.ok:
        for message in validation.errors.values():
            click.echo(f"Error: {message}", err=True)
        sys.exit(2)

    async def action(orchestrator: ScanOrchestrator) -> int:
        admin = await orchestrator.is_caller_admin()
        if not admin.data:
            click.echo(f"Error: {ADMIN_REQUIRED}", err=True)
            return 1
        result = await orchestrator.configure_external_api(validation.value)
        return 0 if result.ok else 1

    run_action(ctx, action)


def main():
    """Entry point for scanboard CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nInterrupted")
        sys.exit(0)


if __name__ == "__main__":
    main()
