"""Miniforge installer download."""

from __future__ import annotations

import logging
import ssl
from pathlib import Path

import httpx
import truststore
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

logger = logging.getLogger(__name__)

# sys.platform -> Miniforge release OS name
INSTALLER_OS_NAMES: dict[str, str] = {
    "darwin": "MacOSX",
    "linux": "Linux",
}

# platform.machine() -> Miniforge release architecture name
INSTALLER_ARCH_NAMES: dict[str, str] = {
    "arm64": "arm64",
    "aarch64": "aarch64",
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "ppc64le": "ppc64le",
}


class InstallerDownloadError(RuntimeError):
    """Raised when the Miniforge installer cannot be fetched."""


def installer_name(os_family: str, machine: str) -> str:
    """Return the Miniforge installer file name for this host.

    Raises:
        InstallerDownloadError: If no installer is published for the host.
    """
    os_name = INSTALLER_OS_NAMES.get(os_family)
    arch = INSTALLER_ARCH_NAMES.get(machine.lower())
    if os_name is None or arch is None:
        raise InstallerDownloadError(f"No Miniforge installer for {os_family}/{machine}")
    if os_name == "MacOSX" and arch == "aarch64":
        arch = "arm64"
    return f"Miniforge3-{os_name}-{arch}.sh"


def _client() -> httpx.Client:
    ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    return httpx.Client(verify=ssl_context)


def download_installer(
    url: str,
    dest: Path,
    client: httpx.Client | None = None,
    console: Console | None = None,
) -> Path:
    """Stream *url* to *dest*, showing progress when the size is known.

    A partial file is removed on failure. A client created here is closed
    afterwards; a caller-supplied *client* is left open.

    Raises:
        InstallerDownloadError: On any HTTP or network error.
    """
    if client is None:
        with _client() as owned:
            return download_installer(url, dest, client=owned, console=console)

    logger.info("Downloading %s", url)
    try:
        with client.stream("GET", url, timeout=60, follow_redirects=True) as response:
            if response.status_code != 200:
                raise InstallerDownloadError(f"Download failed with {response.status_code}: {url}")
            total_size = int(response.headers.get("content-length", 0))
            with open(dest, "wb") as f:
                if total_size and console is not None:
                    with Progress(
                        SpinnerColumn(),
                        TextColumn("[progress.description]{task.description}"),
                        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                        console=console,
                    ) as progress:
                        task = progress.add_task("Downloading...", total=total_size)
                        downloaded = 0
                        for chunk in response.iter_bytes(chunk_size=8192):
                            f.write(chunk)
                            downloaded += len(chunk)
                            progress.update(task, completed=downloaded)
                else:
                    for chunk in response.iter_bytes(chunk_size=8192):
                        f.write(chunk)
    except (httpx.HTTPError, OSError) as exc:
        if dest.exists():
            dest.unlink()
        raise InstallerDownloadError(f"Error downloading {url}: {exc}") from exc
    except InstallerDownloadError:
        if dest.exists():
            dest.unlink()
        raise
    return dest


__all__ = ["InstallerDownloadError", "download_installer", "installer_name"]
