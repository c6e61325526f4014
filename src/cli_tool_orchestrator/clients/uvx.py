"""Locate or provision the ``uvx`` launcher used to run the external tool."""

import io
import logging
import os
import platform
import shutil
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Optional

import requests

from cli_tool_orchestrator.constants import (
    DOWNLOAD_TIMEOUT_SECONDS,
    SKENE_CACHE_BIN_DIR,
    UVX_DOWNLOAD_BASE_URL,
)
from cli_tool_orchestrator.exceptions import ResolutionError

logger = logging.getLogger(__name__)

# (sys.platform prefix, normalized machine) -> release archive
PLATFORM_ARCHIVES = {
    ("darwin", "arm64"): "uv-aarch64-apple-darwin.tar.gz",
    ("darwin", "x86_64"): "uv-x86_64-apple-darwin.tar.gz",
    ("linux", "x86_64"): "uv-x86_64-unknown-linux-gnu.tar.gz",
    ("linux", "arm64"): "uv-aarch64-unknown-linux-gnu.tar.gz",
    ("win32", "x86_64"): "uv-x86_64-pc-windows-msvc.zip",
    ("win32", "arm64"): "uv-aarch64-pc-windows-msvc.zip",
}

MACHINE_ALIASES = {
    "amd64": "x86_64",
    "x86_64": "x86_64",
    "x64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


def _is_windows(system: Optional[str] = None) -> bool:
    return (system or sys.platform).startswith("win")


def uvx_binary_name(system: Optional[str] = None) -> str:
    return "uvx.exe" if _is_windows(system) else "uvx"


def platform_archive(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """Return the uv release archive name for a platform.

    Raises:
        ResolutionError: If no prebuilt archive exists for the platform
    """
    system = system or sys.platform
    machine = machine or platform.machine()
    os_key = "win32" if _is_windows(system) else system
    if os_key.startswith("linux"):
        os_key = "linux"
    arch = MACHINE_ALIASES.get(machine.lower(), machine.lower())
    archive = PLATFORM_ARCHIVES.get((os_key, arch))
    if archive is None:
        raise ResolutionError(f"unsupported platform: {system}/{machine}")
    return archive


class UvxResolver:
    """Finds ``uvx`` on PATH, in the local cache, or downloads it into the cache."""

    def __init__(self, cache_dir: Path = SKENE_CACHE_BIN_DIR, session: Optional[requests.Session] = None):
        self.cache_dir = Path(cache_dir)
        self._session = session

    def resolve(self) -> str:
        """Return the absolute path to a working uvx binary.

        Raises:
            ResolutionError: If uvx is not installed and cannot be downloaded
        """
        on_path = shutil.which("uvx")
        if on_path:
            logger.debug(f"Using uvx from PATH: {on_path}")
            return os.path.abspath(on_path)

        cached = self.cache_dir / uvx_binary_name()
        if cached.exists():
            logger.debug(f"Using cached uvx: {cached}")
            return str(cached)

        logger.info(f"uvx not found, downloading into {self.cache_dir}")
        self._download()
        return str(cached)

    def _download(self) -> None:
        archive = platform_archive()
        url = f"{UVX_DOWNLOAD_BASE_URL}/{archive}"

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ResolutionError(f"failed to create cache directory {self.cache_dir}: {e}")

        session = self._session or requests.Session()
        try:
            response = session.get(url, timeout=DOWNLOAD_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ResolutionError(f"failed to download uv from {url}: {e}")
        finally:
            if self._session is None:
                session.close()

        if archive.endswith(".zip"):
            self._extract_zip(response.content)
        else:
            self._extract_tar_gz(response.content)

    def _extract_tar_gz(self, payload: bytes) -> None:
        wanted = {"uv", "uvx"}
        try:
            with tarfile.open(fileobj=io.BytesIO(payload), mode="r:gz") as tar:
                for member in tar.getmembers():
                    base_name = os.path.basename(member.name)
                    if base_name not in wanted or not member.isfile():
                        continue
                    source = tar.extractfile(member)
                    if source is None:
                        continue
                    self._write_binary(base_name, source.read())
        except tarfile.TarError as e:
            raise ResolutionError(f"tar read error: {e}")

        if not (self.cache_dir / "uvx").exists():
            raise ResolutionError("uvx binary not found in downloaded archive")

    def _extract_zip(self, payload: bytes) -> None:
        wanted = {"uv.exe", "uvx.exe"}
        try:
            with zipfile.ZipFile(io.BytesIO(payload)) as archive:
                for info in archive.infolist():
                    base_name = os.path.basename(info.filename)
                    if base_name in wanted:
                        self._write_binary(base_name, archive.read(info))
        except zipfile.BadZipFile as e:
            raise ResolutionError(f"failed to open zip: {e}")

        if not (self.cache_dir / "uvx.exe").exists():
            raise ResolutionError("uvx.exe not found in downloaded archive")

    def _write_binary(self, name: str, data: bytes) -> None:
        """Install a binary into the cache atomically.

        The file only appears under its final name once fully written, so an
        interrupted download never leaves a truncated binary for resolve().
        """
        dest = self.cache_dir / name
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", dir=self.cache_dir)
        except OSError as e:
            raise ResolutionError(f"failed to write {dest}: {e}")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_name, 0o755)
            os.replace(tmp_name, dest)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise ResolutionError(f"failed to write {dest}: {e}")
        logger.info(f"Installed {dest}")


uvx_resolver = UvxResolver()


def resolve() -> str:
    """Return the path to uvx using the default resolver."""
    return uvx_resolver.resolve()
