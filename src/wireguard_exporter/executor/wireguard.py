"""WireGuard Exporter - WireGuard Executor"""
import asyncio
import logging
from typing import Iterable, List, Optional

from ..errors import CommandError

logger = logging.getLogger(__name__)


def filter_interfaces(text: str, interfaces: Optional[Iterable[str]]) -> str:
    """Keep only dump lines belonging to ``interfaces``.

    An empty or missing selection keeps every line.
    """
    selected = set(interfaces or ())
    if not selected:
        return text

    kept = [
        line for line in text.splitlines()
        if line.split("\t", 1)[0] in selected
    ]
    return "\n".join(kept) + "\n" if kept else ""


class WireGuardExecutor:
    def __init__(
        self,
        wg_binary: str = "wg",
        prepend_sudo: bool = False,
        interfaces: Optional[List[str]] = None,
        timeout: float = 10,
    ):
        self.wg_binary = wg_binary
        self.prepend_sudo = prepend_sudo
        self.interfaces = list(interfaces or [])
        self.timeout = timeout

    def command(self) -> List[str]:
        cmd = [self.wg_binary, "show", "all", "dump"]
        if self.prepend_sudo:
            cmd.insert(0, "sudo")
        return cmd

    async def dump(self) -> str:
        """Run the status dump and return its output.

        Raises:
            CommandError: if the command cannot be started, times out or
                exits with a non-zero status.
        """
        cmd = self.command()
        logger.debug(f"Running {' '.join(cmd)}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CommandError(f"Cannot run {cmd[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise CommandError(f"{' '.join(cmd)} timed out after {self.timeout}s") from None

        if proc.returncode != 0:
            error = stderr.decode(errors="replace").strip()
            raise CommandError(f"{' '.join(cmd)} exited with {proc.returncode}: {error}")

        try:
            output = stdout.decode()
        except UnicodeDecodeError as e:
            raise CommandError(f"{' '.join(cmd)} produced non UTF-8 output: {e}") from e

        return filter_interfaces(output, self.interfaces)
