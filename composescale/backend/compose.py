"""Runs `docker compose` for a project and describes which project that is."""

import asyncio
import os

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from composescale.constants import ENV_PROJECT_NAME

@dataclass(frozen=True)
class ComposeProject:
    """A Compose project: its name and the files that define it."""

    name: str
    files: Tuple[str, ...] = field(default_factory=tuple)
    docker_bin: str = "docker"

    @classmethod
    def resolve(cls, name: Optional[str] = None, files: Optional[List[str]] = None, workdir=None):
        """Picks the project name the way Compose does: flag, then COMPOSE_PROJECT_NAME, then the directory name."""

        workdir = Path(workdir or os.getcwd())
        name = name or os.getenv(ENV_PROJECT_NAME) or workdir.resolve().name
        return cls(normalize_project_name(name), tuple(files or ()))

    def command(self, *args) -> List[str]:
        cmd = [self.docker_bin, "compose"]
        for f in self.files:
            cmd += ["-f", f]
        return cmd + ["-p", self.name, *args]

def normalize_project_name(name: str) -> str:
    """Lowercases and strips characters Compose does not allow in project names."""
    return "".join(c for c in name.lower() if c.isalnum() or c in "-_")

async def run_compose(project: ComposeProject, *args, timeout=None) -> Tuple[int, str, str]:
    """
    Runs `docker compose <args>` for the project without a shell.
    Returns (returncode, stdout, stderr). OSError propagates when docker is not installed.
    """

    proc = await asyncio.create_subprocess_exec(
        *project.command(*args),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise

    return proc.returncode, stdout.decode().strip(), stderr.decode().strip()
