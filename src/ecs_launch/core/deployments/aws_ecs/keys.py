"""Key pair creation and private key persistence."""

import logging
import os
import stat
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ecs_launch.core.deployments.aws_ecs.errors import CredentialPersistFailed, provider_step
from ecs_launch.core.deployments.aws_ecs.models import Credential, ResourceKind, ResourceLedger

logger = logging.getLogger(__name__)

KEY_FILE_MODE = 0o600


def create_key_pair(
    session: Any,
    key_name: str,
    key_path: Path,
    ledger: ResourceLedger,
    reporter: Callable[[str], None],
) -> Credential:
    """Create a key pair and write its private key next to the operator."""
    if key_path.exists():
        raise CredentialPersistFailed(key_path, "file already exists")

    ec2 = session.client("ec2")
    reporter(f"Creating key pair ({key_name}, file {key_path})")
    with provider_step("create key pair"):
        material = ec2.create_key_pair(KeyName=key_name)["KeyMaterial"]
    ledger.record(ResourceKind.KEY_PAIR, key_name)

    mode = write_private_key(key_path, material)

    # Launch templates referencing the key are rejected until EC2 can see it.
    with provider_step(f"wait for key pair {key_name}"):
        ec2.get_waiter("key_pair_exists").wait(KeyNames=[key_name])

    return Credential(key_name=key_name, key_path=key_path, file_mode=mode)


def write_private_key(path: Path, material: str) -> int:
    """Write key material once, readable by the owner only.

    A file this call created is removed again when it cannot be completed,
    so the next run is not blocked by a truncated key.

    Returns:
        The permission bits of the written file.
    """
    created = False
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, KEY_FILE_MODE)
        created = True
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(material)
        path.chmod(KEY_FILE_MODE)
        mode = stat.S_IMODE(path.stat().st_mode)
    except OSError as exc:
        if created:
            _discard(path)
        raise CredentialPersistFailed(path, exc) from exc

    if mode != KEY_FILE_MODE:
        _discard(path)
        raise CredentialPersistFailed(path, f"permissions are {oct(mode)}, expected 0o600")
    logger.info("Wrote private key to %s", path)
    return mode


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove incomplete key file %s: %s", path, exc)
