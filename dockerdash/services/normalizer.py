"""
Map raw daemon records to the view shapes served by the API.

Daemon responses differ between versions and endpoints: ``RepoTags`` may be
null, ``State`` is a flat string on list records and an object on inspect
records, and optional collections come back as null. Everything here is a
pure function of its input so it can be tested without a daemon.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from dockerdash.domain.views import (
    ContainerDetailView,
    ContainerView,
    ImageView,
    MountView,
    PortBinding,
    VolumeView,
)

NONE_SENTINEL = "<none>"
DEFAULT_TAG = "latest"
SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")
SHORT_ID_LENGTH = 12


# -------------------------------
# Scalars
# -------------------------------
def format_size(size: Optional[float]) -> str:
    """Format a byte count in the largest unit keeping the value >= 1, e.g. ``1.50 KB``."""
    if not size or size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f} {SIZE_UNITS[unit]}"


def format_timestamp(value: Any) -> Optional[str]:
    """Epoch seconds to ISO-8601 UTC. Strings are already RFC 3339 and pass through."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def short_id(raw_id: Optional[str]) -> str:
    """Strip any ``sha256:`` style prefix and keep the first 12 characters."""
    if not raw_id:
        return ""
    return raw_id.split(":")[-1][:SHORT_ID_LENGTH]


def split_tag(reference: str) -> Tuple[str, str]:
    """Split ``repo[:tag]`` into (repository, tag).

    The tag separator is the last ``:`` after the last ``/`` so registry ports
    (``localhost:5000/app``) stay in the repository. Empty tag means ``latest``.
    """
    slash = reference.rfind("/")
    colon = reference.rfind(":")
    if colon > slash:
        repository, tag = reference[:colon], reference[colon + 1:]
    else:
        repository, tag = reference, ""
    return repository or NONE_SENTINEL, tag or DEFAULT_TAG


def split_reference(reference: str) -> Tuple[str, Optional[str]]:
    """Parse an image pull reference into the (repository, tag) the daemon expects.

    Digest references are pulled as-is with no tag.
    """
    reference = reference.strip()
    if "@" in reference:
        return reference, None
    return split_tag(reference)


def container_state(record: Dict[str, Any]) -> str:
    state = record.get("State")
    if isinstance(state, dict):
        state = state.get("Status")
    return (state or "unknown").lower()


# -------------------------------
# Collections
# -------------------------------
def normalize_ports(raw_ports: Optional[List[Dict[str, Any]]]) -> List[PortBinding]:
    return [
        PortBinding(
            internal=port.get("PrivatePort"),
            external=port.get("PublicPort"),
            type=port.get("Type") or "tcp",
            ip=port.get("IP"),
        )
        for port in raw_ports or []
    ]


def normalize_inspect_ports(raw_ports: Optional[Dict[str, Any]]) -> List[PortBinding]:
    """Ports from ``NetworkSettings.Ports`` (``{"80/tcp": [{"HostPort": "8080"}]}``)."""
    result = []
    for key, bindings in (raw_ports or {}).items():
        internal, _, proto = key.partition("/")
        internal_port = int(internal) if internal.isdigit() else None
        if not bindings:
            result.append(PortBinding(internal=internal_port, type=proto or "tcp"))
            continue
        for binding in bindings:
            host_port = binding.get("HostPort")
            result.append(
                PortBinding(
                    internal=internal_port,
                    external=int(host_port) if host_port and host_port.isdigit() else None,
                    type=proto or "tcp",
                    ip=binding.get("HostIp") or None,
                )
            )
    return result


def normalize_mounts(raw_mounts: Optional[List[Dict[str, Any]]]) -> List[MountView]:
    return [
        MountView(
            type=mount.get("Type"),
            name=mount.get("Name"),
            source=mount.get("Source"),
            destination=mount.get("Destination"),
            mode=mount.get("Mode"),
            rw=bool(mount.get("RW", True)),
        )
        for mount in raw_mounts or []
    ]


# -------------------------------
# Containers
# -------------------------------
def normalize_container(
    record: Dict[str, Any],
    details: Optional[Dict[str, Any]] = None,
) -> ContainerView:
    """Build a ContainerView from a list record, optionally merged with its inspect record."""
    details = details or {}
    detail_state = details.get("State") or {}

    names = record.get("Names") or []
    name = names[0] if names else record.get("Name") or details.get("Name") or ""

    state = container_state(details) if detail_state else container_state(record)
    exit_code = detail_state.get("ExitCode") if isinstance(detail_state, dict) else None
    status = record.get("Status")
    if not status:
        status = f"Exited ({exit_code})" if state == "exited" and exit_code is not None else state

    return ContainerView(
        id=short_id(record.get("Id")),
        name=name.lstrip("/"),
        image=record.get("Image") or "",
        state=state,
        status=status,
        created=format_timestamp(record.get("Created")),
        exitCode=exit_code,
        ports=normalize_ports(record.get("Ports")),
        mounts=normalize_mounts(record.get("Mounts")),
        labels=dict(record.get("Labels") or {}),
    )


def normalize_container_detail(details: Dict[str, Any]) -> ContainerDetailView:
    """Build the detail view from an inspect record alone."""
    config = details.get("Config") or {}
    state = details.get("State") or {}
    exit_code = state.get("ExitCode")
    status = container_state(details)

    command = config.get("Cmd")
    if isinstance(command, list):
        command = " ".join(command)

    return ContainerDetailView(
        id=short_id(details.get("Id")),
        fullId=details.get("Id") or "",
        name=(details.get("Name") or "").lstrip("/"),
        image=config.get("Image") or details.get("Image") or "",
        state=status,
        status=f"Exited ({exit_code})" if status == "exited" and exit_code is not None else status,
        created=format_timestamp(details.get("Created")),
        exitCode=exit_code,
        ports=normalize_inspect_ports((details.get("NetworkSettings") or {}).get("Ports")),
        mounts=normalize_mounts(details.get("Mounts")),
        labels=dict(config.get("Labels") or {}),
        command=command,
        env=list(config.get("Env") or []),
        restartCount=details.get("RestartCount") or 0,
        startedAt=format_timestamp(state.get("StartedAt")),
        finishedAt=format_timestamp(state.get("FinishedAt")),
    )


# -------------------------------
# Images
# -------------------------------
def normalize_image(
    record: Dict[str, Any],
    details: Optional[Dict[str, Any]] = None,
) -> ImageView:
    details = details or {}
    tags = [t for t in record.get("RepoTags") or [] if t != f"{NONE_SENTINEL}:{NONE_SENTINEL}"]
    if tags:
        repository, tag = split_tag(tags[0])
    else:
        repository, tag = NONE_SENTINEL, NONE_SENTINEL

    return ImageView(
        id=short_id(record.get("Id")),
        repository=repository,
        tag=tag,
        size=format_size(record.get("Size")),
        created=format_timestamp(record.get("Created")),
        tags=tags,
        digests=list(record.get("RepoDigests") or []),
        architecture=details.get("Architecture") or record.get("Architecture"),
        os=details.get("Os") or record.get("Os"),
    )


# -------------------------------
# Volumes
# -------------------------------
def normalize_volume(record: Dict[str, Any]) -> VolumeView:
    usage = record.get("UsageData") or {}
    size = usage.get("Size")
    return VolumeView(
        name=record.get("Name") or "",
        driver=record.get("Driver") or "local",
        mountpoint=record.get("Mountpoint"),
        created=format_timestamp(record.get("CreatedAt")),
        # -1 means the daemon did not compute usage
        size=format_size(size) if isinstance(size, int) and size >= 0 else None,
        labels=dict(record.get("Labels") or {}),
        scope=record.get("Scope"),
    )
