import pytest

from dockerdash.services import normalizer


# ---------------------------
# format_size
# ---------------------------
@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0 B"),
        (1, "1.00 B"),
        (1023, "1023.00 B"),
        (1024, "1.00 KB"),
        (1536, "1.50 KB"),
        (104857600, "100.00 MB"),
        (3 * 1024 ** 3, "3.00 GB"),
        (5 * 1024 ** 4, "5.00 TB"),
        (2048 * 1024 ** 4, "2048.00 TB"),
    ],
)
def test_format_size(size, expected):
    assert normalizer.format_size(size) == expected


def test_format_size_treats_missing_as_zero():
    assert normalizer.format_size(None) == "0 B"


# ---------------------------
# Timestamps and ids
# ---------------------------
def test_format_timestamp_is_iso_utc():
    assert normalizer.format_timestamp(1700000000) == "2023-11-14T22:13:20Z"


def test_format_timestamp_passes_strings_and_none():
    assert normalizer.format_timestamp("2024-01-01T10:00:00Z") == "2024-01-01T10:00:00Z"
    assert normalizer.format_timestamp(None) is None


def test_short_id_strips_digest_prefix():
    assert normalizer.short_id("sha256:0123456789abcdef0123") == "0123456789ab"
    assert normalizer.short_id("abcdef0123456789") == "abcdef012345"


# ---------------------------
# References
# ---------------------------
@pytest.mark.parametrize(
    "reference, expected",
    [
        ("nginx", ("nginx", "latest")),
        ("nginx:1.25", ("nginx", "1.25")),
        ("nginx:", ("nginx", "latest")),
        ("localhost:5000/app", ("localhost:5000/app", "latest")),
        ("localhost:5000/app:v2", ("localhost:5000/app", "v2")),
        (" redis:7 ", ("redis", "7")),
        ("busybox@sha256:abc", ("busybox@sha256:abc", None)),
    ],
)
def test_split_reference(reference, expected):
    assert normalizer.split_reference(reference) == expected


# ---------------------------
# Containers
# ---------------------------
def test_container_list_record():
    record = {
        "Id": "abcdef0123456789",
        "Names": ["/web"],
        "Image": "nginx:latest",
        "State": "running",
        "Status": "Up 2 hours",
        "Created": 1700000000,
        "Ports": [
            {"PrivatePort": 80, "PublicPort": 8080, "Type": "tcp", "IP": "0.0.0.0"},
            {"PrivatePort": 443, "Type": "tcp"},
        ],
        "Labels": None,
    }

    view = normalizer.normalize_container(record)

    assert view.id == "abcdef012345"
    assert view.name == "web"
    assert view.state == "running"
    assert view.status == "Up 2 hours"
    assert view.created == "2023-11-14T22:13:20Z"
    assert view.ports[0].external == 8080
    assert view.ports[1].internal == 443
    assert view.ports[1].external is None
    assert view.mounts == []
    assert view.labels == {}


def test_container_state_from_nested_inspect_object():
    record = {"Id": "0123456789abcdef", "Names": ["/db"], "State": "Exited", "Status": ""}
    details = {"State": {"Status": "Exited", "ExitCode": 137}}

    view = normalizer.normalize_container(record, details)

    assert view.state == "exited"
    assert view.exitCode == 137
    assert view.status == "Exited (137)"


def test_container_without_names_or_ports():
    view = normalizer.normalize_container({"Id": "0123456789abcdef", "State": "created"})

    assert view.name == ""
    assert view.ports == []
    assert view.status == "created"


def test_container_mounts_are_normalized():
    record = {
        "Id": "0123456789abcdef",
        "Names": ["/app"],
        "State": "running",
        "Mounts": [
            {"Type": "volume", "Name": "data", "Source": "/var/lib/docker/volumes/data/_data",
             "Destination": "/data", "Mode": "z", "RW": False},
        ],
    }

    view = normalizer.normalize_container(record)

    assert view.mounts[0].name == "data"
    assert view.mounts[0].destination == "/data"
    assert view.mounts[0].rw is False


def test_container_detail_from_inspect():
    details = {
        "Id": "abcdef0123456789abcdef",
        "Name": "/web",
        "Created": "2024-01-01T10:00:00.123456789Z",
        "RestartCount": 2,
        "State": {"Status": "running", "ExitCode": 0, "StartedAt": "2024-01-01T10:00:01Z"},
        "Config": {"Image": "nginx:latest", "Cmd": ["nginx", "-g", "daemon off;"], "Env": ["A=1"], "Labels": None},
        "NetworkSettings": {"Ports": {"80/tcp": [{"HostIp": "0.0.0.0", "HostPort": "8080"}], "443/tcp": None}},
        "Mounts": None,
    }

    view = normalizer.normalize_container_detail(details)

    assert view.id == "abcdef012345"
    assert view.fullId == "abcdef0123456789abcdef"
    assert view.name == "web"
    assert view.command == "nginx -g daemon off;"
    assert view.env == ["A=1"]
    assert view.restartCount == 2
    assert view.labels == {}
    assert view.mounts == []
    ports = {p.internal: p for p in view.ports}
    assert ports[80].external == 8080
    assert ports[443].external is None


# ---------------------------
# Images
# ---------------------------
def test_image_with_tags():
    record = {
        "Id": "sha256:9a0b8c7d6e5f4a3b2c1d",
        "RepoTags": ["nginx:1.25", "nginx:latest"],
        "RepoDigests": ["nginx@sha256:feed"],
        "Size": 104857600,
        "Created": 1700000000,
    }

    view = normalizer.normalize_image(record, {"Architecture": "amd64", "Os": "linux"})

    assert view.id == "9a0b8c7d6e5f"
    assert view.repository == "nginx"
    assert view.tag == "1.25"
    assert view.size == "100.00 MB"
    assert view.tags == ["nginx:1.25", "nginx:latest"]
    assert view.digests == ["nginx@sha256:feed"]
    assert view.architecture == "amd64"
    assert view.os == "linux"


@pytest.mark.parametrize("repo_tags", [None, [], ["<none>:<none>"]])
def test_untagged_image_uses_none_sentinel(repo_tags):
    view = normalizer.normalize_image({"Id": "sha256:0123456789abcdef", "RepoTags": repo_tags, "Size": 0})

    assert view.repository == "<none>"
    assert view.tag == "<none>"
    assert view.tags == []
    assert view.digests == []
    assert view.size == "0 B"
    assert view.architecture is None


def test_image_with_registry_port():
    view = normalizer.normalize_image({"Id": "sha256:0123456789abcdef", "RepoTags": ["localhost:5000/app:v1"]})

    assert view.repository == "localhost:5000/app"
    assert view.tag == "v1"


# ---------------------------
# Volumes
# ---------------------------
def test_volume_without_usage_data_has_null_size():
    record = {
        "Name": "data",
        "Driver": "local",
        "Mountpoint": "/var/lib/docker/volumes/data/_data",
        "CreatedAt": "2024-01-01T10:00:00Z",
        "Labels": None,
        "Scope": "local",
    }

    view = normalizer.normalize_volume(record)

    assert view.name == "data"
    assert view.size is None
    assert view.labels == {}
    assert view.scope == "local"
    assert view.created == "2024-01-01T10:00:00Z"


def test_volume_usage_size():
    assert normalizer.normalize_volume({"Name": "v", "UsageData": {"Size": 2048, "RefCount": 1}}).size == "2.00 KB"
    assert normalizer.normalize_volume({"Name": "v", "UsageData": {"Size": -1, "RefCount": -1}}).size is None
