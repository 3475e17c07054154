"""Tests for the built-in fact catalog and its resolvers."""

import logging

import pytest

from hostfacts.core.config import EngineConfig
from hostfacts.core.errors import ConfigurationError
from hostfacts.core.models import FactType, ResolvedFact
from hostfacts.facts import build_fact_resolver
from hostfacts.facts.release import release_hash_from_string
from hostfacts.resolvers.os_release import OsReleaseResolver, parse_os_release
from hostfacts.resolvers.release_file import ReleaseFileResolver

GENTOO_OS_RELEASE = """\
NAME=Gentoo
ID=gentoo
PRETTY_NAME="Gentoo Linux"
# comment
VERSION_ID='2007.0'
HOME_URL="https://www.gentoo.org/"
"""


@pytest.fixture
def os_release_file(tmp_path):
    path = tmp_path / "os-release"
    path.write_text(GENTOO_OS_RELEASE)
    return path


@pytest.fixture
def linux_resolver(os_release_file):
    resolver = build_fact_resolver(EngineConfig(os_release_path=str(os_release_file)))
    resolver.probes.register("kernel", lambda: "Linux")
    yield resolver
    resolver.reset()


class TestReleaseHash:
    """Tests for release_hash_from_string."""

    def test_major_minor(self):
        assert release_hash_from_string("2007.0") == {"full": "2007.0", "major": "2007", "minor": "0"}

    def test_major_only(self):
        assert release_hash_from_string("9") == {"full": "9", "major": "9"}

    def test_patch(self):
        assert release_hash_from_string("1.2.3") == {"full": "1.2.3", "major": "1", "minor": "2"}
        assert release_hash_from_string("1.2.3", include_patch=True)["patch"] == "3"

    def test_missing(self):
        assert release_hash_from_string(None) is None
        assert release_hash_from_string("") is None


class TestOsReleaseResolver:
    """Tests for OsReleaseResolver."""

    def test_parse(self):
        values = parse_os_release(GENTOO_OS_RELEASE)
        assert values["id"] == "gentoo"
        assert values["pretty_name"] == "Gentoo Linux"
        assert values["version_id"] == "2007.0"
        assert "# comment" not in values

    def test_single_read_for_all_keys(self, os_release_file):
        resolver = OsReleaseResolver(str(os_release_file))
        assert resolver.resolve("id") == "gentoo"
        os_release_file.unlink()
        assert resolver.resolve("version_id") == "2007.0"
        assert resolver.cache.fill_count == 1

    def test_missing_file_is_absent(self, tmp_path):
        assert OsReleaseResolver(str(tmp_path / "nope")).resolve("id") is None


class TestReleaseFileResolver:
    """Tests for ReleaseFileResolver."""

    def test_version_from_first_line(self, tmp_path):
        path = tmp_path / "gentoo-release"
        path.write_text("Gentoo Base System release 2.7\n")
        assert ReleaseFileResolver().resolve("release", release_file=str(path)) == "2.7"

    def test_version_from_regex_group(self, tmp_path):
        path = tmp_path / "azurelinux-release"
        path.write_text("AZURELINUX_BUILD_NUMBER=3.0.20240101\nNAME=azl\n")
        value = ReleaseFileResolver().resolve(
            "release",
            release_file=str(path),
            regex=r"AZURELINUX_BUILD_NUMBER=([0-9.]+)",
        )
        assert value == "3.0.20240101"

    def test_regex_without_match_is_absent(self, tmp_path):
        path = tmp_path / "azurelinux-release"
        path.write_text("NAME=azl\n")
        assert ReleaseFileResolver().resolve("release", release_file=str(path), regex=r"BUILD=(\d+)") is None

    def test_missing_file_is_absent(self, tmp_path):
        assert ReleaseFileResolver().resolve("release", release_file=str(tmp_path / "nope")) is None

    def test_release_file_option_required(self):
        with pytest.raises(ConfigurationError, match="release_file"):
            ReleaseFileResolver().resolve("release")


class TestCatalog:
    """End-to-end resolution of the built-in catalog."""

    def test_os_release_with_aliases(self, linux_resolver):
        records = linux_resolver.resolve_fact("os.release")

        assert [(r.name, r.value, r.type) for r in records] == [
            ("os.release", {"full": "2007.0", "major": "2007", "minor": "0"}, FactType.CORE),
            ("operatingsystemmajrelease", "2007", FactType.LEGACY),
            ("operatingsystemrelease", "2007.0", FactType.LEGACY),
        ]

    def test_os_distro_aggregate(self, linux_resolver):
        (record,) = linux_resolver.resolve_fact("os.distro")
        assert record.value == {
            "id": "gentoo",
            "description": "Gentoo Linux",
            "codename": None,
            "release": {"full": "2007.0", "major": "2007", "minor": "0"},
        }

    def test_linux_facts_absent_elsewhere(self, os_release_file):
        resolver = build_fact_resolver(EngineConfig(os_release_path=str(os_release_file)))
        resolver.probes.register("kernel", lambda: "windows")

        assert resolver.resolve_fact("os.release") == [ResolvedFact("os.release", None)]
        assert resolver.resolve_fact("identity.user") == [ResolvedFact("identity.user", None)]

    def test_identity_facts(self, linux_resolver):
        pwd = pytest.importorskip("pwd")
        import os

        expected_user = pwd.getpwuid(os.getuid()).pw_name
        records = linux_resolver.resolve_fact("identity.user")
        assert records == [
            ResolvedFact("identity.user", expected_user),
            ResolvedFact("id", expected_user, FactType.LEGACY),
        ]

        (identity,) = linux_resolver.resolve_fact("identity")
        assert identity.value["user"] == expected_user
        assert identity.value["privileged"] == (os.getuid() == 0)

    def test_resolve_all(self, linux_resolver):
        names = [r.name for r in linux_resolver.resolve_all()]
        assert names[:4] == ["os.release", "operatingsystemmajrelease", "operatingsystemrelease", "os.distro"]
        assert linux_resolver.errors == {}

    def test_os_release_prefers_release_file(self, os_release_file, tmp_path):
        release_file = tmp_path / "gentoo-release"
        release_file.write_text("Gentoo Base System release 2.7\n")
        resolver = build_fact_resolver(EngineConfig(
            os_release_path=str(os_release_file),
            release_file=str(release_file),
        ))
        resolver.probes.register("kernel", lambda: "Linux")

        assert [(r.name, r.value) for r in resolver.resolve_fact("os.release")] == [
            ("os.release", {"full": "2.7", "major": "2", "minor": "7"}),
            ("operatingsystemmajrelease", "2"),
            ("operatingsystemrelease", "2.7"),
        ]

    def test_os_release_falls_back_to_os_release_file(self, os_release_file, tmp_path):
        resolver = build_fact_resolver(EngineConfig(
            os_release_path=str(os_release_file),
            release_file=str(tmp_path / "gentoo-release"),
        ))
        resolver.probes.register("kernel", lambda: "Linux")

        (record, *aliases) = resolver.resolve_fact("os.release")
        assert record.value == {"full": "2007.0", "major": "2007", "minor": "0"}
        assert [a.value for a in aliases] == ["2007", "2007.0"]

    def test_linux_facts_null_without_release_files(self, tmp_path):
        resolver = build_fact_resolver(EngineConfig(
            os_release_path=str(tmp_path / "os-release"),
            release_file=str(tmp_path / "gentoo-release"),
        ))
        resolver.probes.register("kernel", lambda: "Linux")

        assert resolver.resolve_fact("os.release") == [ResolvedFact("os.release", None)]
        assert resolver.resolve_fact("os.distro") == [ResolvedFact("os.distro", None)]

    def test_log_level_applied(self):
        build_fact_resolver(EngineConfig(log_level="DEBUG"))
        assert logging.getLogger("hostfacts").getEffectiveLevel() == logging.DEBUG
