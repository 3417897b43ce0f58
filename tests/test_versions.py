import pytest

from mavengrab.modules.grape.exceptions import VersionResolutionError
from mavengrab.modules.grape.resolver import MavenVersion, VersionRange, is_dynamic, select_version


@pytest.mark.parametrize(
    "lower, higher",
    [
        ("1.9", "1.10"),
        ("1.0-alpha-1", "1.0-beta"),
        ("1.0-RC1", "1.0"),
        ("1.0-SNAPSHOT", "1.0"),
        ("1.0", "1.0-sp1"),
        ("1.0", "1.0.1"),
        ("2.0.0.M1", "2.0.0.RC1"),
    ],
)
def test_version_ordering(lower, higher):
    assert MavenVersion(lower) < MavenVersion(higher)


def test_equivalent_versions():
    assert MavenVersion("1.0") == MavenVersion("1.0.0")
    assert MavenVersion("1.0.RELEASE") == MavenVersion("1.0")
    assert hash(MavenVersion("1.0")) == hash(MavenVersion("1.0.0"))


def test_ranges():
    assert VersionRange("[1.0,2.0)").contains("1.5")
    assert not VersionRange("[1.0,2.0)").contains("2.0")
    assert VersionRange("[1.5,)").contains("9")
    assert VersionRange("(,1.0]").contains("1.0")
    assert VersionRange("[1.2]").contains("1.2.0")
    assert not VersionRange("[1.0,1.2),(1.2,)").contains("1.2")
    with pytest.raises(VersionResolutionError):
        VersionRange("1.0,2.0")


def test_is_dynamic():
    assert is_dynamic("*")
    assert is_dynamic("latest.release")
    assert is_dynamic("1.+")
    assert is_dynamic("[1.0,)")
    assert not is_dynamic("1.0")


def test_select_version():
    available = ["1.0", "1.1", "1.2-SNAPSHOT", "2.0-M1", "1.10"]

    assert select_version("*", available) == "2.0-M1"
    assert select_version("latest.release", available) == "2.0-M1"
    assert select_version("1.+", available) == "1.10"
    assert select_version("[1.0,1.1]", available) == "1.1"
    with pytest.raises(VersionResolutionError):
        select_version("[3.0,)", available)
