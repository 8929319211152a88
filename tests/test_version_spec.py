import pytest

from codependence.models import VersionSpec
from codependence.parsers.version_spec import parse


@pytest.mark.parametrize(
    ("raw", "specifier", "bare"),
    [
        ("^1.0.0", "^", "1.0.0"),
        ("~2.3.4", "~", "2.3.4"),
        ("1.2.3", "", "1.2.3"),
        (">=1.0.0", "", ">=1.0.0"),
        ("^", "^", ""),
        ("", "", ""),
        ("^^1.0.0", "^", "^1.0.0"),
        ("latest", "", "latest"),
    ],
)
def test_parse_inspects_only_first_character(raw: str, specifier: str, bare: str) -> None:
    spec = parse(raw)
    assert spec == VersionSpec(specifier=specifier, bare_version=bare)
    assert spec.specifier + spec.bare_version == raw
    assert str(spec) == raw


def test_version_spec_rejects_unknown_specifier() -> None:
    with pytest.raises(ValueError):
        VersionSpec(specifier=">", bare_version="1.0.0")
