import pytest

from wajs.core.errors import ValidationError
from wajs.utils.versions import compare_wweb_versions


def test_compare_pads_shorter_operand() -> None:
    assert compare_wweb_versions("2.2335.6", ">=", "2.2335.6")
    assert compare_wweb_versions("2.2334.12", "<", "2.2335.6")
    assert compare_wweb_versions("2.3000.1010", ">", "2.2335.6")
    assert compare_wweb_versions("2.2335.6", "=", "2.2335.6")


def test_beta_suffix_is_ignored() -> None:
    assert compare_wweb_versions("2.2335.6-beta", "=", "2.2335.6")


def test_invalid_operator_or_operand_raises() -> None:
    with pytest.raises(ValidationError):
        compare_wweb_versions("2.1", "!=", "2.2")
    with pytest.raises(ValidationError):
        compare_wweb_versions(2.1, ">", "2.2")
    with pytest.raises(ValidationError):
        compare_wweb_versions("2.x", ">", "2.2")
