import string

import pytest

from image_attach.utils.naming import generate_name, to_base36


class TestToBase36:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0, "000000"), (35, "00000z"), (36, "000010"), (36**6 - 1, "zzzzzz")],
    )
    def test_encoding(self, value: int, expected: str) -> None:
        assert to_base36(value) == expected

    def test_custom_length(self) -> None:
        assert to_base36(1, length=3) == "001"

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_base36(-1)


class TestGenerateName:
    def test_six_lowercase_alphanumerics(self) -> None:
        allowed = set(string.digits + string.ascii_lowercase)

        for _ in range(200):
            name = generate_name()
            assert len(name) == 6
            assert set(name) <= allowed

    def test_names_differ(self) -> None:
        names = {generate_name() for _ in range(100)}

        # Collisions are possible but vanishingly rare at this sample size
        assert len(names) > 95
