"""Tests for gazer._errors."""

import pytest

from gazer._errors import ConfigError, EditorError, GazerError, HistoryError, ProtocolError


class TestErrorHierarchy:
    """All gazer errors inherit from GazerError."""

    def test_gazer_error_is_exception(self) -> None:
        assert issubclass(GazerError, Exception)

    @pytest.mark.parametrize("error_cls", [ConfigError, HistoryError, ProtocolError, EditorError])
    def test_catchable_as_gazer_error(self, error_cls: type[GazerError]) -> None:
        with pytest.raises(GazerError, match="boom"):
            raise error_cls("boom")
