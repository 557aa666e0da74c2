"""
Unit tests for Result<T> pattern.
"""

import pytest

from registry_sync.models.result import Result, ResultStatus


class TestResult:
    """Test cases for Result class."""

    def test_success_creation(self):
        """Test creating a successful result."""
        result = Result.success(["2024-09-02T08:00"], "Loaded 1 record")

        assert result.is_success
        assert not result.is_failure
        assert result.status == ResultStatus.SUCCESS
        assert result.value == ["2024-09-02T08:00"]
        assert result.message == "Loaded 1 record"
        assert result.error is None

    def test_failure_creation(self):
        """Test creating a failure result."""
        error = OSError("No such file")
        result = Result.failure("Could not read registry page", error)

        assert result.is_failure
        assert not result.is_success
        assert result.status == ResultStatus.FAILURE
        assert result.value is None
        assert result.message == "Could not read registry page"
        assert result.error is error

    def test_unwrap_failure_raises(self):
        """Test unwrapping failure raises exception."""
        result = Result.failure("Registry snapshot not found")

        with pytest.raises(ValueError, match="Cannot unwrap failure result"):
            result.unwrap()

    def test_unwrap_or(self):
        """Test unwrap_or on both outcomes."""
        assert Result.success([1, 2]).unwrap_or([]) == [1, 2]
        assert Result.failure("Error").unwrap_or([]) == []

    def test_map_success(self):
        """Test mapping over successful result."""
        mapped = Result.success(["a", "b", "c"]).map(len)

        assert mapped.is_success
        assert mapped.value == 3

    def test_map_failure_passes_through(self):
        """Test mapping over failure keeps message and error."""
        error = RuntimeError("boom")
        mapped = Result.failure("Error", error).map(len)

        assert mapped.is_failure
        assert mapped.message == "Error"
        assert mapped.error is error

    def test_map_with_exception(self):
        """Test mapping with function that raises exception."""
        mapped = Result.success(5).map(lambda x: 1 / 0)

        assert mapped.is_failure
        assert isinstance(mapped.error, ZeroDivisionError)

    def test_success_with_none_value(self):
        """Gateways report success with a None value."""
        result = Result.success(None, "dry run")

        assert result.is_success
        assert result.value is None
        assert result.unwrap() is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
