"""Tests for domain exceptions."""

import pytest

from optimization_detective.domain.exceptions import (
    CapacityError,
    ConfigurationError,
    GroupCompleteError,
    InvalidArgumentError,
    OutOfRangeError,
    RequiredPropertyError,
    StorageError,
    URLMetricsError,
    ValidationError,
)


class TestURLMetricsError:
    """Test cases for the base exception."""

    def test_basic(self):
        """Test basic creation."""
        error = URLMetricsError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details == {}
        assert error.http_status == 500

    def test_with_details(self):
        """Test creation with details."""
        error = URLMetricsError("Error occurred", {"slug": "abc"})
        assert error.details["slug"] == "abc"


class TestValidationError:
    """Test cases for ValidationError."""

    def test_errors_are_carried_in_details(self):
        errors = [{"loc": "viewport.width", "msg": "Input should be greater than or equal to 1"}]
        error = ValidationError("Invalid", errors=errors)
        assert error.errors == errors
        assert error.details["errors"] == errors
        assert error.code == "rest_invalid_param"
        assert error.http_status == 400

    def test_required_property_error(self):
        error = RequiredPropertyError("url", "a URL Metric")
        assert isinstance(error, ValidationError)
        assert error.key == "url"
        assert "url" in str(error)


class TestRangeAndCapacityErrors:
    """Test cases for errors a REST layer maps to distinct responses."""

    def test_out_of_range_is_invalid_argument(self):
        error = OutOfRangeError(700, 0, 480)
        assert isinstance(error, InvalidArgumentError)
        assert error.http_status == 400
        assert error.viewport_width == 700
        assert error.details["maximum_viewport_width"] == 480

    def test_group_complete_error(self):
        error = GroupCompleteError(481, 600)
        assert error.code == "url_metric_group_complete"
        assert error.http_status == 403
        assert error.details == {"minimum_viewport_width": 481, "maximum_viewport_width": 600}

    def test_capacity_error_alias(self):
        assert CapacityError is GroupCompleteError

    def test_capacity_is_distinguishable_from_validation(self):
        with pytest.raises(CapacityError):
            raise GroupCompleteError(0, 480)
        assert not issubclass(GroupCompleteError, ValidationError)
        assert not issubclass(OutOfRangeError, ValidationError)


class TestConfigurationAndStorageErrors:
    """Test cases for adapter-side and construction errors."""

    def test_configuration_error_parameter(self):
        error = ConfigurationError("Bad sample size", parameter="sample_size")
        assert error.parameter == "sample_size"
        assert error.details["parameter"] == "sample_size"

    def test_storage_error(self):
        error = StorageError("Write failed", slug="abc", operation="append")
        assert isinstance(error, URLMetricsError)
        assert error.details == {"slug": "abc", "operation": "append"}

    def test_storage_error_without_context(self):
        assert StorageError("Write failed").details == {}
