"""Unit tests for infrastructure configuration objects."""

import logging

import pytest
from pydantic import ValidationError

from optimization_detective.domain.breakpoints import MAX_VIEWPORT_WIDTH
from optimization_detective.domain.exceptions import ConfigurationError, GroupCompleteError
from optimization_detective.domain.schema import URLMetricSchema
from optimization_detective.infrastructure.config import LogContext, URLMetricsConfig

ENV_VARS = (
    "OD_BREAKPOINT_MAX_WIDTHS",
    "OD_SAMPLE_SIZE",
    "OD_FRESHNESS_TTL",
    "OD_MIN_VIEWPORT_ASPECT_RATIO",
    "OD_MAX_VIEWPORT_ASPECT_RATIO",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every configuration variable from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestURLMetricsConfig:
    """Tests for URL Metrics configuration."""

    def test_defaults(self):
        """Test default configuration values."""
        config = URLMetricsConfig()
        assert config.breakpoint_max_widths == [480, 600, 782]
        assert config.sample_size == 3
        assert config.freshness_ttl == 86400
        assert config.minimum_viewport_aspect_ratio == 0.4
        assert config.maximum_viewport_aspect_ratio == 2.5

    def test_breakpoints_are_normalized(self):
        config = URLMetricsConfig(breakpoint_max_widths=[782, 480, 600, 480])
        assert config.breakpoint_max_widths == [480, 600, 782]

    def test_clamped_breakpoints_are_logged(self, caplog):
        config_logger = "optimization_detective.infrastructure.config"
        with caplog.at_level(logging.WARNING, logger=config_logger):
            config = URLMetricsConfig(breakpoint_max_widths=[0, 480, MAX_VIEWPORT_WIDTH])

        assert config.breakpoint_max_widths == [1, 480, MAX_VIEWPORT_WIDTH - 1]
        assert len(caplog.records) == 2
        assert "clamped" in caplog.records[0].getMessage()

    @pytest.mark.parametrize(
        "kwargs,parameter",
        [
            ({"sample_size": 0}, "sample_size"),
            ({"sample_size": -3}, "sample_size"),
            ({"freshness_ttl": -1}, "freshness_ttl"),
            ({"minimum_viewport_aspect_ratio": 0}, "minimum_viewport_aspect_ratio"),
            (
                {"minimum_viewport_aspect_ratio": 3, "maximum_viewport_aspect_ratio": 2},
                "maximum_viewport_aspect_ratio",
            ),
        ],
    )
    def test_invalid_values(self, kwargs, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            URLMetricsConfig(**kwargs)
        assert exc_info.value.parameter == parameter

    def test_zero_freshness_ttl_is_allowed(self):
        assert URLMetricsConfig(freshness_ttl=0).freshness_ttl == 0

    def test_extra_fields_forbidden(self):
        with pytest.raises(ConfigurationError) as exc_info:
            URLMetricsConfig(unknown=True)
        assert exc_info.value.parameter == "unknown"
        assert isinstance(exc_info.value.__cause__, ValidationError)

    @pytest.mark.parametrize(
        "kwargs,parameter",
        [
            ({"sample_size": "abc"}, "sample_size"),
            ({"freshness_ttl": 1.5}, "freshness_ttl"),
            ({"minimum_viewport_aspect_ratio": "narrow"}, "minimum_viewport_aspect_ratio"),
            ({"breakpoint_max_widths": [480, "wide"]}, "breakpoint_max_widths.1"),
            ({"breakpoint_max_widths": 480}, "breakpoint_max_widths"),
        ],
    )
    def test_invalid_types(self, kwargs, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            URLMetricsConfig(**kwargs)
        assert exc_info.value.parameter == parameter
        assert "Invalid configuration" in exc_info.value.message

    def test_unchanged_breakpoints_are_not_logged(self, caplog):
        config_logger = "optimization_detective.infrastructure.config"
        with caplog.at_level(logging.WARNING, logger=config_logger):
            config = URLMetricsConfig(breakpoint_max_widths=[600, 480, 480])

        assert config.breakpoint_max_widths == [480, 600]
        assert caplog.records == []

    def test_frozen(self):
        config = URLMetricsConfig()
        with pytest.raises(ValidationError):
            config.sample_size = 5

    def test_create_schema(self):
        config = URLMetricsConfig(
            minimum_viewport_aspect_ratio=0.5, maximum_viewport_aspect_ratio=2.0
        )
        schema = config.create_schema()
        assert isinstance(schema, URLMetricSchema)
        assert schema.minimum_viewport_aspect_ratio == 0.5
        assert schema.maximum_viewport_aspect_ratio == 2.0


class TestURLMetricsConfigFromEnv:
    """Tests for building the configuration from the environment."""

    def test_defaults_without_env(self, clean_env):
        assert URLMetricsConfig.from_env() == URLMetricsConfig()

    def test_reads_every_variable(self, clean_env):
        clean_env.setenv("OD_BREAKPOINT_MAX_WIDTHS", "1024, 320,640")
        clean_env.setenv("OD_SAMPLE_SIZE", "5")
        clean_env.setenv("OD_FRESHNESS_TTL", "3600")
        clean_env.setenv("OD_MIN_VIEWPORT_ASPECT_RATIO", "0.25")
        clean_env.setenv("OD_MAX_VIEWPORT_ASPECT_RATIO", "4")

        config = URLMetricsConfig.from_env()

        assert config.breakpoint_max_widths == [320, 640, 1024]
        assert config.sample_size == 5
        assert config.freshness_ttl == 3600
        assert config.minimum_viewport_aspect_ratio == 0.25
        assert config.maximum_viewport_aspect_ratio == 4.0

    def test_empty_breakpoints(self, clean_env):
        clean_env.setenv("OD_BREAKPOINT_MAX_WIDTHS", "")
        assert URLMetricsConfig.from_env().breakpoint_max_widths == []

    @pytest.mark.parametrize(
        "name,value",
        [
            ("OD_SAMPLE_SIZE", "three"),
            ("OD_FRESHNESS_TTL", "1.5"),
            ("OD_BREAKPOINT_MAX_WIDTHS", "480,wide"),
            ("OD_MIN_VIEWPORT_ASPECT_RATIO", "narrow"),
        ],
    )
    def test_unparsable_values(self, clean_env, name, value):
        clean_env.setenv(name, value)

        with pytest.raises(ConfigurationError) as exc_info:
            URLMetricsConfig.from_env()

        assert exc_info.value.parameter == name

    def test_invalid_value_from_env(self, clean_env):
        clean_env.setenv("OD_SAMPLE_SIZE", "0")
        with pytest.raises(ConfigurationError):
            URLMetricsConfig.from_env()


class TestLogContext:
    """Tests for structured logging context."""

    def test_to_dict_omits_unset_fields(self):
        context = LogContext(slug="abc", operation="store_url_metric")
        assert context.to_dict() == {"slug": "abc", "operation": "store_url_metric"}

    def test_extra_fields_are_kept(self):
        context = LogContext(slug="abc", uuid="123")
        assert context.to_dict()["uuid"] == "123"

    def test_with_error_uses_error_code(self):
        context = LogContext(slug="abc").with_error(GroupCompleteError(0, 480))

        assert context.error_code == "url_metric_group_complete"
        assert context.error_type.endswith("exceptions.GroupCompleteError")
        assert context.slug == "abc"

    def test_with_error_for_plain_exception(self):
        context = LogContext().with_error(KeyError("x"))
        assert context.error_code == "KeyError"
        assert context.error_type == "builtins.KeyError"

    def test_with_operation(self):
        context = LogContext(slug="abc", component="factory")

        updated = context.with_operation("load_url_metrics")

        assert updated.operation == "load_url_metrics"
        assert updated.component == "factory"
        assert context.operation is None
        assert context.with_operation("x", component="store").component == "store"
