"""
Unit tests for metric projection.

Tests the built-in metric list, rounding at the half boundary, counter and
operationalized metric projection, and per-metric failure isolation.
"""

import math

import pytest

from quickpulse.constants import TOP_CPU_MAX_PROCESSES
from quickpulse.metrics import (
    BUILT_IN_METRICS,
    create_operationalized_metrics,
    project_documents,
    project_metrics,
    project_top_cpu,
    round_metric_value,
)
from quickpulse.models import (
    AccumulatedValue,
    AggregationType,
    EventTelemetryDocument,
    MetricPoint,
    ProcessCpuData,
    QuickPulseDataSample,
)


@pytest.mark.unit
class TestRounding:
    """Rounding to 4 decimal places, half away from zero."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.12344999, 0.1234),
            (0.12345001, 0.1235),
            (0.12345, 0.1235),
            (-0.12345, -0.1235),
            (0.00005, 0.0001),
            (-0.00005, -0.0001),
            (0.00004999, 0.0),
            (1.0, 1.0),
            (123456.789012, 123456.789),
        ],
    )
    def test_round_half_away_from_zero(self, value, expected):
        assert round_metric_value(value) == expected

    def test_large_values_keep_magnitude(self):
        assert round_metric_value(1e25) == 1e25

    def test_non_finite_values_pass_through(self):
        assert math.isnan(round_metric_value(float("nan")))
        assert round_metric_value(float("inf")) == float("inf")

    def test_integers_are_accepted(self):
        assert round_metric_value(3) == 3.0


@pytest.mark.unit
class TestBuiltInMetrics:
    """The nine built-in metrics are always present and come first."""

    def test_empty_sample_has_exactly_nine_metrics(self):
        metrics = project_metrics(QuickPulseDataSample())

        assert len(metrics) == 9
        assert [m.name for m in metrics] == [name for name, _, _ in BUILT_IN_METRICS]
        assert all(m.value == 0.0 for m in metrics)

    def test_built_in_names_and_weights(self, data_sample):
        metrics = {m.name: m for m in project_metrics(data_sample)[:9]}

        assert metrics[r"\ApplicationInsights\Requests/Sec"] == MetricPoint(
            r"\ApplicationInsights\Requests/Sec", 2.1235, 1
        )
        assert metrics[r"\ApplicationInsights\Request Duration"].weight == 4
        assert metrics[r"\ApplicationInsights\Request Duration"].value == 150.25
        assert metrics[r"\ApplicationInsights\Dependency Call Duration"].weight == 2
        assert metrics[r"\ApplicationInsights\Exceptions/Sec"].value == 0.25
        assert metrics[r"\ApplicationInsights\Requests Failed/Sec"].weight == 1

    def test_full_sample_order(self, data_sample):
        metrics = project_metrics(data_sample)

        assert len(metrics) == 9 + 2 + 2
        assert metrics[9] == MetricPoint(r"\Processor(_Total)\% Processor Time", 12.3457, 1)
        assert metrics[10] == MetricPoint(r"\Memory\Committed Bytes", 1024.0, 1)
        assert metrics[11] == MetricPoint("Metric1", 2.3333, 3)
        assert metrics[12] == MetricPoint("Metric2", 4.0, 2)


@pytest.mark.unit
class TestOperationalizedMetrics:
    """Operationalized metric projection and failure isolation."""

    def test_weight_is_number_of_values(self):
        sample = QuickPulseDataSample(
            metric_accumulators=[AccumulatedValue("m", AggregationType.MAX, [3.0, 9.0, 1.0, 2.0])]
        )

        assert create_operationalized_metrics(sample) == [MetricPoint("m", 9.0, 4)]

    def test_empty_series_has_zero_weight(self):
        sample = QuickPulseDataSample(
            metric_accumulators=[AccumulatedValue("m", AggregationType.AVG, [])]
        )

        assert create_operationalized_metrics(sample) == [MetricPoint("m", 0.0, 0)]

    def test_failing_metric_is_skipped(self, data_sample, caplog):
        data_sample.metric_accumulators.insert(
            1, AccumulatedValue("Broken", "Median", [1.0])
        )

        metrics = project_metrics(data_sample)

        names = [m.name for m in metrics]
        assert "Broken" not in names
        assert names[-2:] == ["Metric1", "Metric2"]
        assert len(metrics) == 9 + 2 + 2
        assert "Broken" in caplog.text

    def test_aggregator_exception_does_not_stop_others(self):
        sample = QuickPulseDataSample(
            metric_accumulators=[
                AccumulatedValue("first", AggregationType.SUM, [1.0]),
                AccumulatedValue("second", AggregationType.SUM, [2.0]),
            ]
        )

        def flaky(values, aggregation_type):
            if values == [1.0]:
                raise RuntimeError("definition removed")
            return sum(values)

        metrics = create_operationalized_metrics(sample, aggregator=flaky)

        assert metrics == [MetricPoint("second", 2.0, 1)]


@pytest.mark.unit
class TestDocumentsAndTopCpu:
    """Document ordering and top-CPU projection."""

    def test_documents_are_reversed(self):
        documents = [EventTelemetryDocument(id=str(i), name=f"event-{i}") for i in range(5)]
        sample = QuickPulseDataSample(telemetry_documents=list(documents))

        assert project_documents(sample) == list(reversed(documents))
        # The sample itself is left untouched.
        assert sample.telemetry_documents == documents

    def test_no_documents(self):
        assert project_documents(QuickPulseDataSample()) == []

    def test_top_cpu_entries(self, data_sample):
        assert project_top_cpu(data_sample) == [
            ProcessCpuData("python", 42.5),
            ProcessCpuData("nginx", 3.25),
        ]

    def test_empty_top_cpu_is_none(self):
        assert project_top_cpu(QuickPulseDataSample()) is None

    def test_top_cpu_is_capped(self):
        sample = QuickPulseDataSample(
            top_cpu_data=[(f"proc-{i}", float(50 - i)) for i in range(TOP_CPU_MAX_PROCESSES + 3)]
        )

        processes = project_top_cpu(sample)

        assert len(processes) == TOP_CPU_MAX_PROCESSES
        assert processes[0] == ProcessCpuData("proc-0", 50.0)
