"""Tests for engine tracing."""

from decimal import Decimal

import pytest

from procurement_engines.tracer import compute_input_fingerprint, traced_engine
from procurement_kernel.domain.catalog import RankingCriterion


@traced_engine("sample_engine", "2.1", fingerprint_fields=("amount", "criterion"))
def _sample(amount, criterion=RankingCriterion.PRIORITY):
    return amount


class TestFingerprint:

    def test_deterministic(self):
        kwargs = {"amount": Decimal("1.50"), "criterion": RankingCriterion.PRICE}

        assert compute_input_fingerprint(("amount", "criterion"), kwargs) == (
            compute_input_fingerprint(("amount", "criterion"), dict(kwargs))
        )

    def test_sensitive_to_values(self):
        a = compute_input_fingerprint(("amount",), {"amount": Decimal("1.50")})
        b = compute_input_fingerprint(("amount",), {"amount": Decimal("1.51")})

        assert a != b

    def test_missing_field_is_null(self):
        assert compute_input_fingerprint(("x",), {}) == compute_input_fingerprint(
            ("x",), {"x": None}
        )


class TestTracedEngine:

    def test_emits_trace_record(self, captured_logs):
        assert _sample(Decimal("3")) == Decimal("3")

        traces = [r for r in captured_logs() if r["message"] == "PROCUREMENT_ENGINE_TRACE"]
        assert len(traces) == 1
        assert traces[0]["engine_name"] == "sample_engine"
        assert traces[0]["engine_version"] == "2.1"
        assert traces[0]["function"] == "_sample"
        assert traces[0]["outcome"] == "ok"

    def test_positional_and_keyword_calls_share_fingerprint(self, captured_logs):
        _sample(Decimal("3"), RankingCriterion.PRICE)
        _sample(amount=Decimal("3"), criterion=RankingCriterion.PRICE)

        traces = [r for r in captured_logs() if r["message"] == "PROCUREMENT_ENGINE_TRACE"]
        assert traces[0]["input_fingerprint"] == traces[1]["input_fingerprint"]

    def test_failed_call_traced_and_reraised(self, captured_logs):
        @traced_engine("failing_engine", "1.0")
        def _fail():
            raise ValueError("bad input")

        with pytest.raises(ValueError):
            _fail()

        (trace,) = [r for r in captured_logs() if r["message"] == "PROCUREMENT_ENGINE_TRACE"]
        assert trace["outcome"] == "ValueError"

    def test_generators_not_consumed(self):
        items = (i for i in range(3))

        compute_input_fingerprint(("items",), {"items": items})

        assert list(items) == [0, 1, 2]


class TestFingerprintScale:

    def test_decimal_scale_matters(self):
        assert compute_input_fingerprint(("q",), {"q": Decimal("8.00")}) != (
            compute_input_fingerprint(("q",), {"q": Decimal("8")})
        )
