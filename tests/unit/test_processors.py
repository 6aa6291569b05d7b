# tests/unit/test_processors.py
"""
Unit tests for DataNormalizer and record validation
"""
import dataclasses
import pytest

from utils.constants import SUPPORTED_HORIZONS, Horizon, Recommendation, RiskLevel
from utils.errors import ValidationError
from data.processors.normalizer import DataNormalizer
from data.processors.validator import validate_coin_record, validate_social_series
from data.storage.models import CoinRecord, HorizonMetric, SocialMetricPoint


def valid_record(**overrides) -> CoinRecord:
    metrics = [
        HorizonMetric(horizon, 60, RiskLevel.LOW, Recommendation.HOLD)
        for horizon in SUPPORTED_HORIZONS
    ]
    fields = dict(
        id="dogecoin", symbol="DOGE", name="Dogecoin", image="",
        price=0.12, change_24h=-3.5, market_cap=1.7e10,
        social_score=60, risk_level=RiskLevel.LOW,
        recommendation=Recommendation.HOLD, strategy_confidence=60,
        horizon_metrics=metrics,
    )
    fields.update(overrides)
    return CoinRecord(**fields)


@pytest.mark.unit
class TestDataNormalizer:

    def test_normalize_market_row(self):
        snapshot = DataNormalizer().normalize_market_row({
            "id": "pepe",
            "symbol": "pepe",
            "name": "Pepe",
            "image": None,
            "current_price": "0.0000012",
            "market_cap": None,
            "price_change_percentage_24h": float("nan"),
        })

        assert snapshot.symbol == "PEPE"
        assert snapshot.image == ""
        assert snapshot.price == pytest.approx(0.0000012)
        assert snapshot.market_cap == 0.0
        assert snapshot.change_24h == 0.0

    def test_missing_id_rejected(self):
        with pytest.raises(ValueError):
            DataNormalizer().normalize_market_row({"symbol": "x"})


@pytest.mark.unit
class TestValidator:
    """Test cases for record invariants"""

    def test_valid_record_passes(self):
        record = valid_record()
        assert validate_coin_record(record) is record

    def test_non_finite_price_rejected(self):
        with pytest.raises(ValidationError):
            validate_coin_record(valid_record(price=float("inf")))

    def test_missing_horizon_rejected(self):
        record = valid_record()
        record.horizon_metrics = record.horizon_metrics[:3]
        with pytest.raises(ValidationError):
            validate_coin_record(record)

    def test_top_level_must_mirror_default_horizon(self):
        with pytest.raises(ValidationError):
            validate_coin_record(valid_record(recommendation=Recommendation.BUY))

    def test_out_of_range_score_rejected(self):
        record = valid_record()
        record.horizon_metrics[0] = dataclasses.replace(record.horizon_metrics[0], social_score=140)
        with pytest.raises(ValidationError):
            validate_coin_record(record)

    def test_social_series_checks(self):
        series = [
            SocialMetricPoint("2024-03-14", 10, 20, 30, 40),
            SocialMetricPoint("2024-03-15", 10, 20, 30, 40),
        ]
        validate_social_series(series, Horizon.H24)

        with pytest.raises(ValidationError):
            validate_social_series(list(reversed(series)), Horizon.H24)
        with pytest.raises(ValidationError):
            validate_social_series(series, Horizon.D7)
        with pytest.raises(ValidationError):
            validate_social_series(
                [series[0], SocialMetricPoint("2024-03-15", 10, 120, 30, 40)], Horizon.H24
            )


@pytest.mark.unit
class TestCoinRecordSerialization:

    def test_json_round_trip(self):
        record = valid_record()
        restored = CoinRecord.from_json(record.to_json())
        assert restored == record
        assert restored.metric_for(Horizon.D90).social_score == 60
