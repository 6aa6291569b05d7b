"""
Data Validator - Record integrity checks for the Meme-Coin Engine

A record must pass these checks before it may be cached or serialized.
"""

import math
from typing import List

import orjson
from loguru import logger

from utils.constants import DEFAULT_HORIZON, SUPPORTED_HORIZONS, METRIC_MAX, METRIC_MIN
from utils.errors import ValidationError
from data.collectors.social_signals import horizon_days
from data.storage.models import CoinRecord, SocialMetricPoint


def _check_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValidationError(f"{name} is not a finite number: {value!r}")


def validate_social_series(series: List[SocialMetricPoint], horizon) -> None:
    """Series must be non-empty, date-ascending, bounded and horizon-sized"""
    expected = horizon_days(horizon) + 1
    if len(series) != expected:
        raise ValidationError(f"Expected {expected} points for {horizon}, got {len(series)}")

    dates = [point.date for point in series]
    if dates != sorted(dates):
        raise ValidationError("Social series is not date-ascending")

    for point in series:
        for value in point.values():
            _check_finite(f"social metric on {point.date}", value)
            if not METRIC_MIN <= value <= METRIC_MAX:
                raise ValidationError(f"Social metric out of range on {point.date}: {value}")


def validate_coin_record(record: CoinRecord) -> CoinRecord:
    """
    Check the CoinRecord invariants

    Raises:
        ValidationError: on any broken invariant or serialization failure
    """
    for name in ("price", "change_24h", "market_cap", "social_score", "strategy_confidence"):
        _check_finite(name, getattr(record, name))

    horizons = [metric.horizon for metric in record.horizon_metrics]
    if horizons != list(SUPPORTED_HORIZONS):
        raise ValidationError(
            f"{record.id}: expected one metric per horizon {[h.value for h in SUPPORTED_HORIZONS]}, "
            f"got {[h.value for h in horizons]}"
        )

    for metric in record.horizon_metrics:
        _check_finite(f"{metric.horizon.value} social_score", metric.social_score)
        if not METRIC_MIN <= metric.social_score <= METRIC_MAX:
            raise ValidationError(f"{record.id}: social score out of range: {metric.social_score}")

    default = record.metric_for(DEFAULT_HORIZON)
    if (record.social_score, record.risk_level, record.recommendation) != (
        default.social_score, default.risk_level, default.recommendation
    ):
        raise ValidationError(f"{record.id}: top-level scores do not mirror the {DEFAULT_HORIZON.value} metric")

    try:
        orjson.dumps(record.to_dict())
    except (TypeError, orjson.JSONEncodeError) as e:
        raise ValidationError(f"{record.id}: record is not serializable: {e}") from e

    logger.trace(f"Validated record {record.id}")
    return record
