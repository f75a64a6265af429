"""Risk drivers: the scale primitive and a single dispatch over driver kinds.

A driver is a tagged variant: a ``DriverKind`` plus the payload that kind
reads (bands, buckets or categories). Rubric tables are pure data built from
these frozen dataclasses; ``evaluate_driver`` is the only place that
interprets them.

Evaluation kinds:
  continuous  piecewise-linear over ordered bands
  inverse     continuous with each band's points reversed
  protective  continuous, negative points allowed
  discrete    first matching bucket (numeric span or exact value)
  category    joint staging of two metrics plus additive extras
"""

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .models import ContributionStatus, DriverContribution, DriverKind

Metrics = Mapping[str, Any]

_BAND_KINDS = (DriverKind.CONTINUOUS, DriverKind.INVERSE, DriverKind.PROTECTIVE)


def _bound(value: float) -> float | None:
    # JSON has no infinity; open ends render as null
    return value if math.isfinite(value) else None


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def scale(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
) -> float:
    """Linearly map value from [in_min, in_max] onto [out_min, out_max].

    The interpolation fraction is clamped to [0, 1], so values outside the
    input domain land on the nearest output bound. The input domain may be
    given in descending order. A degenerate domain returns out_min.
    """
    if in_max == in_min:
        return out_min
    t = _clamp((value - in_min) / (in_max - in_min), 0.0, 1.0)
    return out_min + t * (out_max - out_min)


def is_number(value: Any) -> bool:
    """True for finite ints and floats. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _fmt(value: Any) -> str:
    return f"{value:g}" if is_number(value) else str(value)


@dataclass(frozen=True)
class Band:
    """One linear sub-range: ``points`` are the contributions at low and high."""

    low: float
    high: float
    points: tuple[float, float]

    def evaluate(self, value: float, reverse: bool = False) -> float:
        start, end = self.points
        if reverse:
            start, end = end, start
        return scale(value, self.low, self.high, start, end)


@dataclass(frozen=True)
class Bucket:
    """A discrete entry matched either by an inclusive span or an exact value."""

    points: float
    span: tuple[float, float] | None = None
    value: str | bool | None = None

    def accepts(self, value: Any) -> bool:
        """Whether ``value`` has the type this bucket compares against."""
        if self.span is not None:
            return is_number(value)
        if isinstance(self.value, bool):
            return isinstance(value, bool)
        return isinstance(value, str)

    def matches(self, value: Any) -> bool:
        if not self.accepts(value):
            return False
        if self.span is not None:
            return self.span[0] <= value <= self.span[1]
        if isinstance(self.value, bool):
            return value is self.value
        return value.strip().lower() == self.value


@dataclass(frozen=True)
class Category:
    """A staging band over two metrics, each band half-open ``[low, high)``.

    With ``either`` set the category matches when either metric falls in its
    band; otherwise both must.
    """

    name: str
    systolic: tuple[float, float]
    diastolic: tuple[float, float]
    base: float
    either: bool = False

    def matches(self, systolic: float, diastolic: float) -> bool:
        s_in = self.systolic[0] <= systolic < self.systolic[1]
        d_in = self.diastolic[0] <= diastolic < self.diastolic[1]
        return (s_in or d_in) if self.either else (s_in and d_in)


@dataclass(frozen=True)
class Driver:
    """A named scoring rule; ``kind`` selects which payload fields apply."""

    name: str
    kind: DriverKind
    keys: tuple[str, ...]
    bands: tuple[Band, ...] = ()
    buckets: tuple[Bucket, ...] = ()
    categories: tuple[Category, ...] = ()
    extras: tuple["Driver", ...] = ()
    # Points for a well-typed discrete value that matches no bucket
    otherwise: float | None = None
    # None defers to the rubric default
    missing_penalty: float | None = None
    fallback: "Driver | None" = None

    def __post_init__(self) -> None:
        if not self.keys:
            raise ValueError(f"Driver {self.name!r} reads no metrics")
        if self.kind in _BAND_KINDS:
            self._validate_bands()
        elif self.kind is DriverKind.DISCRETE:
            if len(self.keys) != 1 or not self.buckets:
                raise ValueError(f"Discrete driver {self.name!r} needs one key and buckets")
        elif self.kind is DriverKind.CATEGORY:
            if len(self.keys) != 2:
                raise ValueError(f"Category driver {self.name!r} needs two keys")
            for extra in self.extras:
                if extra.kind not in _BAND_KINDS or extra.key not in self.keys:
                    raise ValueError(
                        f"Category driver {self.name!r} has invalid extra {extra.name!r}"
                    )

    def _validate_bands(self) -> None:
        if len(self.keys) != 1 or not self.bands:
            raise ValueError(f"Driver {self.name!r} needs one key and at least one band")
        ordered = tuple(sorted(self.bands, key=lambda b: b.low))
        object.__setattr__(self, "bands", ordered)

        for band in ordered:
            if band.high <= band.low:
                raise ValueError(f"Driver {self.name!r} has an empty band {band}")
            if self.kind is not DriverKind.PROTECTIVE and min(band.points) < 0:
                raise ValueError(
                    f"Only protective drivers may carry negative points ({self.name!r})"
                )
        for prev, nxt in zip(ordered, ordered[1:], strict=False):
            if prev.high != nxt.low or prev.points[1] != nxt.points[0]:
                raise ValueError(
                    f"Driver {self.name!r} bands must join without gaps or jumps "
                    f"({prev} -> {nxt})"
                )

    @property
    def key(self) -> str:
        return self.keys[0]

    @property
    def optional(self) -> bool:
        return self.missing_penalty == 0

    def penalty(self, default: float) -> float:
        return default if self.missing_penalty is None else self.missing_penalty

    def table(self) -> list[dict[str, Any]]:
        """Plain-data view of the driver payload, for API responses."""
        if self.kind in _BAND_KINDS:
            return [
                {"min": b.low, "max": b.high, "points": list(b.points)} for b in self.bands
            ]
        if self.kind is DriverKind.DISCRETE:
            rows: list[dict[str, Any]] = []
            for bucket in self.buckets:
                match = {"range": list(bucket.span)} if bucket.span else {"value": bucket.value}
                rows.append({**match, "points": bucket.points})
            if self.otherwise is not None:
                rows.append({"otherwise": True, "points": self.otherwise})
            return rows
        rows = [
            {
                "category": c.name,
                "systolic": [_bound(v) for v in c.systolic],
                "diastolic": [_bound(v) for v in c.diastolic],
                "base": c.base,
                "any": c.either,
            }
            for c in self.categories
        ]
        rows.extend({"extra": e.key, "ranges": e.table()} for e in self.extras)
        return rows


# ---------------------------------------------------------------------------
# Constructors used by the rubric tables
# ---------------------------------------------------------------------------


def band(low: float, high: float, at_low: float, at_high: float) -> Band:
    return Band(low=low, high=high, points=(at_low, at_high))


def continuous(
    key: str,
    *bands: Band,
    missing_penalty: float | None = None,
    fallback: Driver | None = None,
) -> Driver:
    return Driver(
        name=key,
        kind=DriverKind.CONTINUOUS,
        keys=(key,),
        bands=bands,
        missing_penalty=missing_penalty,
        fallback=fallback,
    )


def inverse(key: str, *bands: Band, missing_penalty: float | None = None) -> Driver:
    return Driver(
        name=key,
        kind=DriverKind.INVERSE,
        keys=(key,),
        bands=bands,
        missing_penalty=missing_penalty,
    )


def protective(key: str, *bands: Band, missing_penalty: float | None = None) -> Driver:
    return Driver(
        name=key,
        kind=DriverKind.PROTECTIVE,
        keys=(key,),
        bands=bands,
        missing_penalty=missing_penalty,
    )


def discrete(
    key: str,
    *buckets: Bucket,
    otherwise: float | None = None,
    missing_penalty: float | None = None,
) -> Driver:
    return Driver(
        name=key,
        kind=DriverKind.DISCRETE,
        keys=(key,),
        buckets=buckets,
        otherwise=otherwise,
        missing_penalty=missing_penalty,
    )


def category(
    name: str,
    keys: tuple[str, str],
    categories: tuple[Category, ...] = (),
    extras: tuple[Driver, ...] = (),
    missing_penalty: float | None = None,
) -> Driver:
    return Driver(
        name=name,
        kind=DriverKind.CATEGORY,
        keys=keys,
        categories=categories,
        extras=extras,
        missing_penalty=missing_penalty,
    )


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

# An evaluator returns (points, detail) or None when its input is absent or
# malformed.
Evaluation = tuple[float, str] | None


def _evaluate_bands(driver: Driver, metrics: Metrics) -> Evaluation:
    value = metrics.get(driver.key)
    if not is_number(value):
        return None
    # Values below the domain use the first band, above it the last.
    selected = driver.bands[-1]
    for candidate in driver.bands:
        if value < candidate.high:
            selected = candidate
            break
    points = selected.evaluate(value, reverse=driver.kind is DriverKind.INVERSE)
    return points, f"{driver.key}={_fmt(value)}"


def _evaluate_discrete(driver: Driver, metrics: Metrics) -> Evaluation:
    value = metrics.get(driver.key)
    if value is None or not any(b.accepts(value) for b in driver.buckets):
        return None
    for bucket in driver.buckets:
        if bucket.matches(value):
            return bucket.points, f"{driver.key}={_fmt(value)}"
    if driver.otherwise is not None:
        return driver.otherwise, f"{driver.key}={_fmt(value)} (outside listed values)"
    return None


def _evaluate_category(driver: Driver, metrics: Metrics) -> Evaluation:
    first, second = (metrics.get(k) for k in driver.keys)
    if not (is_number(first) and is_number(second)):
        return None

    base, stage = 0.0, ""
    for cat in driver.categories:
        if cat.matches(first, second):
            base, stage = cat.base, cat.name
            break

    points = base
    for extra in driver.extras:
        result = _EVALUATORS[extra.kind](extra, metrics)
        if result is not None:
            points += result[0]

    reading = f"{_fmt(first)}/{_fmt(second)}"
    detail = f"{stage} ({reading})" if stage else reading
    return points, detail


_EVALUATORS: dict[DriverKind, Callable[[Driver, Metrics], Evaluation]] = {
    DriverKind.CONTINUOUS: _evaluate_bands,
    DriverKind.INVERSE: _evaluate_bands,
    DriverKind.PROTECTIVE: _evaluate_bands,
    DriverKind.DISCRETE: _evaluate_discrete,
    DriverKind.CATEGORY: _evaluate_category,
}


def evaluate_driver(
    driver: Driver,
    metrics: Metrics,
    default_penalty: float = 0.0,
) -> DriverContribution:
    """Evaluate one driver against a metrics record.

    Falls back to ``driver.fallback`` when the primary metric is absent, and
    to the missing-data penalty when both are.
    """
    result = _EVALUATORS[driver.kind](driver, metrics)
    status = ContributionStatus.EVALUATED

    if result is None and driver.fallback is not None:
        result = _EVALUATORS[driver.fallback.kind](driver.fallback, metrics)
        status = ContributionStatus.FALLBACK

    if result is None:
        keys = driver.keys + (driver.fallback.keys if driver.fallback else ())
        return DriverContribution(
            driver=driver.name,
            keys=list(driver.keys),
            kind=driver.kind,
            points=driver.penalty(default_penalty),
            status=ContributionStatus.MISSING,
            detail=f"missing {' / '.join(keys)}",
        )

    points, detail = result
    return DriverContribution(
        driver=driver.name,
        keys=list(driver.keys),
        kind=driver.kind,
        points=points,
        status=status,
        detail=detail,
    )
