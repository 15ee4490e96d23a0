"""Closed set of numeric measurements recorded per location.

Values are the column names used by the observation store, so a selector
coming from config or the command line can be checked here before any row
retrieval happens.
"""

from __future__ import annotations

from enum import Enum

from weatherseries.errors import UnknownMeasurementError


class Measurement(str, Enum):
    TEMP_C = "tempC"
    FEELS_LIKE_TEMP_C = "feelsLikeTempC"
    DEW_POINT_C = "dewPointC"
    WET_BULB_TEMP = "wetBulbTemp"
    MAXIMUM_TEMP_C = "maximumTempC"
    MINIMUM_TEMP_C = "minimumTempC"
    AVERAGE_WIND_SPEED_KM = "averageWindSpeedKm"
    AVERAGE_WIND_SPD_KNOTS = "averageWindSpdKnots"
    GUST_KMH = "gustKmh"
    MAXIMUM_GUST_KMH = "maximumGustKmh"
    MAXIMUM_GUST_SPD_KNOTS = "maximumGustSpdKnots"
    WIND_GUST_SPD_KNOTS = "windGustSpdKnots"
    WIND_DIR_DEG = "windDirDeg"
    RELATIVE_HUMIDITY_PCT = "relativeHumidityPct"
    PRESSURE = "pressure"
    PRESSURE_MSLP = "pressureMSLP"
    QNH_PRESSURE = "qnhPressure"
    PRECIPITATION_SINCE_9AM_MM = "precipitationSince9amMM"
    RAIN_HOUR = "rainHour"
    RAIN_TEN = "rainTen"
    RAINFALL_24HR = "rainfall24hr"
    VISIBILITY_KM = "visibilityKm"

    def __str__(self) -> str:
        return self.value


MEASUREMENT_NAMES: tuple[str, ...] = tuple(m.value for m in Measurement)

# Measurements the published dataset bundle is generated for by default.
DEFAULT_DATASET_MEASUREMENTS: tuple[Measurement, ...] = (
    Measurement.TEMP_C,
    Measurement.AVERAGE_WIND_SPEED_KM,
    Measurement.MAXIMUM_GUST_KMH,
    Measurement.RELATIVE_HUMIDITY_PCT,
    Measurement.PRECIPITATION_SINCE_9AM_MM,
)


def parse_measurement(value: str | Measurement) -> Measurement:
    if isinstance(value, Measurement):
        return value
    text = str(value).strip()
    try:
        return Measurement(text)
    except ValueError:
        # Accept enum member names too (e.g. TEMP_C).
        member = Measurement.__members__.get(text.upper())
        if member is None:
            raise UnknownMeasurementError(value, MEASUREMENT_NAMES) from None
        return member
