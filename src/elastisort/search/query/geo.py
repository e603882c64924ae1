"""Geo point values used as reference points for distance sorting."""

from dataclasses import dataclass
from typing import Any, Dict, Union

from ...core.exceptions import ValidationError

Number = Union[int, float]


@dataclass
class GeoPoint:
    """
    A latitude/longitude pair.

    Coordinates are kept exactly as given; the backend interprets them.

    Attributes:
        lat (Number): Latitude
        lon (Number): Longitude
    """

    lat: Number
    lon: Number

    def source(self) -> Dict[str, Number]:
        return {"lat": self.lat, "lon": self.lon}

    @classmethod
    def from_string(cls, text: str) -> "GeoPoint":
        """
        Parse a point from its "lat,lon" text form.

        Raises:
            ValidationError: If the text is not two comma-separated numbers
        """
        parts = text.split(",")
        if len(parts) != 2:
            raise ValidationError(f"Invalid geo point text: {text!r}")
        try:
            return cls(lat=float(parts[0].strip()), lon=float(parts[1].strip()))
        except ValueError as e:
            raise ValidationError(f"Invalid geo point text: {text!r}") from e

    @classmethod
    def from_value(cls, value: Any) -> "GeoPoint":
        """
        Build a point from a decoded document value.

        Accepts ``{"lat": .., "lon": ..}`` objects, ``[lon, lat]`` arrays and
        "lat,lon" strings.

        Raises:
            ValidationError: If the value has none of these shapes
        """
        if isinstance(value, dict):
            if set(value) != {"lat", "lon"}:
                raise ValidationError(f"Geo point object needs exactly lat and lon: {value!r}")
            return cls(lat=value["lat"], lon=value["lon"])
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return cls(lat=value[1], lon=value[0])
        if isinstance(value, str):
            return cls.from_string(value)
        raise ValidationError(f"Invalid geo point: {value!r}")
