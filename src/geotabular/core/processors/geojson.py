"""GeoJSON normalization: promote any GeoJSON object to a FeatureCollection."""

import json
from typing import Any, Dict, Optional

GEOMETRY_TYPES = {
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
}


def normalize_geojson(geojson: Any) -> Optional[Dict[str, Any]]:
    """Normalize a GeoJSON geometry, Feature or FeatureCollection.

    JSON strings are decoded first. Geometries are wrapped into a Feature
    with empty properties and Features into a one-element collection.

    Returns:
        A FeatureCollection dict, or None when ``geojson`` is not GeoJSON
    """
    if isinstance(geojson, (str, bytes)):
        try:
            geojson = json.loads(geojson)
        except ValueError:
            return None

    if not isinstance(geojson, dict):
        return None

    kind = geojson.get("type")
    if kind == "FeatureCollection":
        return geojson
    if kind == "Feature":
        return {"type": "FeatureCollection", "features": [geojson]}
    if kind in GEOMETRY_TYPES:
        return {
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "properties": {}, "geometry": geojson}],
        }
    return None
