import pytest


@pytest.fixture(scope="function")
def cli_runner():
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def trips_csv():
    return (
        "trip_id,fare,is_shared,pickup_time,pickup_zip\n"
        "1,12.5,true,2016-09-17 00:09:55,02139\n"
        "2,8,false,2016-09-17 00:10:01,02140\n"
        "3,,true,2016-09-17 00:12:30,\n"
    )


@pytest.fixture
def station_rows():
    return [
        {"lat": 37.7749, "lng": -122.4194, "value": 4, "name": "Market"},
        {"lat": 37.8044, "lng": -122.2712, "value": 3, "name": "Oakland"},
        {"lat": 37.3382, "lng": -121.8863, "value": None, "name": "San Jose"},
    ]


def _point(x, y, properties):
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Point", "coordinates": [x, y]},
    }


@pytest.fixture
def feature_collection():
    return {
        "type": "FeatureCollection",
        "features": [
            _point(-122.4, 37.7, {"name": "A", "count": "1"}),
            _point(-122.3, 37.8, {"name": "B"}),
            {"type": "Feature", "properties": {"name": "C"}, "geometry": None},
        ],
    }
