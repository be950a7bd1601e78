import itertools

import pytest

from tzcoords import builder
from tzcoords.builder import build_zone_table
from tzcoords.classes import LatLon, TableState, ZoneEntry, ZoneTable
from tzcoords.errors import MalformedCoordinate, TableBuildError, UnresolvableZone


def test_build_sample(sample_table, sample_zones):
    result = build_zone_table(sample_table)
    assert result.ok
    table = result.unwrap()
    assert table.state is TableState.FINALIZED
    assert table.keys() == sample_zones
    assert list(table) == sample_zones
    assert len(table) == 6

    ny = table["America/New_York"]
    assert ny.lat == pytest.approx(40.71417, abs=1e-5)
    assert ny.lon == pytest.approx(-74.00639, abs=1e-5)
    assert table["America/Argentina/Buenos_Aires"] == LatLon(lat=-(34 + 36 / 60), lon=-(58 + 27 / 60))


def test_items_follow_sorted_keys(sample_table):
    table = build_zone_table(sample_table).unwrap()
    items = table.items()
    assert [zone for zone, _ in items] == sorted(zone for zone, _ in items)
    assert all(isinstance(ll, LatLon) for _, ll in items)


def test_key_order_independent_of_row_order(sample_table, resolver_for, sample_zones):
    lines = sample_table.splitlines()
    header, rows = lines[:3], lines[3:]
    resolve = resolver_for(set(sample_zones))
    expected = None
    for perm in itertools.permutations(rows[:4]):
        text = "\n".join(header + list(perm) + rows[4:]) + "\n"
        table = build_zone_table(text, resolve).unwrap()
        if expected is None:
            expected = table.items()
        assert table.keys() == sample_zones
        assert table.items() == expected


def test_duplicate_zone_last_wins(resolver_for):
    text = (
        "US\t+404251-0740023\tAmerica/New_York\tfirst\n"
        "JP\t+353916+1394441\tAsia/Tokyo\n"
        "US\t+40-074\tAmerica/New_York\tsecond\n"
    )
    table = build_zone_table(text, resolver_for({"America/New_York", "Asia/Tokyo"})).unwrap()
    assert table.keys() == ["America/New_York", "Asia/Tokyo"]
    assert table["America/New_York"] == LatLon(lat=40.0, lon=-74.0)


def test_malformed_coordinate_fails_whole_build(sample_table):
    text = sample_table + "XX\t+99-000\tEurope/Paris\n"
    result = build_zone_table(text)
    assert not result.ok
    assert result.table is None
    err = result.error
    assert isinstance(err, TableBuildError)
    assert err.stage == "decode"
    assert err.line_no == 10
    assert err.identifier == "Europe/Paris"
    assert err.raw == "+99-000"
    assert isinstance(err.cause, MalformedCoordinate)
    assert "Europe/Paris" in str(err) and "+99-000" in str(err)
    with pytest.raises(TableBuildError):
        result.unwrap()


def test_unresolvable_zone_fails_whole_build(sample_table):
    text = "ZZ\t+0000+00000\tAtlantis/Poseidonia\n" + sample_table
    result = build_zone_table(text)
    assert not result.ok
    assert result.error.stage == "validate"
    assert result.error.line_no == 1
    assert isinstance(result.error.cause, UnresolvableZone)
    assert result.error.cause.identifier == "Atlantis/Poseidonia"


def test_build_stops_at_first_failure(monkeypatch, resolver_for):
    calls = []
    real_decode = builder.parse_iso6709_pair

    def decode(token):
        calls.append(token)
        return real_decode(token)

    monkeypatch.setattr(builder, "parse_iso6709_pair", decode)
    text = "A\t+40-074\tAmerica/New_York\nB\tjunk\tAsia/Tokyo\nC\t+51-000\tEurope/London\n"
    result = build_zone_table(text, resolver_for({"America/New_York", "Asia/Tokyo", "Europe/London"}))
    assert not result.ok
    assert calls == ["+40-074", "junk"]


def test_skipped_lines_never_reach_decoder_or_validator(monkeypatch, resolver_for):
    decoded = []
    real_decode = builder.parse_iso6709_pair
    monkeypatch.setattr(builder, "parse_iso6709_pair", lambda t: decoded.append(t) or real_decode(t))
    resolve = resolver_for({"Asia/Tokyo"})
    text = "# comment\tjunk\tNot/AZone\nshort\tline\n\nJP\t+353916+1394441\tAsia/Tokyo\n"
    table = build_zone_table(text, resolve).unwrap()
    assert decoded == ["+353916+1394441"]
    assert resolve.calls == ["Asia/Tokyo"]
    assert table.keys() == ["Asia/Tokyo"]


def test_accepts_bytes(sample_table, sample_zones):
    table = build_zone_table(sample_table.encode("utf-8")).unwrap()
    assert table.keys() == sample_zones


def test_comment_only_table_is_empty():
    table = build_zone_table("# nothing here\n").unwrap()
    assert table.keys() == []
    assert table.items() == []
    assert table.to_frame().empty


#------------------------------------------
# ZoneTable lifecycle
#------------------------------------------
def test_zone_table_states():
    table = ZoneTable()
    assert table.state is TableState.EMPTY
    assert table.insert(ZoneEntry("Asia/Tokyo", LatLon(35.0, 139.0))) is False
    assert table.state is TableState.ACCUMULATING
    assert table.insert(ZoneEntry("Asia/Tokyo", LatLon(36.0, 139.0))) is True
    assert table.finalize() == ["Asia/Tokyo"]
    assert table.state is TableState.FINALIZED
    assert table["Asia/Tokyo"] == LatLon(36.0, 139.0)

    with pytest.raises(RuntimeError):
        table.insert(ZoneEntry("Europe/London", LatLon(51.0, 0.0)))
    with pytest.raises(RuntimeError):
        table.fail()


def test_zone_table_not_readable_before_finalize():
    table = ZoneTable()
    table.insert(ZoneEntry("Asia/Tokyo", LatLon(35.0, 139.0)))
    with pytest.raises(RuntimeError):
        table.keys()
    with pytest.raises(RuntimeError):
        table.items()
    with pytest.raises(RuntimeError):
        table["Asia/Tokyo"]


def test_failed_table_discards_entries():
    table = ZoneTable()
    table.insert(ZoneEntry("Asia/Tokyo", LatLon(35.0, 139.0)))
    table.fail()
    assert table.state is TableState.FAILED
    assert len(table) == 0
    with pytest.raises(RuntimeError):
        table.finalize()
    with pytest.raises(RuntimeError):
        table.insert(ZoneEntry("Asia/Tokyo", LatLon(35.0, 139.0)))


def test_to_frame(sample_table, sample_zones):
    df = build_zone_table(sample_table).unwrap().to_frame()
    assert list(df.columns) == ["zone", "lat", "lon"]
    assert df["zone"].tolist() == sample_zones
    assert str(df["lat"].dtype) == "float64"
    assert df.loc[df["zone"] == "Europe/London", "lon"].iloc[0] == pytest.approx(-(7 / 60 + 31 / 3600))
