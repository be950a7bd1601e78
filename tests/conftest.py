import zoneinfo

import pytest


SAMPLE_TABLE = (
    "# tzdb timezone descriptions\n"
    "#\n"
    "#codes\tcoordinates\tTZ\tcomments\n"
    "CI,BF,GH,GM,GN,IS,ML,MR,SH,SL,SN,TG\t+0519-00402\tAfrica/Abidjan\n"
    "US\t+404251-0740023\tAmerica/New_York\tEastern (most areas)\n"
    "AU\t-3352+15113\tAustralia/Sydney\tNew South Wales (most areas)\n"
    "GB,GG,IM,JE\t+513030-0000731\tEurope/London\n"
    "JP\t+353916+1394441\tAsia/Tokyo\n"
    "AR\t-3436-05827\tAmerica/Argentina/Buenos_Aires\tBuenos Aires (BA, CF)\n"
)

SAMPLE_ZONES = [
    "Africa/Abidjan",
    "America/Argentina/Buenos_Aires",
    "America/New_York",
    "Asia/Tokyo",
    "Australia/Sydney",
    "Europe/London",
]


@pytest.fixture
def sample_table():
    return SAMPLE_TABLE


@pytest.fixture
def sample_path(tmp_path):
    path = tmp_path / "zone1970.tab"
    path.write_text(SAMPLE_TABLE, encoding="utf-8")
    return path


@pytest.fixture
def resolver_for():
    """Resolver factory that only knows the given zones and records lookups."""
    def make(known):
        calls = []

        def resolve(zone):
            calls.append(zone)
            if zone not in known:
                raise zoneinfo.ZoneInfoNotFoundError(f"No time zone found with key {zone}")
            return zone

        resolve.calls = calls
        return resolve
    return make


@pytest.fixture
def sample_zones():
    return list(SAMPLE_ZONES)
