"""Shared fixtures: synthetic show stat rows."""

import pytest

from lbprobe.models.enums import ServiceType

HEADER = (
    "# pxname,svname,qcur,qmax,scur,smax,slim,stot,bin,bout,dreq,dresp,ereq,econ,"
    "eresp,wretr,wredis,status,weight,act,bck,chkfail,chkdown,lastchg,downtime,"
    "qlimit,pid,iid,sid,throttle,lbtot,tracked,type,rate,rate_lim,rate_max,"
    "check_status,"
)

FRONTEND = ServiceType.FRONTEND.value
BACKEND = ServiceType.BACKEND.value
SERVER = ServiceType.SERVER.value


def stat_row(
    pxname,
    svname,
    kind,
    status="",
    scur=0,
    slim="",
    qcur=0,
    qlimit="",
    stot=0,
    act="",
    bck="",
    weight="",
    check_status="",
    timings=None,
    width=62,
):
    """Render one CSV record with values at their schema positions."""
    fields = [""] * width
    fields[0] = pxname
    fields[1] = svname
    fields[2] = str(qcur)
    fields[4] = str(scur)
    fields[6] = str(slim)
    fields[7] = str(stot)
    fields[17] = status
    fields[18] = str(weight)
    fields[19] = str(act)
    fields[20] = str(bck)
    fields[25] = str(qlimit)
    fields[32] = kind
    if width > 36:
        fields[36] = check_status
    if timings and width > 61:
        fields[58:62] = [str(t) for t in timings]
    return ",".join(fields) + ","


@pytest.fixture
def sample_lines():
    """A small but realistic dump: one listen section, two backends."""
    return [
        HEADER,
        stat_row("http-in", "FRONTEND", FRONTEND, "OPEN", scur=10, slim=100, stot=500),
        stat_row("stats", "FRONTEND", FRONTEND, "OPEN", scur=1, slim=10),
        stat_row("stats", "BACKEND", BACKEND, "UP", act=0, bck=0),
        stat_row("api", "api1", SERVER, "UP", scur=3, slim=50, act=1, bck=0, check_status="L7OK",
                 timings=(0, 1, 12, 15)),
        stat_row("api", "api2", SERVER, "UP 1/3", scur=4, slim=50, act=1, bck=0),
        stat_row("api", "api3", SERVER, "DOWN", act=1, bck=0, check_status="L4CON"),
        stat_row("api", "api4", SERVER, "no check", act=0, bck=1),
        stat_row("api", "BACKEND", BACKEND, "UP", scur=7, slim=200, act=3, bck=1, stot=900),
        stat_row("web", "web1", SERVER, "UP", scur=2, slim=20, qcur=0, qlimit=10, act=1, bck=0),
        stat_row("web", "web2", SERVER, "MAINT", act=1, bck=0),
        stat_row("web", "BACKEND", BACKEND, "UP", scur=2, slim=100, act=2, bck=0),
        "",
    ]


@pytest.fixture
def stats_file(tmp_path, sample_lines):
    path = tmp_path / "show_stat.csv"
    path.write_text("\n".join(sample_lines) + "\n")
    return path


@pytest.fixture
def row():
    """The stat_row builder, for tests that assemble their own dump."""
    return stat_row
