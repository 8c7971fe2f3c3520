import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from boothplan import (Booth, Calibration, EditorSession, FloorPlanConfig, FloorPlanStore,
                       InteractionController, Point, Vendor)


@pytest.fixture
def config():
    """1000x800 plan calibrated at 10 px/ft."""
    return FloorPlanConfig(
        show_id="spring-2026",
        background_image_ref="",
        image_width=1000,
        image_height=800,
        calibration=Calibration(Point(0, 0), Point(100, 0), 10, 10.0),
    )


@pytest.fixture
def vendors():
    return [
        Vendor("v1", "Acme Roofing", "Roofing"),
        Vendor("v2", "Bright Solar", "Solar & Energy"),
        Vendor("v3", "No Category Co"),
    ]


@pytest.fixture
def session(config, vendors):
    return EditorSession(config, vendors)


@pytest.fixture
def controller(session):
    return InteractionController(session)


@pytest.fixture
def events(controller):
    seen = []
    controller.subscribe(lambda change, payload: seen.append((change, payload)))
    return seen


@pytest.fixture
def store(tmp_path):
    return FloorPlanStore(tmp_path)


def add_booth(config, bid, x=0.0, y=0.0, wf=10, hf=10, **kw):
    ppf = config.pixels_per_foot or 10.0
    b = Booth(bid, x, y, wf, hf, wf * ppf, hf * ppf, **kw)
    config.booths.append(b)
    return b
