import json
from datetime import datetime, timezone

import pytest

from boothplan import ConfigState, FloorPlanStore, PersistenceError, Visibility

from conftest import add_booth


def test_missing_document_gives_defaults(store):
    cfg = store.load("brand-new")
    assert cfg.show_id == "brand-new"
    assert cfg.booths == [] and cfg.calibration is None
    assert (cfg.image_width, cfg.image_height) == (0, 0)


def test_save_then_load(store, config):
    add_booth(config, "B-1", x=40, y=60, category="HVAC", vendor_id="v1", vendor_name="Acme")
    config.visibility = Visibility(datetime(2026, 5, 1, 9, tzinfo=timezone.utc), False)
    store.save(config)
    assert config.created_at and config.updated_at

    loaded = store.load(config.show_id)
    assert loaded.booths == config.booths
    assert loaded.calibration == config.calibration
    assert loaded.visibility == config.visibility
    assert (loaded.image_width, loaded.image_height) == (1000, 800)


def test_document_uses_camel_case_keys(store, config):
    add_booth(config, "B-1")
    store.save(config)
    raw = json.loads((store.root / "floorplans" / "spring-2026.json").read_text(encoding="utf-8"))
    assert {"backgroundImageRef", "imageWidth", "imageHeight", "calibration", "booths",
            "visibility", "updatedAt", "createdAt"} <= set(raw)
    assert raw["calibration"]["pixelsPerFoot"] == 10.0
    assert raw["booths"][0]["widthFeet"] == 10


def test_legacy_and_messy_documents_load(tmp_path):
    doc = {
        "backgroundImageUrl": "https://example.test/plan.png",
        "imageWidth": "2400", "imageHeight": 1600,
        "calibration": {"pixelsPerFoot": 0},
        "booths": [
            {"id": "B-1", "x": -20, "y": 5, "widthFeet": 10, "heightFeet": 10, "vendorName": "Ghost"},
            {"id": "B-1", "x": 99},
            {"id": "", "x": 1},
        ],
    }
    cfg = ConfigState().deserialize(doc, "legacy")
    assert cfg.background_image_ref == "https://example.test/plan.png"
    assert (cfg.image_width, cfg.image_height) == (2400, 1600)
    assert cfg.calibration is None
    assert len(cfg.booths) == 1
    b = cfg.booths[0]
    assert (b.x, b.y) == (0, 5)
    assert b.vendor_name is None
    assert b.width_px == 100.0


def test_vendor_directory(store):
    path = store.root / "vendors" / "show.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps([
        {"id": "v2", "companyName": "zeta Windows", "category": "Windows & Doors"},
        {"id": "v1", "name": "Acme Roofing", "category": "Roofing"},
        {"name": "no id"},
        "not a row", 42,
    ]), encoding="utf-8")
    vendors = store.vendors("show")
    assert [v.name for v in vendors] == ["Acme Roofing", "zeta Windows"]
    assert store.vendors("other") == []


def test_corrupt_document_raises(store):
    path = store.root / "floorplans" / "bad.json"
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        store.load("bad")


def test_failed_save_leaves_model_intact(tmp_path, config):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    store = FloorPlanStore(blocker)          # root is a file, mkdir fails
    add_booth(config, "B-1", x=10)
    with pytest.raises(PersistenceError):
        store.save(config)
    assert config.updated_at is None
    assert config.booths[0].x == 10


def test_empty_show_id_rejected(store):
    with pytest.raises(PersistenceError):
        store.load("  ")


def test_show_id_is_sanitised(store):
    d = store.image_dir("../etc/passwd")
    assert d.parent == store.root / "images"
    assert "/" not in d.name and not d.name.startswith(".")


def test_similar_show_ids_do_not_share_a_document(store):
    ids = ["Spring Show", "Spring-Show", "Spring/Show", "spring.show"]
    for i, show_id in enumerate(ids, start=1):
        cfg = store.load(show_id)
        cfg.image_width, cfg.image_height = i * 100, 100
        store.save(cfg)
    for i, show_id in enumerate(ids, start=1):
        loaded = store.load(show_id)
        assert loaded.show_id == show_id
        assert loaded.image_width == i * 100
    assert len(list((store.root / "floorplans").glob("*.json"))) == len(ids)
