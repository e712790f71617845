import pytest
from pydantic import ValidationError
from blinkwell.config import Thresholds, load_thresholds

def test_defaults():
    th = load_thresholds(None)
    assert th.eye_closure_threshold == 0.4
    assert th.open_probability_band == (0.3, 0.5)
    assert th.window_ms == 60_000

def test_yaml_overrides(tmp_path):
    p = tmp_path / "th.yaml"
    p.write_text("eye_closure_threshold: 0.25\nwindow_ms: 30000\n")
    th = load_thresholds(p)
    assert th.eye_closure_threshold == 0.25 and th.window_ms == 30000
    assert th.closed_ratio == 0.3

def test_empty_yaml(tmp_path):
    p = tmp_path / "empty.yaml"; p.write_text("")
    assert load_thresholds(p) == Thresholds()

def test_invalid_band():
    with pytest.raises(ValidationError):
        Thresholds(closed_ratio=0.5, open_ratio=0.5)

def test_frozen():
    with pytest.raises(ValidationError):
        Thresholds().window_ms = 10
