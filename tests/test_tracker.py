from blinkwell.config import Thresholds
from blinkwell.eye.geometry import FaceBounds, FaceGeometry, FaceLandmarks, Point
from blinkwell.eye.tracker import BlinkTracker

class FakeClock:
    def __init__(self, t=0.0): self.t = t
    def __call__(self): return self.t

def test_edge_triggered_sequence():
    tr = BlinkTracker(Thresholds(eye_closure_threshold=0.4), clock=FakeClock())
    r1 = tr.observe(0.5, 0.5, now=0)
    r2 = tr.observe(0.3, 0.5, now=10)
    r3 = tr.observe(0.2, 0.5, now=20)
    assert not r1.any_blink
    assert r2.left_blink and not r2.right_blink and r2.any_blink
    assert not r3.left_blink
    assert tr.total_blinks() == 1

def test_recovery_rearms():
    tr = BlinkTracker(clock=FakeClock())
    tr.observe(0.3, 0.9, now=0)
    tr.observe(0.6, 0.9, now=100)
    tr.observe(0.2, 0.9, now=200)
    s = tr.stats(now=200)
    assert s.total_blinks == 2 and s.left_eye_blinks == 2 and s.right_eye_blinks == 0

def test_event_snapshot():
    tr = BlinkTracker(clock=FakeClock())
    tr.observe(0.1, 0.1, now=5)
    ev = list(tr.history)[0]
    assert ev.timestamp == 5 and not ev.left_eye_open and not ev.right_eye_open

def test_window_filtering():
    tr = BlinkTracker(clock=FakeClock())
    tr.observe(0.1, 0.9, now=0)
    tr.observe(0.9, 0.9, now=30_000)
    tr.observe(0.1, 0.9, now=65_000)
    assert tr.blink_rate(now=65_000) == 1
    # the append at 65s pruned the entry from t=0
    assert tr.total_blinks() == 1

def test_no_prune_without_blink():
    tr = BlinkTracker(Thresholds(window_ms=1000), clock=FakeClock())
    tr.observe(0.1, 0.9, now=0)
    tr.observe(0.9, 0.9, now=5000)
    assert tr.total_blinks() == 1
    assert tr.blink_rate(now=5000) == 1
    tr.prune(now=5000)
    assert tr.total_blinks() == 0

def test_stats_idempotent_and_defaults():
    clock = FakeClock(1000.0)
    tr = BlinkTracker(clock=clock)
    tr.observe(0.1, 0.1, now=1500)
    tr.observe(0.9, 0.9, now=1600)
    tr.observe(0.9, 0.1, now=1700)
    clock.t = 2000.0
    a, b = tr.stats(), tr.stats()
    assert a == b
    assert a.average_blink_duration == 150.0
    assert a.session_ms == 1000.0
    assert a.left_eye_blinks == 1 and a.right_eye_blinks == 2
    assert a.symmetry == 0.5
    assert a.status == "low"

def test_reset():
    tr = BlinkTracker(clock=FakeClock())
    tr.observe(0.1, 0.1, now=0)
    tr.reset(now=10)
    assert tr.total_blinks() == 0
    assert tr.state.left and tr.state.right
    assert tr.observe(0.1, 0.9, now=20).left_blink

def test_process_face():
    p = Point(0, 0)
    face = FaceGeometry(bounds=FaceBounds(p, p), landmarks=FaceLandmarks(p, p, p, p, p, p),
                        probability=0.9, left_eye_open_probability=0.9, right_eye_open_probability=0.0)
    r = BlinkTracker(clock=FakeClock()).process(face, now=0)
    assert r.right_blink and not r.left_blink

def test_regressing_clock_leaves_no_stale_entries():
    tr = BlinkTracker(clock=FakeClock())
    tr.observe(0.1, 0.9, now=100_000)
    tr.observe(0.9, 0.9, now=100_001)
    tr.observe(0.1, 0.9, now=0)
    tr.prune(now=100_500)
    assert [e.timestamp for e in tr.history] == [100_000]
    assert tr.total_blinks() == 1 and tr.stats(now=100_500).left_eye_blinks == 1
