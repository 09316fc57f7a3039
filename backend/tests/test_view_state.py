from circles.services.view_state import NetworkViewState, ViewStateRegistry


def test_angle_overrides_are_copied():
    state = NetworkViewState()
    state.set_angle("c1", 0.5)
    overrides = state.angle_overrides()
    overrides["c2"] = 1.0
    assert state.angle_overrides() == {"c1": 0.5}


def test_clear_angle_reports_missing_override():
    state = NetworkViewState()
    state.set_angle("c1", 0.5)
    assert state.clear_angle("c1")
    assert not state.clear_angle("c1")


def test_dismiss_and_restore():
    state = NetworkViewState()
    state.dismiss("reminder-c1")
    state.dismiss("o1")
    state.restore("o1")
    assert state.dismissed() == {"reminder-c1"}


def test_forget_contact_drops_its_state():
    state = NetworkViewState()
    state.set_angle("c1", 2.0)
    state.dismiss("reminder-c1")
    state.dismiss("o9")
    state.forget_contact("c1")
    assert state.angle_overrides() == {}
    assert state.dismissed() == {"o9"}


def test_registry_keeps_users_apart():
    registry = ViewStateRegistry()
    registry.for_user(1).set_angle("c1", 1.0)
    assert registry.for_user(1) is registry.for_user(1)
    assert registry.for_user(2).angle_overrides() == {}
    registry.reset()
    assert registry.for_user(1).angle_overrides() == {}


def test_forget_contact_drops_its_opportunity_dismissals():
    state = NetworkViewState()
    state.dismiss("o1")
    state.dismiss("o2")
    state.dismiss("o3")
    state.forget_contact("c1", ["o1", "o2"])
    assert state.dismissed() == {"o3"}
