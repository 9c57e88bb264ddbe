from homeboard.modules.layout import card_grid_size, card_grid_span, card_settings_key
from homeboard.modules.layout.domain.sizing import clamp_span


def test_card_settings_key_scopes_by_page() -> None:
    assert card_settings_key("light_kitchen", "home") == "home::light_kitchen"


def test_legacy_span_follows_card_type_and_size_setting() -> None:
    settings = {
        "home::calendar_card_1": {"size": "medium"},
        "home::light_kitchen": {"size": "small"},
    }

    assert card_grid_span("calendar_card_1", "home::calendar_card_1", settings, "home") == 2
    assert card_grid_span("calendar_card_2", "home::calendar_card_2", settings, "home") == 4
    assert card_grid_span("light_kitchen", "home::light_kitchen", settings, "home") == 1
    assert card_grid_span("room_card_1", "home::room_card_1", settings, "home") == 2
    assert card_grid_span("empty_card_1", "home::empty_card_1", settings, "home") == 1


def test_legacy_span_special_cases() -> None:
    assert card_grid_span("automation.morning", "home::automation.morning", {}, "home") == 1
    assert card_grid_span(
        "automation.morning",
        "home::automation.morning",
        {"automation.morning": {"type": "sensor"}},
        "home",
    ) == 2
    assert card_grid_span("car", "home::car", {}, "home") == 2
    assert card_grid_span("weather_temp_1", "home::weather_temp_1", {}, "home") == 2
    assert card_grid_span("sensor.temp", "settings::sensor.temp", {}, "settings") == 1
    assert card_grid_span("media_player.tv", "settings::media_player.tv", {}, "settings") == 2


def test_page_scoped_settings_win_over_bare_card_settings() -> None:
    settings = {
        "home::light_desk": {"size": "small"},
        "light_desk": {"size": "large"},
    }

    assert card_grid_span("light_desk", "home::light_desk", settings, "home") == 1
    assert card_grid_span("light_desk", "office::light_desk", settings, "office") == 2


def test_explicit_grid_spans_override_legacy_span() -> None:
    settings = {"home::sensor.temp": {"gridColSpan": 3, "gridRowSpan": 2}}

    size = card_grid_size("sensor.temp", "home::sensor.temp", settings, "home", columns=4)

    assert (size.col_span, size.row_span) == (3, 2)


def test_grid_size_clamps_to_columns_and_max_row_span() -> None:
    settings = {"home::sensor.temp": {"gridColSpan": 9, "gridRowSpan": 20}}

    size = card_grid_size("sensor.temp", "home::sensor.temp", settings, "home", columns=4)

    assert (size.col_span, size.row_span) == (4, 8)


def test_clamp_span_rounds_half_up_and_falls_back_on_garbage() -> None:
    assert clamp_span(2.5, 1) == 3
    assert clamp_span("3", 1) == 3
    assert clamp_span(None, 2) == 2
    assert clamp_span("wide", 2) == 2
    assert clamp_span(True, 2) == 2
    assert clamp_span(float("nan"), 2) == 2
    assert clamp_span(0, 2) == 1
    assert clamp_span(None, 40) == 8


def test_size_falls_back_per_field_to_bare_card_settings() -> None:
    settings = {
        "home::light_desk": {"gridRowSpan": 1},
        "light_desk": {"size": "small"},
        "home::calendar_card_1": {"size": ["not", "a", "size"]},
    }

    assert card_grid_span("light_desk", "home::light_desk", settings, "home") == 1
    assert card_grid_span("calendar_card_1", "home::calendar_card_1", settings, "home") == 4


def test_empty_page_scoped_entry_still_shadows_grid_spans() -> None:
    settings = {"home::sensor.temp": {}, "sensor.temp": {"gridColSpan": 3}}

    size = card_grid_size("sensor.temp", "home::sensor.temp", settings, "home", columns=4)

    assert size.col_span == 2
