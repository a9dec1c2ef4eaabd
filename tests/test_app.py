"""Tests for application wiring and the command line entry point."""

import logging

import pytest

from slideplay.infrastructure.presentation_io import save_presentation
from slideplay.infrastructure.scheduler import ManualClock
from slideplay.player.config.io import save_config
from slideplay.player.config.settings import PlaybackSettings, PlayerConfig
from slideplay.player.core.app import SlidePlayApp
from slideplay.player.core.main import main
from slideplay.player.interaction.input import KeyEvent
from slideplay.player.interaction.playback import PlayerState
from slideplay.player.rendering.surface import RecordingSurface


@pytest.fixture
def app(presentation):
    config = PlayerConfig(viewport_width=800.0, viewport_height=600.0, playback=PlaybackSettings(frame_interval_ms=50.0))
    return SlidePlayApp(config, presentation, surface=RecordingSurface(), clock=ManualClock())


class TestSlidePlayApp:
    """Test SlidePlayApp."""

    def test_start_from_hash(self, app):
        app.start("#detail")

        assert app.player.current_frame_index == 1
        assert app.player.state is PlayerState.PLAYING
        assert not app.player.blank_screen_visible
        assert app.chrome.state.frame_number == "2 / 4"
        assert app.chrome.state.url_hash == "#detail"

    def test_simulate_auto_advance(self, app):
        app.start("#detail")

        app.simulate(2000.0)
        assert app.player.current_frame_index == 2

        app.simulate(500.0)
        assert app.player.state is PlayerState.PLAYING
        assert app.viewport.camera_state("default").scale == pytest.approx(2.0)

    def test_keyboard_drives_player(self, app):
        app.start()

        assert app.controller.on_key_down(KeyEvent(key="ArrowRight"))
        app.simulate(1000.0)

        assert app.player.current_frame_index == 1
        assert app.chrome.state.url_hash == "#detail"

    def test_resize_repaints(self, app):
        app.start()
        app.resize(400.0, 300.0)
        assert app.viewport.surface.last["default"].to_svg() == "matrix(1,0,0,1,200,150)"

    def test_edit_mode(self, presentation):
        app = SlidePlayApp(PlayerConfig(edit_mode=True), presentation, clock=ManualClock())
        app.start("#detail")

        app.simulate(5000.0)
        assert app.player.current_frame_index == 1

    def test_from_files(self, presentation, temp_dir):
        presentation_path = save_presentation(presentation, temp_dir / "talk.yaml")
        config_path = save_config(PlayerConfig(viewport_width=640.0), temp_dir / "player.yaml")

        app = SlidePlayApp.from_files(presentation_path, config_path, clock=ManualClock())

        assert app.viewport.width == 640.0
        assert len(app.presentation) == 4

    def test_stop_detaches_chrome(self, app):
        app.start()
        app.stop()

        app.player.jump_to_frame(3)
        assert app.chrome.state.frame_number == "1 / 4"


class TestMain:
    """Test the CLI entry point."""

    def test_simulated_run(self, presentation, temp_dir, caplog):
        path = save_presentation(presentation, temp_dir / "talk.yaml")

        with caplog.at_level(logging.INFO):
            main(path, frame="#detail", simulate=3000.0)

        assert "Stopped at frame 3 / 4" in caplog.text

    def test_missing_presentation_exits(self, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            main(temp_dir / "missing.yaml", simulate=0.0)
        assert exc_info.value.code == 1
