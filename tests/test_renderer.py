"""Tests for the pygame surface, frame scheduler and interactive app (headless)."""

import os

import numpy as np
import pytest
import pygame

import bouncer as P
from bouncer.engine import CircleCollection, CollectionConfig
from bouncer.renderer import (
    AppearanceConfig, BouncerApp, FrameScheduler, PygameSurface,
    format_canvas_size, format_speed, save_frames, to_rgb,
)


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k)


@pytest.fixture
def app():
    return BouncerApp(CircleCollection(CollectionConfig(seed=1)),
                      AppearanceConfig(fps=1000),
                      scheduler=FrameScheduler(fps=1000, max_frames=3))


class TestFormatting:

    def test_format_speed(self):
        assert format_speed(1) == "1.0×"
        assert format_speed(0.3) == "0.3×"
        assert format_speed(2.0) == "2.0×"

    def test_format_canvas_size(self):
        assert format_canvas_size(800, 600) == "Canvas 800×600"
        assert format_canvas_size(300.0, 200.0) == "Canvas 300×200"

    def test_to_rgb(self):
        assert to_rgb('teal') == (0, 128, 128)
        assert to_rgb('white') == (255, 255, 255)
        assert to_rgb((1, 2, 3)) == (1, 2, 3)


class TestPygameSurface:

    def test_clear_fills_background(self):
        surface = PygameSurface(pygame.Surface((60, 40)))
        surface.surface.fill((9, 9, 9))
        surface.clear((0, 0), 60, 40)
        frame = surface.to_array()
        assert frame.shape == (40, 60, 3)
        assert (frame == np.array(P.BG_COLOR)).all()

    def test_outline_uses_palette_color(self):
        surface = PygameSurface(pygame.Surface((100, 100)))
        surface.clear((0, 0), 100, 100)
        surface.draw_circle_outline((50, 50), 20, 'red')
        frame = surface.to_array()
        red = (frame == np.array([255, 0, 0])).all(axis=-1)
        assert red.any()
        # outline only: the center stays background
        assert tuple(frame[50, 50]) == P.BG_COLOR

    def test_centered_text_draws_near_center(self):
        surface = PygameSurface(pygame.Surface((100, 100)))
        surface.clear((0, 0), 100, 100)
        surface.draw_centered_text('8', (50.4, 49.6), 'navy')
        frame = surface.to_array()
        changed = (frame != np.array(P.BG_COLOR)).any(axis=-1)
        ys, xs = np.nonzero(changed)
        assert len(xs) > 0
        assert abs(xs.mean() - 50) < 6
        assert abs(ys.mean() - 50) < 6


class TestFrameScheduler:

    def test_max_frames(self):
        calls = []
        scheduler = FrameScheduler(fps=1000, max_frames=5)
        assert scheduler.run(lambda: calls.append(1)) == 5
        assert len(calls) == 5
        assert not scheduler.running

    def test_stop_from_callback(self):
        scheduler = FrameScheduler(fps=1000)
        calls = []

        def callback():
            calls.append(1)
            if len(calls) == 3:
                scheduler.stop()

        assert scheduler.run(callback) == 3

    def test_stop_before_run_does_not_block_next_run(self):
        scheduler = FrameScheduler(fps=1000, max_frames=2)
        scheduler.stop()
        assert scheduler.run(lambda: None) == 2

    def test_rerun_after_stop(self):
        scheduler = FrameScheduler(fps=1000)
        scheduler.run(scheduler.stop)
        assert scheduler.run(scheduler.stop) == 1


class TestBouncerAppIntents:

    def test_add_and_remove_keys(self, app):
        app.handle_event(key(pygame.K_a))
        app.handle_event(key(pygame.K_PLUS))
        assert len(app.collection) == 12
        app.handle_event(key(pygame.K_r))
        app.handle_event(key(pygame.K_BACKSPACE))
        app.handle_event(key(pygame.K_MINUS))
        assert len(app.collection) == 9

    def test_reset_key(self, app):
        for _ in range(4):
            app.add()
        app.handle_event(key(pygame.K_SPACE))
        assert len(app.collection) == 10

    def test_speed_keys_clamp(self, app):
        app.handle_event(key(pygame.K_UP))
        assert app.collection.speed_multiplier == pytest.approx(1.1)
        for _ in range(30):
            app.handle_event(key(pygame.K_DOWN))
        assert app.collection.speed_multiplier == pytest.approx(0.1)
        for _ in range(30):
            app.handle_event(key(pygame.K_UP))
        assert app.collection.speed_multiplier == pytest.approx(2.0)

    def test_resize_event_clamps_and_resets(self, app):
        app.add()
        event = pygame.event.Event(pygame.VIDEORESIZE, w=50, h=2000, size=(50, 2000))
        app.handle_event(event)
        assert app.size == (200, 1000)
        assert len(app.collection) == 10

    def test_bracket_keys_resize(self, app):
        app.handle_event(key(pygame.K_LEFTBRACKET))
        assert app.size == (700, 500)
        app.handle_event(key(pygame.K_RIGHTBRACKET))
        app.handle_event(key(pygame.K_RIGHTBRACKET))
        assert app.size == (900, 700)

    def test_quit_key_stops(self, app):
        app.handle_event(key(pygame.K_q))
        assert app.quit_requested

    def test_hud_lines(self, app):
        app.collection.set_speed_multiplier(1.5)
        assert app.hud_lines() == ["Circles: 10", "Speed: 1.5×", "Canvas 800×600"]

    def test_empty_collection_is_kept(self):
        collection = CircleCollection(CollectionConfig(seed=1))
        for _ in range(10):
            collection.remove()
        assert BouncerApp(collection).collection is collection


class TestBouncerAppWindow:

    def test_run_for_fixed_frames(self, app):
        assert app.run() == 3
        assert app.screen is None

    def test_frame_and_capture(self, app):
        app.open()
        try:
            app.frame()
            frame = app.capture()
            assert frame.shape == (600, 800, 3)
            assert (frame != np.array(P.BG_COLOR)).any()

            app.resize(300, 250)
            app.frame()
            assert app.capture().shape == (250, 300, 3)
        finally:
            app.close()

    def test_save_frames(self, app, tmp_path):
        app.open()
        try:
            frames = []
            for _ in range(2):
                app.frame()
                frames.append(app.capture())
            save_frames(np.array(frames), str(tmp_path))
        finally:
            app.close()
        assert sorted(os.listdir(tmp_path)) == ['frame_00000.png', 'frame_00001.png']
