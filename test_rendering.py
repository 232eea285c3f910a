#!/usr/bin/env python3
import io
import os
import tempfile
from contextlib import redirect_stderr
from typing import Any

import pytest

from lsystem_rewriter import ConfigError, Dictionary, Word, apply_semantics
from lsystem_rewriter.cli import main
from lsystem_rewriter.presets import PRESETS, get_preset
from lsystem_rewriter.svg import (
    Bounds,
    SvgOptions,
    SvgStyle,
    compute_bounds,
    render_svg,
    write_svg,
)
from lsystem_rewriter.turtle import (
    Point,
    Turtle,
    TurtleState,
    attach_commands,
    build_action,
)


class TestTurtle:
    def setup_method(self) -> None:
        self.start = TurtleState(x=0, y=0, heading_deg=0)
        self.commands: dict[str, Any] = {
            "F": {"type": "forward", "draw": True},
            "f": {"type": "forward", "draw": False},
            "+": {"type": "turn", "direction": 1},
            "-": {"type": "turn", "direction": -1},
            "[": {"type": "push"},
            "]": {"type": "pop"},
            "X": {"type": "noop"},
        }
        self.dictionary = Dictionary.with_words(Word.from_text(k) for k in self.commands)
        attach_commands(self.dictionary, self.commands)

    def _draw(self, text: str, angle: float = 90, step: float = 10) -> list[list[Point]]:
        turtle = Turtle(angle_deg=angle, step=step, start=self.start)
        apply_semantics(Word.from_text(text), self.dictionary, turtle)
        return turtle.polylines()

    def test_forward_draw(self) -> None:
        polylines = self._draw("F")
        assert len(polylines) == 1
        p0, p1 = polylines[0]
        assert p0[0] == pytest.approx(0)
        assert p0[1] == pytest.approx(0)
        assert p1[0] == pytest.approx(10)
        assert p1[1] == pytest.approx(0)

    def test_branching(self) -> None:
        # F[+F]F: the branch extends the trunk polyline, pop starts a new one
        # at (10,0) which the last F carries to (20,0).
        polylines = self._draw("F[+F]F")
        assert len(polylines) == 2

        pl1 = polylines[0]
        assert len(pl1) == 3
        assert pl1[1][0] == pytest.approx(10)
        assert pl1[2][0] == pytest.approx(10)
        assert pl1[2][1] == pytest.approx(10)

        pl2 = polylines[1]
        assert pl2[0][0] == pytest.approx(10)
        assert pl2[0][1] == pytest.approx(0, abs=1e-9)
        assert pl2[1][0] == pytest.approx(20)

    def test_forward_move_starts_new_polyline(self) -> None:
        polylines = self._draw("FfF")
        assert len(polylines) == 2
        assert polylines[0][-1][0] == pytest.approx(10)
        assert polylines[1][0][0] == pytest.approx(20)
        assert polylines[1][-1][0] == pytest.approx(30)

    def test_noop_has_no_action(self) -> None:
        entry = self.dictionary.get(Word.from_text("X"))
        assert entry is not None
        assert entry.action is None
        assert len(self._draw("XFX")) == 1

    def test_turn_abs(self) -> None:
        action = build_action({"type": "turn_abs", "angle": 90})
        turtle = Turtle(angle_deg=45, step=10, start=self.start)
        assert action is not None
        action(Word.from_text("A"), turtle)
        turtle.forward()
        end = turtle.polylines()[0][1]
        assert end[0] == pytest.approx(0, abs=1e-9)
        assert end[1] == pytest.approx(10)

    def test_command_sequence(self) -> None:
        self.dictionary.set_action(
            Word.from_text("F+"),
            build_action([{"type": "forward", "draw": True}, {"type": "turn", "direction": 1}]),
        )
        polylines = self._draw("F+F")
        assert len(polylines) == 1
        assert polylines[0][-1][0] == pytest.approx(10)
        assert polylines[0][-1][1] == pytest.approx(10)

    def test_pop_empty_stack(self) -> None:
        with pytest.raises(ConfigError):
            self._draw("]")

    def test_invalid_commands(self) -> None:
        with pytest.raises(ConfigError):
            build_action({"type": "forward"})
        with pytest.raises(ConfigError):
            build_action({"type": "turn", "direction": 2})
        with pytest.raises(ConfigError):
            build_action({"type": "fly"})
        with pytest.raises(ConfigError):
            build_action("F")
        with pytest.raises(ConfigError):
            Turtle(angle_deg=90, step=0)


class TestComputeBounds:
    def test_basic_bounds(self) -> None:
        polylines = [[(0.0, 5.0), (10.0, -2.0)], [(3.0, 8.0), (7.0, 1.0)]]
        min_x, min_y, max_x, max_y = compute_bounds(polylines)
        assert min_x == pytest.approx(0.0)
        assert min_y == pytest.approx(-2.0)
        assert max_x == pytest.approx(10.0)
        assert max_y == pytest.approx(8.0)

    def test_padded_bounds(self) -> None:
        box = compute_bounds([[(0.0, 0.0), (4.0, 2.0)]]).padded(1.5)
        assert box == Bounds(-1.5, -1.5, 5.5, 3.5)
        assert box.width == pytest.approx(7.0)
        assert box.height == pytest.approx(5.0)

    def test_empty_polylines_raises(self) -> None:
        with pytest.raises(ConfigError):
            compute_bounds([])


class TestSvg:
    def test_points_and_viewbox(self) -> None:
        content = render_svg([[(0.0, 0.0), (10.0, 10.0)]], SvgOptions(margin=0, flip_y=False))
        assert 'points="0,0 10,10"' in content
        assert 'viewBox="0 0 10 10"' in content

    def test_flip_y(self) -> None:
        content = render_svg([[(0.0, 0.0), (10.0, 5.0)]], SvgOptions())
        assert "scale(1,-1)" in content

    def test_background_size_and_title(self) -> None:
        options = SvgOptions(
            margin=5,
            width=200.0,
            height=100.0,
            background="#ff0000",
            style=SvgStyle(stroke="red"),
        )
        content = render_svg([[(0.0, 0.0), (10.0, 5.0)]], options, title="Koch <curve>")
        assert 'fill="#ff0000"' in content
        assert 'width="200"' in content
        assert 'height="100"' in content
        assert 'stroke="red"' in content
        assert "Koch &lt;curve&gt;" in content

    def test_attribute_values_are_escaped(self) -> None:
        options = SvgOptions(style=SvgStyle(stroke='a"b'), background="<none>")
        content = render_svg([[(0.0, 0.0), (1.0, 1.0)]], options)
        assert 'stroke="a&quot;b"' in content
        assert 'fill="&lt;none&gt;"' in content

    def test_degenerate_geometry(self) -> None:
        with pytest.raises(ConfigError):
            render_svg([[(0.0, 0.0), (10.0, 0.0)]], SvgOptions(margin=0))

    def test_invalid_options(self) -> None:
        with pytest.raises(ConfigError):
            SvgOptions(precision=15)

    def test_write_svg(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            out_path = os.path.join(tmpdir, "nested", "test.svg")
            write_svg([[(0.0, 0.0), (10.0, 10.0)]], out_path, SvgOptions())
            with open(out_path, encoding="utf-8") as f:
                assert "<svg" in f.read()


class TestPresets:
    def test_unknown_preset(self) -> None:
        with pytest.raises(ConfigError):
            get_preset("nope")

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_preset_draws(self, name: str) -> None:
        preset = get_preset(name)
        preset.grammar()
        fractal = preset.build(max_depth=3)
        turtle = preset.turtle()
        fractal.apply_semantics(turtle, 2)
        assert turtle.polylines()
        assert not turtle.stack

    def test_koch_word(self) -> None:
        fractal = get_preset("koch").build()
        assert str(fractal.generation_at(1)) == "F+F--F+F"

    def test_two_letter_rule_segments_first(self) -> None:
        fractal = get_preset("square_munch").build()
        assert str(fractal.generation_at(1)) == "FF+FF+FF+F-F+F+F-F"

    def test_koch_geometry(self) -> None:
        preset = get_preset("koch")
        turtle = preset.turtle(step=1)
        preset.build().apply_semantics(turtle, 1)
        (line,) = turtle.polylines()
        assert len(line) == 5
        assert line[-1][0] == pytest.approx(3)
        assert line[-1][1] == pytest.approx(0, abs=1e-9)


class TestCLI:
    def test_list(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["list"]) == 0
        out = capsys.readouterr().out
        for name in PRESETS:
            assert name in out

    def test_expand(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["expand", "koch", "--depth", "1"]) == 0
        captured = capsys.readouterr()
        assert captured.out == "F+F--F+F\n"
        assert "length: 8" in captured.err
        assert "letters: +=2 -=2 F=4" in captured.err

    def test_validate(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["validate", "koch"]) == 0
        out = capsys.readouterr().out
        assert "growth: 1 8 36 148" in out

    def test_render(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            out = os.path.join(tmpdir, "out.svg")
            assert main(["render", "dragon", out, "--depth", "4"]) == 0
            with open(out, encoding="utf-8") as f:
                content = f.read()
            assert "<polyline" in content
            assert "Heighway dragon curve (depth 4)" in content

    def test_unknown_preset_returns_error_code(self) -> None:
        with redirect_stderr(io.StringIO()) as err:
            assert main(["expand", "nope"]) == 2
        assert "Config error" in err.getvalue()

    def test_depth_limit_returns_error_code(self) -> None:
        with redirect_stderr(io.StringIO()) as err:
            assert main(["--max-depth", "2", "expand", "koch", "--depth", "3"]) == 2
        assert "exceeds the configured maximum" in err.getvalue()

    def test_negative_max_depth_returns_error_code(self) -> None:
        with redirect_stderr(io.StringIO()) as err:
            assert main(["--max-depth", "-1", "expand", "koch"]) == 2
        assert "max_depth must be >= 0" in err.getvalue()

    def test_letter_limit_returns_error_code(self) -> None:
        with redirect_stderr(io.StringIO()) as err:
            assert main(["--max-letters", "10", "expand", "koch", "--depth", "2"]) == 2
        assert "--max-letters" in err.getvalue()
