"""Core test fixtures for the keysmith project."""

import json
import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from keysmith.geometry import GeometryResult, HardwareDescription, build_geometry
from keysmith.layout import Layout, parse_layout


SAMPLE_LAYOUT = """\
---
name: Test Layout
author: Tester
keyboard: test/board
layout_variant: LAYOUT_2x2
---

# Test Layout

## Layer 0: Base
**ID**: base

| C0 | C1 |
|------|------|
| LT(@nav, KC_A) | KC_B@alpha |
| TD(esc_caps) | KC_D{#FF0000} |

## Layer 1: Nav
**ID**: nav
**Color**: #0000FF

| C0 | C1 |
|------|------|
| KC_1 | KC_TRNS |
| _______ | KC_2 |

---

## Key Descriptions
- 0:0:0: A on tap, Nav on hold

## Categories
- alpha: Alphas (#00FF00)

## Tap Dances
- **esc_caps**:
  - Single Tap: KC_ESC
  - Double Tap: KC_CAPS

## Combos
- **bd_enter**: 0:1 + 1:1 -> KC_ENT
"""


# ---- Base Fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_layout_text() -> str:
    """Two layers on a 2x2 grid with a layer-tap, tap dance, combo and colors."""
    return SAMPLE_LAYOUT


@pytest.fixture
def sample_layout(sample_layout_text: str) -> Layout:
    return parse_layout(sample_layout_text).layout


@pytest.fixture
def hardware_data() -> dict[str, Any]:
    """2x2 keys wired into a 2x3 matrix with one LED that has no switch."""
    return {
        "keyboard": "test/board",
        "layout_variant": "LAYOUT_2x2",
        "matrix_rows": 2,
        "matrix_cols": 3,
        "led_count": 5,
        "keys": [
            {"matrix": [0, 0], "x": 0, "y": 0, "led": 0},
            {"matrix": [0, 1], "x": 1, "y": 0, "led": 1},
            {"matrix": [1, 0], "x": 0, "y": 1, "led": 3},
            {"matrix": [1, 1], "x": 1, "y": 1, "led": 2},
        ],
    }


@pytest.fixture
def unlit_hardware_data(hardware_data: dict[str, Any]) -> dict[str, Any]:
    """Same keyboard without any LEDs."""
    data = dict(hardware_data)
    data["led_count"] = None
    data["keys"] = [
        {k: v for k, v in key.items() if k != "led"} for key in hardware_data["keys"]
    ]
    return data


@pytest.fixture
def sample_geometry(hardware_data: dict[str, Any]) -> GeometryResult:
    return build_geometry(HardwareDescription.model_validate(hardware_data))


@pytest.fixture
def unlit_geometry(unlit_hardware_data: dict[str, Any]) -> GeometryResult:
    return build_geometry(HardwareDescription.model_validate(unlit_hardware_data))


# ---- File Fixtures ----


@pytest.fixture
def layout_file(tmp_path: Path, sample_layout_text: str) -> Path:
    path = tmp_path / "layout.md"
    path.write_text(sample_layout_text, encoding="utf-8")
    return path


@pytest.fixture
def hardware_file(tmp_path: Path, hardware_data: dict[str, Any]) -> Path:
    path = tmp_path / "hardware.json"
    path.write_text(json.dumps(hardware_data), encoding="utf-8")
    return path


@pytest.fixture
def unlit_hardware_file(tmp_path: Path, unlit_hardware_data: dict[str, Any]) -> Path:
    path = tmp_path / "unlit.json"
    path.write_text(json.dumps(unlit_hardware_data), encoding="utf-8")
    return path


# ---- Test Isolation Fixtures ----


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Keep user config files and KEYSMITH_* variables out of every test."""
    for name in list(os.environ):
        if name.startswith("KEYSMITH_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    yield
