"""
Centralized path helpers (works with the current flat layout).
"""
from __future__ import annotations
from pathlib import Path

# This file lives at duelsim/core/paths.py
ROOT = Path(__file__).resolve().parents[2]   # project root (one up from 'duelsim')
ASSETS = ROOT / "assets"
MATCHUPS = ASSETS / "matchups"
DEMO_MATCHUP = MATCHUPS / "demo.json"
SETTINGS_FILENAME = ".duelsim_settings.json"
