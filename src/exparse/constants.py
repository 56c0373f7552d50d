"""Constants for exparse."""

from __future__ import annotations

# Sender value (compared case-insensitively) that marks the human participant.
# Every other sender is billed as model output.
HUMAN_SENDER = "human"

# Pricing unit: rates are dollars per one million tokens (MTok)
TOKENS_PER_MTOK = 1_000_000

# Default rates in dollars per MTok
DEFAULT_INPUT_RATE = 3.0
DEFAULT_OUTPUT_RATE = 15.0

# Config file location
CONFIG_ENV_VAR = "EXPARSE_CONFIG"
CONFIG_DIRNAME = "exparse"
CONFIG_FILENAME = "config.toml"

# Number of conversations shown by `exparse chart` when --top is not given
DEFAULT_CHART_TOP = 10

# Color mappings for CLI display
ROLE_COLORS = {
    "human": "bright_cyan",
    "assistant": "bright_magenta",
}

# Cost thresholds (dollars) for coloring conversation totals
COST_COLORS = (
    (1.0, "bright_red"),
    (0.1, "yellow"),
    (0.0, "bright_green"),
)
