"""Constants and lookup tables for the golf league scoring engine."""

# Match points awarded per head-to-head matchup (always split between both sides)
TOTAL_POINTS = 20

# Net scores closer than this are treated as a tie
TIE_EPSILON = 0.05

# Play modes
FULL_18 = 'full_18'
NINE_HOLE_FRONT = 'nine_hole_front'
NINE_HOLE_BACK = 'nine_hole_back'
NINE_HOLE_ALTERNATING = 'nine_hole_alternating'

PLAY_MODES = (FULL_18, NINE_HOLE_FRONT, NINE_HOLE_BACK, NINE_HOLE_ALTERNATING)

# Course sides
FRONT = 'front'
BACK = 'back'

# Hole ranges per side (inclusive)
SIDE_HOLES = {
    FRONT: (1, 9),
    BACK: (10, 18),
}

HOLES_PER_SIDE = 9

# Handicap defaults
DEFAULT_BASE_SCORE = 35.0
DEFAULT_MULTIPLIER = 0.9
DEFAULT_MAX_HANDICAP = 9.0
MAX_TOTAL_DROPS = 20

ROUNDING_MODES = ('floor', 'round', 'ceil')
SCORE_SELECTION_MODES = ('all', 'last_n', 'best_of_last')

# Default margin-to-points rule: winner gets 11 + margin (strokes), capped at 16
DEFAULT_WIN_BASE = 11
DEFAULT_WIN_PER_STROKE = 1
DEFAULT_WIN_MAX = 16

# Stroke play point scales
POINT_SCALE_PRESETS = {
    'weighted': [15, 12, 10, 8, 6, 5, 4, 3, 2, 1],
    'pga_style': [25, 20, 16, 13, 10, 8, 6, 4, 3, 2, 1],
}

STROKE_PLAY_TIE_MODES = ('split', 'same')
