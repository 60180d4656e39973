# Cue timing (fixed, not configurable)
CUE_DELAY_MIN_SEC   = 0.5
CUE_DELAY_MAX_SEC   = 2.5

# Pad colors
HOLD_COLOR          = (200, 40, 40)     # idle and holding
CUE_COLOR           = (40, 170, 70)     # cue visible / valid result
TOO_SOON_COLOR      = (40, 80, 200)
TEXT_COLOR          = (255, 255, 255)

# Tabs
TAB_BAR_HEIGHT      = 56
TAB_BG_COLOR        = (30, 33, 38)
TAB_ACTIVE_COLOR    = (70, 76, 88)
TAB_TEXT_COLOR      = (235, 235, 235)

# Scores list
SCORES_BG_COLOR     = (18, 20, 24)
ROW_HEIGHT          = 34
ROW_COLOR           = (36, 40, 46)
ROW_ALT_COLOR       = (30, 33, 38)
DELETE_COLOR        = (210, 70, 70)
DELETE_SIZE         = 24
BUTTON_COLOR        = (230, 230, 230)
BUTTON_WIDTH        = 180
BUTTON_HEIGHT       = 44
PROMPT_BG_COLOR     = (10, 10, 12)
DEFAULT_HISTORY_ROWS = 12

# Misc
EDGE_MARGIN         = 24
STATUS_FONT_SIZE    = 64
HUD_FONT_SIZE       = 28
ROW_FONT_SIZE       = 24
