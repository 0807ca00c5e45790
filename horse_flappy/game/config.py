# --- Display ---
WIDTH = 480
HEIGHT = 720
FPS = 60

# --- World / Physics ---
GRAVITY = 1200.0            # vertical acceleration (px/s^2), positive = down
MAX_DT = 0.033              # largest single integration step (s)
GROUND_H = 56               # ground band height (px)

# --- Horse ---
HORSE_X_FRAC = 0.22         # horse's fixed x as a fraction of field width
HORSE_W = 40
HORSE_H = 30

# --- Flap impulse (px/s) ---
FLAP_BASE = 5.5 * 60        # impulse at score 0
FLAP_GROWTH = 0.02 * 60     # extra impulse per point
FLAP_CAP = 2.5 * 60         # max extra impulse

# --- Fences ---
FENCE_W = 70
FENCE_SPAWN_MARGIN = 30     # spawn this far right of the visible field
FENCE_EXPIRE_X = -20        # fence removed once its right edge passes this x
GAP_TOP_MARGIN = 40         # min distance from field top to gap top
GAP_BOTTOM_MARGIN = 40      # min distance from gap bottom to ground line

# --- Difficulty (all driven by score) ---
SPEED_BASE = 140.0          # fence speed at score 0 (px/s)
SPEED_PER_POINT = 6.0
SPEED_MAX_BONUS = 220.0
SPAWN_BASE_S = 1.3          # seconds between fences at score 0
SPAWN_PER_POINT_S = 0.01
SPAWN_MAX_CUT_S = 0.7       # interval never drops below 0.6 s
GAP_BASE = 170.0
GAP_PER_POINT = 1.5
GAP_MIN = 120.0
GAP_MAX = 190.0

# --- Persistence ---
BEST_FILE_DEFAULT = "~/.horse_flappy_best"
BEST_KEY = "horseflappy_best"

SEED_DEFAULT = None         # None = fresh random layout every launch

# --- Colors (RGB) ---
COLOR_SKY_TOP = (155, 212, 255)
COLOR_SKY_BOT = (227, 246, 255)
COLOR_GROUND = (109, 76, 65)
COLOR_GRASS = (46, 125, 50)
COLOR_FENCE = (141, 110, 99)
COLOR_FENCE_CAP = (93, 64, 55)
COLOR_HORSE = (121, 85, 72)
COLOR_HORSE_DEAD = (183, 28, 28)
COLOR_FG = (33, 33, 33)
COLOR_OVERLAY = (10, 20, 35, 150)
COLOR_OVERLAY_TEXT = (235, 242, 255)
