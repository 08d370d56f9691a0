"""
Tour Configuration Settings

All configuration constants for the virtual tour viewer.
Modify these values to change viewer behavior.
"""

from pathlib import Path

# ============================================================================
# Project Paths
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
TOUR_CONFIG_PATH = ASSETS_DIR / "config" / "tour.json"

# ============================================================================
# Window Configuration
# ============================================================================

WINDOW_SIZE = (1280, 720)  # Width, Height
ASPECT_RATIO = 16 / 9
WINDOW_TITLE = "Virtual Tour"
RESIZABLE = True

# OpenGL version (4.1 is max for macOS)
GL_VERSION = (4, 1)

CLEAR_COLOR = (0.02, 0.02, 0.03, 1.0)
MODEL_COLOR = (0.78, 0.74, 0.66)
ANCHOR_COLOR = (0.25, 0.81, 1.0)
ANCHOR_ACTIVE_COLOR = (1.0, 0.8, 0.0)
ANCHOR_MARKER_SIZE = 0.08

# ============================================================================
# Camera Settings
# ============================================================================

DEFAULT_FOV = 45.0      # Vertical field of view in degrees (before zoom)
NEAR_PLANE = 0.1
FAR_PLANE = 1000.0
MIN_ZOOM = 0.1          # Zoom divides the field of view; 2.0 halves it

# Orbit controls (damped, like a turntable)
ORBIT_DAMPING_FACTOR = 0.05   # Fraction of pending rotation applied per frame
ORBIT_ROTATE_SPEED = 0.005    # Radians per pixel of mouse drag
ORBIT_ZOOM_SPEED = 0.95       # Dolly scale per scroll step
ORBIT_MIN_DISTANCE = 0.5
ORBIT_MAX_DISTANCE = 50.0
ORBIT_MIN_POLAR = 0.01        # Keep away from the poles to avoid flipping
ORBIT_MAX_POLAR = 3.13

# ============================================================================
# Tour / Transition Settings
# ============================================================================

TRANSITION_DURATION = 2.0     # Seconds for a POI fly-to
INTRO_SETTLE_DELAY = 1.0      # Seconds between the establishing shot and the first fly-to

# Wide shot the camera snaps to once the scene is ready
ESTABLISHING_POSE = {
    "position": [6.0, 8.0, 14.0],
    "orientation": [0.0, 0.0, 0.0],
    "look_at_target": [0.0, 0.0, 0.0],
    "zoom": 1.0,
}

# ============================================================================
# Loading Settings
# ============================================================================

# Timeout applied by the HTTP transport itself (seconds). Local reads have none.
TRANSPORT_TIMEOUT = 30.0

# Pixel size used when rasterising TrueType metrics
FONT_METRIC_SIZE = 64

LOADING_FAILED_MESSAGE = "Failed to load the tour. Please reload the page to retry."
