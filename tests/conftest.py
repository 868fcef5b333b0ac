import os

# Headless test environments have no X display; stop pyglet from opening its
# hidden shadow window when pyglet.window is imported.
os.environ.setdefault("PYGLET_SHADOW_WINDOW", "0")
