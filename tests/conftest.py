import os

# Qt widgets and workers are exercised without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
